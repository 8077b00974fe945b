"""Event proposal model.

An event moves through the approval chain via its ``status`` column;
each reviewer decision is stored as an :class:`Approval`.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Time, Float, Integer, ForeignKey, Text, Uuid, CheckConstraint
from sqlalchemy.orm import relationship

from campus_events.core.approval.states import EventStatus
from campus_events.db.base import Base


EVENT_CATEGORIES = (
    "Academic",
    "Cultural",
    "Technical",
    "Sports",
    "Social Service",
    "Workshop/Seminar",
    "Competition",
    "Exhibition",
    "Other",
)


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{s.value}'" for s in EventStatus)),
            name="ck_events_status",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    
    # Proposal details
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    venue = Column(String(255), nullable=False)
    category = Column(String(50), nullable=False)
    budget = Column(Float, nullable=True)  # rupees
    expected_attendees = Column(Integer, nullable=True)
    requirements = Column(Text, nullable=True)
    
    # Workflow state
    submitted_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    status = Column(String(50), nullable=False, default=EventStatus.PENDING_STAFF_ADVISOR.value, index=True)
    
    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    
    # Relationships
    submitter = relationship("User", back_populates="events")
    approvals = relationship(
        "Approval",
        back_populates="event",
        order_by="Approval.reviewed_at",
        cascade="all, delete-orphan",
    )
    
    @property
    def event_status(self) -> EventStatus:
        return EventStatus(self.status)
    
    def __repr__(self) -> str:
        return f"<Event {self.title} [{self.status}]>"
