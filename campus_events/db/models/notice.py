import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Uuid
from sqlalchemy.orm import relationship

from campus_events.core.approval.states import Audience
from campus_events.db.base import Base
from campus_events.db.models.announcement import Priority


class NoticeCategory(str, Enum):
    ACADEMIC = "academic"
    EVENTS = "events"
    FACILITIES = "facilities"
    TRAINING = "training"
    ADMINISTRATIVE = "administrative"
    TECHNICAL = "technical"


class Notice(Base):
    __tablename__ = "notices"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(30), nullable=False, index=True)
    priority = Column(String(20), nullable=False, default=Priority.NORMAL.value)
    target_audience = Column(String(20), nullable=False, default=Audience.ALL.value, index=True)
    posted_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    posted_at = Column(DateTime, default=datetime.utcnow, index=True)
    expires_at = Column(DateTime, nullable=True)  # NULL = never expires
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    poster = relationship("User")

    def __repr__(self) -> str:
        return f"<Notice {self.title} [{self.category}]>"
