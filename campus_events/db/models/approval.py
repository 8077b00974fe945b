"""Approval record model.

Immutable audit entry for one reviewer's decision at one stage.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey, Text, Uuid, CheckConstraint
from sqlalchemy.orm import relationship

from campus_events.core.approval.states import ApprovalDecision
from campus_events.db.base import Base


class Approval(Base):
    __tablename__ = "approvals"
    __table_args__ = (
        CheckConstraint(
            "status IN ({})".format(", ".join(f"'{d.value}'" for d in ApprovalDecision)),
            name="ck_approvals_status",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    
    # Actor and the role they held when reviewing
    reviewed_by = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    role = Column(String(20), nullable=False)
    
    # Decision
    status = Column(String(30), nullable=False)
    comment = Column(Text, nullable=True)
    
    reviewed_at = Column(DateTime, default=datetime.utcnow, index=True)
    
    # Relationships
    event = relationship("Event", back_populates="approvals")
    reviewer = relationship("User", back_populates="approvals")
    
    def __repr__(self) -> str:
        return f"<Approval {self.role} {self.status}>"
