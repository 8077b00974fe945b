import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Uuid, CheckConstraint
from sqlalchemy.orm import relationship

from campus_events.core.approval.states import UserRole
from campus_events.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "role IN ({})".format(", ".join(f"'{r.value}'" for r in UserRole)),
            name="ck_users_role",
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)
    department = Column(String(255), nullable=True)
    designation = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    events = relationship("Event", back_populates="submitter")
    approvals = relationship("Approval", back_populates="reviewer")

    @property
    def user_role(self) -> UserRole:
        return UserRole(self.role)

    def __repr__(self) -> str:
        return f"<User {self.email} [{self.role}]>"
