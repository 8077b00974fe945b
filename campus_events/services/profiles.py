"""User profiles, per-role dashboard statistics and user search."""

import logging
from typing import Optional, Dict, Any, List, Union
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from campus_events.core.approval.states import ApprovalDecision, EventStatus, UserRole, REVIEWER_ROLES
from campus_events.core.errors import NotFound, ValidationError
from campus_events.db.models import Announcement, Approval, Event, User

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "department", "designation", "phone")

SEARCH_LIMIT = 50


class ProfileService:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: UUID) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user

    def get_profile_with_stats(self, user_id: UUID) -> Dict[str, Any]:
        """
        Profile plus the dashboard counters for the user's role.

        Students and leads get the events they created and how many of those
        were approved; reviewers get their decisions and announcements.
        """
        user = self.get_user(user_id)

        if UserRole(user.role) in REVIEWER_ROLES:
            stats = {
                "approvals_given": self._count(Approval.id, Approval.reviewed_by == user.id),
                "events_approved": self._count(
                    Approval.id,
                    and_(
                        Approval.reviewed_by == user.id,
                        Approval.status == ApprovalDecision.APPROVED.value,
                    ),
                ),
                "announcements_made": self._count(Announcement.id, Announcement.created_by == user.id),
            }
        else:
            stats = {
                "events_created": self._count(Event.id, Event.submitted_by == user.id),
                "events_approved": self._count(
                    Event.id,
                    and_(Event.submitted_by == user.id, Event.status == EventStatus.APPROVED.value),
                ),
            }

        return {"user": user, "stats": stats}

    def _count(self, column, condition) -> int:
        return self.db.scalar(select(func.count(column)).where(condition)) or 0

    def update_profile(self, user_id: UUID, changes: Dict[str, Any]) -> User:
        """Update contact details; role and email are fixed after registration."""
        user = self.get_user(user_id)

        rejected = set(changes) - set(EDITABLE_FIELDS)
        if rejected:
            raise ValidationError({field: "Field cannot be changed" for field in rejected})

        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError({"name": "Name is required"})

        for field, value in changes.items():
            setattr(user, field, value.strip() if isinstance(value, str) else value)
        self.db.flush()

        logger.info("Profile %s updated: %s", user.id, ", ".join(sorted(changes)))
        return user

    def search_users(
        self,
        query: Optional[str] = None,
        role: Optional[Union[UserRole, str]] = None,
    ) -> List[User]:
        """Case-insensitive match on name, email or department, ordered by name."""
        stmt = select(User)
        if query:
            pattern = f"%{query.strip()}%"
            stmt = stmt.where(
                or_(
                    User.name.ilike(pattern),
                    User.email.ilike(pattern),
                    User.department.ilike(pattern),
                )
            )
        if role:
            stmt = stmt.where(User.role == UserRole(role).value)

        return list(self.db.scalars(stmt.order_by(User.name.asc()).limit(SEARCH_LIMIT)).all())
