"""Announcement and notice board services.

Both are plain CRUD with audience-scoped reads; notices additionally
expire for students and leads.
"""

import logging
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List, Union
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.orm import Session

from campus_events.core.approval.states import Audience, UserRole
from campus_events.core.config import get_settings
from campus_events.core.errors import NotFound, Unauthorized, ValidationError
from campus_events.core.rbac import has_permission
from campus_events.core.visibility import (
    EXPIRY_FILTERED_ROLES,
    audiences_for_role,
    is_expiring_soon,
)
from campus_events.db.models import Announcement, Notice, NoticeCategory, Priority, User

logger = logging.getLogger(__name__)


def _clean_content(
    data: Dict[str, Any],
    *,
    allowed: tuple,
    partial: bool = False,
) -> Dict[str, Any]:
    """Validate the fields shared by announcements and notices."""
    errors: Dict[str, str] = {}
    cleaned: Dict[str, Any] = {}

    unknown = set(data) - set(allowed)
    for field in unknown:
        errors[field] = "Field cannot be set"

    for field in ("title", "content"):
        if partial and field not in data:
            continue
        value = data.get(field)
        if value is None or not str(value).strip():
            errors[field] = f"{field.capitalize()} is required"
        else:
            cleaned[field] = str(value).strip()

    enums = {"priority": Priority, "target_audience": Audience, "category": NoticeCategory}
    for field, enum in enums.items():
        if field not in allowed or field not in data:
            continue
        try:
            cleaned[field] = enum(data[field]).value
        except ValueError:
            errors[field] = f"Invalid {field.replace('_', ' ')}: {data[field]}"

    if "category" in allowed and not partial and "category" not in data:
        errors["category"] = "Category is required"

    if "expires_at" in allowed and "expires_at" in data:
        expires_at = data["expires_at"]
        if expires_at is not None and not isinstance(expires_at, datetime):
            try:
                expires_at = datetime.fromisoformat(str(expires_at).replace("Z", "+00:00"))
            except ValueError:
                errors["expires_at"] = "Expiry must be a valid date-time"
        if "expires_at" not in errors:
            if expires_at is not None and expires_at.tzinfo is not None:
                # stored as naive UTC
                expires_at = expires_at.astimezone(timezone.utc).replace(tzinfo=None)
            cleaned["expires_at"] = expires_at

    if errors:
        raise ValidationError(errors)
    return cleaned


class AnnouncementService:
    """Announcements published by the head of department and principal."""

    FIELDS = ("title", "content", "priority", "target_audience")

    def __init__(self, db: Session):
        self.db = db

    def create_announcement(self, data: Dict[str, Any], author: User) -> Announcement:
        if not has_permission(author, "announcements:create"):
            raise Unauthorized(f"Role {author.role} cannot publish announcements")

        cleaned = _clean_content(data, allowed=self.FIELDS)
        announcement = Announcement(**cleaned, created_by=author.id)
        self.db.add(announcement)
        self.db.flush()

        logger.info("Announcement %s published by %s", announcement.id, author.id)
        return announcement

    def get_announcement(self, announcement_id: UUID) -> Announcement:
        announcement = self.db.get(Announcement, announcement_id)
        if announcement is None:
            raise NotFound("Announcement", announcement_id)
        return announcement

    def list_announcements(
        self,
        *,
        priority: Optional[str] = None,
        target_audience: Optional[str] = None,
        created_by: Optional[UUID] = None,
    ) -> List[Announcement]:
        """Unscoped listing with optional filters, newest first."""
        query = select(Announcement)
        if priority:
            query = query.where(Announcement.priority == Priority(priority).value)
        if target_audience:
            query = query.where(Announcement.target_audience == Audience(target_audience).value)
        if created_by:
            query = query.where(Announcement.created_by == created_by)
        return list(self.db.scalars(query.order_by(Announcement.created_at.desc())).all())

    def announcements_for_role(self, role: Union[UserRole, str]) -> List[Announcement]:
        """Announcements addressed to everyone or to the role's audience."""
        audiences = [a.value for a in audiences_for_role(role)]
        query = (
            select(Announcement)
            .where(Announcement.target_audience.in_(audiences))
            .order_by(Announcement.created_at.desc())
        )
        return list(self.db.scalars(query).all())

    def update_announcement(self, announcement_id: UUID, changes: Dict[str, Any], editor: User) -> Announcement:
        announcement = self.get_announcement(announcement_id)
        if announcement.created_by != editor.id:
            raise Unauthorized("Only the author can edit this announcement")

        cleaned = _clean_content(changes, allowed=self.FIELDS, partial=True)
        for field, value in cleaned.items():
            setattr(announcement, field, value)
        self.db.flush()
        return announcement

    def delete_announcement(self, announcement_id: UUID, editor: User) -> None:
        announcement = self.get_announcement(announcement_id)
        if announcement.created_by != editor.id:
            raise Unauthorized("Only the author can delete this announcement")

        self.db.delete(announcement)
        self.db.flush()
        logger.info("Announcement %s deleted by %s", announcement_id, editor.id)


class NoticeService:
    """Notice board with audience scoping and expiry."""

    FIELDS = ("title", "content", "category", "priority", "target_audience", "expires_at")

    def __init__(self, db: Session):
        self.db = db

    def create_notice(self, data: Dict[str, Any], author: User, *, now: Optional[datetime] = None) -> Notice:
        if not has_permission(author, "notices:create"):
            raise Unauthorized(f"Role {author.role} cannot post notices")

        cleaned = _clean_content(data, allowed=self.FIELDS)
        self._check_expiry(cleaned, now)

        notice = Notice(**cleaned, posted_by=author.id)
        self.db.add(notice)
        self.db.flush()

        logger.info("Notice %s posted by %s", notice.id, author.id)
        return notice

    def get_notice(self, notice_id: UUID) -> Notice:
        notice = self.db.get(Notice, notice_id)
        if notice is None:
            raise NotFound("Notice", notice_id)
        return notice

    def list_notices(
        self,
        *,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        target_audience: Optional[str] = None,
        exclude_expired: bool = False,
        now: Optional[datetime] = None,
    ) -> List[Notice]:
        """Unscoped admin listing with optional filters, newest first."""
        query = select(Notice)
        if category:
            query = query.where(Notice.category == NoticeCategory(category).value)
        if priority:
            query = query.where(Notice.priority == Priority(priority).value)
        if target_audience:
            query = query.where(Notice.target_audience == Audience(target_audience).value)
        if exclude_expired:
            query = query.where(self._not_expired(now or datetime.utcnow()))
        return list(self.db.scalars(query.order_by(Notice.posted_at.desc())).all())

    def notices_for_role(self, role: Union[UserRole, str], *, now: Optional[datetime] = None) -> List[Notice]:
        """Notices visible to a role; students and leads do not see expired ones."""
        role = UserRole(role)
        audiences = [a.value for a in audiences_for_role(role)]

        conditions = [Notice.target_audience.in_(audiences)]
        if role in EXPIRY_FILTERED_ROLES:
            conditions.append(self._not_expired(now or datetime.utcnow()))

        query = select(Notice).where(and_(*conditions)).order_by(Notice.posted_at.desc())
        return list(self.db.scalars(query).all())

    def expiring_soon(self, role: Union[UserRole, str], *, now: Optional[datetime] = None) -> List[Notice]:
        now = now or datetime.utcnow()
        days = get_settings().notice_expiring_days
        return [
            n for n in self.notices_for_role(role, now=now)
            if is_expiring_soon(n.expires_at, now, days=days)
        ]

    def update_notice(
        self,
        notice_id: UUID,
        changes: Dict[str, Any],
        editor: User,
        *,
        now: Optional[datetime] = None,
    ) -> Notice:
        notice = self.get_notice(notice_id)
        if notice.posted_by != editor.id:
            raise Unauthorized("Only the poster can edit this notice")

        cleaned = _clean_content(changes, allowed=self.FIELDS, partial=True)
        self._check_expiry(cleaned, now)
        for field, value in cleaned.items():
            setattr(notice, field, value)
        self.db.flush()
        return notice

    def delete_notice(self, notice_id: UUID, editor: User) -> None:
        notice = self.get_notice(notice_id)
        if notice.posted_by != editor.id:
            raise Unauthorized("Only the poster can delete this notice")

        self.db.delete(notice)
        self.db.flush()
        logger.info("Notice %s deleted by %s", notice_id, editor.id)

    @staticmethod
    def _check_expiry(cleaned: Dict[str, Any], now: Optional[datetime]) -> None:
        expires_at = cleaned.get("expires_at")
        if expires_at is not None and expires_at <= (now or datetime.utcnow()):
            raise ValidationError({"expires_at": "Expiry must be in the future"})

    @staticmethod
    def _not_expired(now: datetime):
        return or_(Notice.expires_at.is_(None), Notice.expires_at > now)
