"""Database models for campus events."""

from campus_events.db.models.user import User
from campus_events.db.models.event import Event, EVENT_CATEGORIES
from campus_events.db.models.approval import Approval
from campus_events.db.models.announcement import Announcement, Priority
from campus_events.db.models.notice import Notice, NoticeCategory

__all__ = [
    "User",
    "Event",
    "EVENT_CATEGORIES",
    "Approval",
    "Announcement",
    "Priority",
    "Notice",
    "NoticeCategory",
]
