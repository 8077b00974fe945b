"""Services for campus events."""

from campus_events.services.approvals import ApprovalService
from campus_events.services.events import EventService
from campus_events.services.content import AnnouncementService, NoticeService
from campus_events.services.profiles import ProfileService

__all__ = [
    "ApprovalService",
    "EventService",
    "AnnouncementService",
    "NoticeService",
    "ProfileService",
]
