"""Factory functions for creating test database records.

Each factory creates a model instance, adds it to the session, and flushes
so that generated fields (id, created_at, etc.) are populated.
All fields have sensible defaults but can be overridden via keyword arguments.

Usage::

    from tests.factories import create_user, create_event

    def test_something(db_session):
        lead = create_user(db_session, role="lead")
        event = create_event(db_session, submitter=lead)
        assert event.status == "pending_staff_advisor"
"""

from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from campus_events.core.security import get_password_hash
from campus_events.db.models import Announcement, Approval, Event, Notice, User


_counter = 0

TEST_PASSWORD = "testpass123"

# Hashed once; bcrypt is slow
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


def _next_id() -> int:
    """Return a monotonically increasing integer for unique default values."""
    global _counter
    _counter += 1
    return _counter


# ---------------------------------------------------------------------------
# User
# ---------------------------------------------------------------------------


def create_user(
    session: Session,
    *,
    role: str = "student",
    email: Optional[str] = None,
    name: Optional[str] = None,
    department: Optional[str] = "Computer Science",
    password_hash: Optional[str] = None,
) -> User:
    n = _next_id()
    user = User(
        email=email or f"user-{n}@example.edu",
        name=name or f"Test User {n}",
        role=role,
        department=department,
        password_hash=password_hash or TEST_PASSWORD_HASH,
    )
    session.add(user)
    session.flush()
    return user


# ---------------------------------------------------------------------------
# Event
# ---------------------------------------------------------------------------


def event_payload(**overrides) -> dict:
    """A valid proposal body, dated one week ahead."""
    payload = {
        "title": "Hackathon",
        "description": "24-hour coding event",
        "date": (date.today() + timedelta(days=7)).isoformat(),
        "start_time": "09:00",
        "end_time": "17:00",
        "venue": "Main Auditorium",
        "category": "Technical",
        "budget": 5000,
        "expected_attendees": 120,
        "requirements": "Projector",
    }
    payload.update(overrides)
    return payload


def create_event(
    session: Session,
    *,
    submitter: Optional[User] = None,
    status: str = "pending_staff_advisor",
    title: Optional[str] = None,
    event_date: Optional[date] = None,
    category: str = "Technical",
    created_at: Optional[datetime] = None,
) -> Event:
    if submitter is None:
        submitter = create_user(session, role="lead")
    n = _next_id()
    event = Event(
        title=title or f"Test Event {n}",
        description="Test description",
        date=event_date or date.today() + timedelta(days=7),
        start_time=time(10, 0),
        end_time=time(12, 0),
        venue="Seminar Hall",
        category=category,
        submitted_by=submitter.id,
        status=status,
        created_at=created_at or datetime.utcnow(),
    )
    session.add(event)
    session.flush()
    return event


# ---------------------------------------------------------------------------
# Approval
# ---------------------------------------------------------------------------


def create_approval(
    session: Session,
    *,
    event: Event,
    reviewer: User,
    status: str = "approved",
    comment: Optional[str] = None,
    reviewed_at: Optional[datetime] = None,
) -> Approval:
    approval = Approval(
        event_id=event.id,
        reviewed_by=reviewer.id,
        role=reviewer.role,
        status=status,
        comment=comment,
        reviewed_at=reviewed_at or datetime.utcnow(),
    )
    session.add(approval)
    session.flush()
    return approval


# ---------------------------------------------------------------------------
# Announcement / Notice
# ---------------------------------------------------------------------------


def create_announcement(
    session: Session,
    *,
    author: Optional[User] = None,
    target_audience: str = "all",
    priority: str = "normal",
    title: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Announcement:
    if author is None:
        author = create_user(session, role="hod")
    n = _next_id()
    announcement = Announcement(
        title=title or f"Announcement {n}",
        content="Announcement body",
        priority=priority,
        target_audience=target_audience,
        created_by=author.id,
        created_at=created_at or datetime.utcnow(),
    )
    session.add(announcement)
    session.flush()
    return announcement


def create_notice(
    session: Session,
    *,
    author: Optional[User] = None,
    target_audience: str = "all",
    category: str = "academic",
    priority: str = "normal",
    expires_at: Optional[datetime] = None,
    posted_at: Optional[datetime] = None,
    title: Optional[str] = None,
) -> Notice:
    if author is None:
        author = create_user(session, role="advisor")
    n = _next_id()
    notice = Notice(
        title=title or f"Notice {n}",
        content="Notice body",
        category=category,
        priority=priority,
        target_audience=target_audience,
        posted_by=author.id,
        posted_at=posted_at or datetime.utcnow(),
        expires_at=expires_at,
    )
    session.add(notice)
    session.flush()
    return notice
