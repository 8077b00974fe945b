"""Audience-scoped visibility for announcements and notices."""

from datetime import datetime, timedelta
from typing import Optional, Set

from campus_events.core.approval.states import Audience, ROLE_CONFIG, UserRole

# Roles that stop seeing a notice once it expires
EXPIRY_FILTERED_ROLES: Set[UserRole] = {UserRole.STUDENT, UserRole.LEAD}


def audiences_for_role(role: UserRole) -> Set[Audience]:
    """Audience tags a role can see, ``all`` included."""
    return {Audience.ALL, *ROLE_CONFIG[UserRole(role)].audiences}


def is_visible_to(target_audience: str, role: UserRole) -> bool:
    """Check whether a record tagged ``target_audience`` is visible to ``role``."""
    return Audience(target_audience) in audiences_for_role(role)


def is_expired(expires_at: Optional[datetime], now: Optional[datetime] = None) -> bool:
    """A notice without an expiry never expires."""
    if expires_at is None:
        return False
    return expires_at <= (now or datetime.utcnow())


def is_expiring_soon(expires_at: Optional[datetime], now: Optional[datetime] = None, days: int = 3) -> bool:
    """True when the notice expires within ``days`` and has not expired yet."""
    if expires_at is None:
        return False
    now = now or datetime.utcnow()
    return now < expires_at <= now + timedelta(days=days)


def notice_visible_to(notice, role: UserRole, now: Optional[datetime] = None) -> bool:
    """Audience check plus expiry filtering for students and leads."""
    if not is_visible_to(notice.target_audience, role):
        return False
    if UserRole(role) in EXPIRY_FILTERED_ROLES and is_expired(notice.expires_at, now):
        return False
    return True
