"""Permission sets for the five fixed roles.

1. Student - reads approved events, announcements and notices
2. Lead - student access plus submitting and managing own proposals
3. Advisor - first-stage reviewer, posts notices
4. HoD - second-stage reviewer, posts notices and announcements
5. Principal - final reviewer, same publishing rights as HoD
"""

from types import MappingProxyType
from typing import FrozenSet, List, Mapping

from campus_events.core.approval.states import UserRole
from .permissions import Resource, Action, Permission


def _build_permissions(*perms: tuple) -> List[str]:
    """Build permission strings from (Resource, Action) tuples."""
    return [str(Permission(r, a)) for r, a in perms]


_READER = (
    (Resource.EVENTS, Action.READ),
    (Resource.EVENTS, Action.LIST),
    (Resource.APPROVALS, Action.READ),
    (Resource.ANNOUNCEMENTS, Action.READ),
    (Resource.ANNOUNCEMENTS, Action.LIST),
    (Resource.NOTICES, Action.READ),
    (Resource.NOTICES, Action.LIST),
    (Resource.USERS, Action.READ),
    (Resource.USERS, Action.UPDATE),  # own profile
)

_PROPOSER = (
    (Resource.EVENTS, Action.CREATE),
    (Resource.EVENTS, Action.UPDATE),
    (Resource.EVENTS, Action.DELETE),
)

_REVIEWER = (
    (Resource.APPROVALS, Action.LIST),
    (Resource.APPROVALS, Action.REVIEW),
    (Resource.USERS, Action.LIST),
)

_NOTICE_PUBLISHER = (
    (Resource.NOTICES, Action.CREATE),
    (Resource.NOTICES, Action.UPDATE),
    (Resource.NOTICES, Action.DELETE),
)

_ANNOUNCER = (
    (Resource.ANNOUNCEMENTS, Action.CREATE),
    (Resource.ANNOUNCEMENTS, Action.UPDATE),
    (Resource.ANNOUNCEMENTS, Action.DELETE),
)

STUDENT_PERMISSIONS = _build_permissions(*_READER)
LEAD_PERMISSIONS = _build_permissions(*_READER, *_PROPOSER)
ADVISOR_PERMISSIONS = _build_permissions(*_READER, *_REVIEWER, *_NOTICE_PUBLISHER)
HOD_PERMISSIONS = _build_permissions(*_READER, *_REVIEWER, *_NOTICE_PUBLISHER, *_ANNOUNCER)
PRINCIPAL_PERMISSIONS = list(HOD_PERMISSIONS)

ROLE_PERMISSIONS: Mapping[UserRole, FrozenSet[str]] = MappingProxyType({
    UserRole.STUDENT: frozenset(STUDENT_PERMISSIONS),
    UserRole.LEAD: frozenset(LEAD_PERMISSIONS),
    UserRole.ADVISOR: frozenset(ADVISOR_PERMISSIONS),
    UserRole.HOD: frozenset(HOD_PERMISSIONS),
    UserRole.PRINCIPAL: frozenset(PRINCIPAL_PERMISSIONS),
})


def get_role_permissions(role: UserRole) -> FrozenSet[str]:
    """Get the permission set of a role."""
    return ROLE_PERMISSIONS[UserRole(role)]
