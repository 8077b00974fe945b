"""Event approval states, reviewer roles and transitions.

State Machine Diagram:

    ┌───────────────────────┐
    │ PENDING_STAFF_ADVISOR │ ← Initial state (lead submits proposal)
    └───────────┬───────────┘
                │ advisor approves
    ┌───────────▼───────────┐
    │      PENDING_HOD      │
    └───────────┬───────────┘
                │ hod approves
    ┌───────────▼───────────┐
    │   PENDING_PRINCIPAL   │
    └───────────┬───────────┘
                │ principal approves
    ┌───────────▼───────────┐
    │       APPROVED        │
    └───────────────────────┘

Any pending stage goes to REJECTED when its reviewer rejects.
REVISION_REQUESTED leaves the event on its current stage.
"""

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, NamedTuple, Optional, Set


class UserRole(str, Enum):
    """The five fixed dashboard roles."""

    STUDENT = "student"
    LEAD = "lead"              # Club/event lead, submits proposals
    ADVISOR = "advisor"        # Staff advisor, first reviewer
    HOD = "hod"                # Head of department
    PRINCIPAL = "principal"    # Final reviewer


class EventStatus(str, Enum):
    """States in the event approval workflow."""

    # Review stages
    PENDING_STAFF_ADVISOR = "pending_staff_advisor"
    PENDING_HOD = "pending_hod"
    PENDING_PRINCIPAL = "pending_principal"

    # Terminal states
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalDecision(str, Enum):
    """Decisions a reviewer can record."""

    APPROVED = "approved"
    REJECTED = "rejected"
    REVISION_REQUESTED = "revision_requested"


class Audience(str, Enum):
    """Target audience tags for announcements and notices."""

    ALL = "all"
    STUDENTS = "students"
    FACULTY = "faculty"
    STAFF = "staff"


class RoleConfig(NamedTuple):
    """Static configuration for one role."""
    label: str
    authorized_stage: Optional[EventStatus]
    audiences: FrozenSet[Audience]


_FACULTY_AUDIENCES = frozenset({Audience.FACULTY, Audience.STAFF})

# Single source for role labels, review stages and audience membership
ROLE_CONFIG: Mapping[UserRole, RoleConfig] = MappingProxyType({
    UserRole.STUDENT: RoleConfig("Student", None, frozenset({Audience.STUDENTS})),
    UserRole.LEAD: RoleConfig("Lead", None, frozenset({Audience.STUDENTS})),
    UserRole.ADVISOR: RoleConfig("Staff Advisor", EventStatus.PENDING_STAFF_ADVISOR, _FACULTY_AUDIENCES),
    UserRole.HOD: RoleConfig("HoD", EventStatus.PENDING_HOD, _FACULTY_AUDIENCES),
    UserRole.PRINCIPAL: RoleConfig("Principal", EventStatus.PENDING_PRINCIPAL, _FACULTY_AUDIENCES),
})

# Where an approval moves the event from each stage
NEXT_STAGE: Mapping[EventStatus, EventStatus] = MappingProxyType({
    EventStatus.PENDING_STAFF_ADVISOR: EventStatus.PENDING_HOD,
    EventStatus.PENDING_HOD: EventStatus.PENDING_PRINCIPAL,
    EventStatus.PENDING_PRINCIPAL: EventStatus.APPROVED,
})

INITIAL_STATUS = EventStatus.PENDING_STAFF_ADVISOR

# Terminal states (no outgoing transitions)
TERMINAL_STATES: Set[EventStatus] = {
    EventStatus.APPROVED,
    EventStatus.REJECTED,
}

# States awaiting a reviewer
PENDING_STATES: Set[EventStatus] = set(NEXT_STAGE)

# Roles that review events
REVIEWER_ROLES: Set[UserRole] = {
    role for role, config in ROLE_CONFIG.items() if config.authorized_stage is not None
}

# Decisions that move the event off its stage
DECISIVE_DECISIONS: Set[ApprovalDecision] = {
    ApprovalDecision.APPROVED,
    ApprovalDecision.REJECTED,
}


def authorized_stage(role: UserRole) -> Optional[EventStatus]:
    """Stage the role reviews, or None for non-reviewers."""
    return ROLE_CONFIG[UserRole(role)].authorized_stage


def role_for_stage(status: EventStatus) -> Optional[UserRole]:
    """Reviewer role responsible for a pending stage."""
    for role, config in ROLE_CONFIG.items():
        if config.authorized_stage == status:
            return role
    return None


def role_label(role: UserRole) -> str:
    return ROLE_CONFIG[UserRole(role)].label


def is_terminal(status: EventStatus) -> bool:
    return EventStatus(status) in TERMINAL_STATES
