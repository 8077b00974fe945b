"""Approval workflow module for campus events.

Implements the event approval state machine and the role configuration
table every role-gated branch reads from.
"""

from .states import (
    ApprovalDecision,
    EventStatus,
    UserRole,
    ROLE_CONFIG,
    TERMINAL_STATES,
)
from .machine import ApprovalStateMachine, TransitionOutcome, advance

__all__ = [
    "ApprovalDecision",
    "EventStatus",
    "UserRole",
    "ROLE_CONFIG",
    "TERMINAL_STATES",
    "ApprovalStateMachine",
    "TransitionOutcome",
    "advance",
]
