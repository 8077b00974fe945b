"""Approval state machine implementation.

Decides whether a reviewer may act on an event and what status results.
Holds no database state; persistence lives in the approval service.
"""

from datetime import datetime
from typing import Optional, Dict, Any, NamedTuple
from uuid import UUID

from campus_events.core.errors import InvalidRole, InvalidTransition, Unauthorized

from .states import (
    ApprovalDecision,
    EventStatus,
    UserRole,
    NEXT_STAGE,
    REVIEWER_ROLES,
    TERMINAL_STATES,
    authorized_stage,
)


class TransitionOutcome(NamedTuple):
    """Result of a single review decision."""
    from_status: EventStatus
    to_status: EventStatus
    role: UserRole
    decision: ApprovalDecision

    @property
    def status_changed(self) -> bool:
        return self.from_status != self.to_status


def advance(current_status: EventStatus, role: UserRole, decision: ApprovalDecision) -> TransitionOutcome:
    """
    Compute the next status for a review decision.

    Args:
        current_status: Status the event is in now
        role: Role of the reviewer
        decision: approved, rejected or revision_requested

    Returns:
        The transition outcome

    Raises:
        InvalidRole: If the role does not review events
        InvalidTransition: If the event is already approved or rejected
        Unauthorized: If the event is not on the role's stage
    """
    current_status = EventStatus(current_status)
    decision = ApprovalDecision(decision)
    try:
        role = UserRole(role)
    except ValueError:
        raise InvalidRole(role)

    if role not in REVIEWER_ROLES:
        raise InvalidRole(role)

    if current_status in TERMINAL_STATES:
        raise InvalidTransition(
            f"Event is already {current_status.value}; no further review is possible"
        )

    stage = authorized_stage(role)
    if current_status != stage:
        raise Unauthorized(
            f"Role {role.value} reviews {stage.value} events, event is {current_status.value}"
        )

    if decision == ApprovalDecision.REJECTED:
        next_status = EventStatus.REJECTED
    elif decision == ApprovalDecision.APPROVED:
        next_status = NEXT_STAGE[current_status]
    else:
        # revision_requested keeps the event on its stage
        next_status = current_status

    return TransitionOutcome(current_status, next_status, role, decision)


class ApprovalStateMachine:
    """
    State machine for a single event's approval workflow.

    Wraps :func:`advance` with the event's current status and keeps the
    records produced by each review, in order.
    """

    def __init__(self, event_id: UUID, current_status: EventStatus):
        self.event_id = event_id
        self._status = EventStatus(current_status)
        self._history: list[Dict[str, Any]] = []

    @property
    def status(self) -> EventStatus:
        """Current status of the event."""
        return self._status

    @property
    def is_terminal(self) -> bool:
        return self._status in TERMINAL_STATES

    def can_review(self, role: UserRole) -> bool:
        """Check if the role may act on the event right now."""
        if self.is_terminal:
            return False
        try:
            return authorized_stage(role) == self._status
        except ValueError:
            return False

    def review(
        self,
        role: UserRole,
        decision: ApprovalDecision,
        *,
        reviewer_id: Optional[UUID] = None,
        comment: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Apply a review decision.

        Returns:
            The approval record to persist for this decision
        """
        outcome = advance(self._status, role, decision)

        record = {
            "event_id": self.event_id,
            "reviewed_by": reviewer_id,
            "role": outcome.role.value,
            "status": outcome.decision.value,
            "comment": comment,
            "from_status": outcome.from_status.value,
            "to_status": outcome.to_status.value,
            "reviewed_at": datetime.utcnow(),
        }
        self._history.append(record)
        self._status = outcome.to_status
        return record

    def get_history(self) -> list[Dict[str, Any]]:
        """Records produced by this machine, oldest first."""
        return self._history.copy()
