"""Event proposal service.

Submission, listing, owner edits and statistics for events. Status is
never written here except on creation; reviews go through
:class:`~campus_events.services.approvals.ApprovalService`.
"""

import logging
from datetime import date
from typing import Optional, Dict, Any, List, Tuple, Union
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session

from campus_events.core.approval.states import (
    EventStatus,
    UserRole,
    INITIAL_STATUS,
    TERMINAL_STATES,
)
from campus_events.core.errors import InvalidTransition, NotFound, Unauthorized, ValidationError
from campus_events.core.rbac import has_permission
from campus_events.core.validation import validate_proposal
from campus_events.db.models import Approval, Event, User

logger = logging.getLogger(__name__)

PROPOSAL_FIELDS = (
    "title",
    "description",
    "date",
    "start_time",
    "end_time",
    "venue",
    "category",
    "budget",
    "expected_attendees",
    "requirements",
)

# Fields the owner can never change directly
PROTECTED_FIELDS = {"id", "status", "submitted_by", "created_at", "updated_at"}


class EventService:
    """Manages event proposals for the dashboard."""

    def __init__(self, db: Session):
        self.db = db

    def create_event(self, data: Dict[str, Any], submitter: User, *, today: Optional[date] = None) -> Event:
        """
        Submit a new event proposal.

        The event starts on the staff advisor's stage.

        Raises:
            Unauthorized: If the submitter may not propose events
            ValidationError: If the proposal is incomplete or inconsistent
        """
        if not has_permission(submitter, "events:create"):
            raise Unauthorized(f"Role {submitter.role} cannot submit event proposals")

        cleaned = validate_proposal(
            {k: v for k, v in data.items() if k in PROPOSAL_FIELDS},
            today=today,
        )

        event = Event(
            **cleaned,
            submitted_by=submitter.id,
            status=INITIAL_STATUS.value,
        )
        self.db.add(event)
        self.db.flush()

        logger.info("Event %s submitted by %s", event.id, submitter.id)
        return event

    def get_event(self, event_id: UUID) -> Event:
        event = self.db.get(Event, event_id)
        if event is None:
            raise NotFound("Event", event_id)
        return event

    def get_visible_event(self, event_id: UUID, viewer: User) -> Event:
        """Get an event, hiding anything not yet approved from students."""
        event = self.get_event(event_id)
        if UserRole(viewer.role) == UserRole.STUDENT and event.status != EventStatus.APPROVED.value:
            raise NotFound("Event", event_id)
        return event

    def list_events(
        self,
        *,
        status: Optional[Union[EventStatus, str]] = None,
        submitted_by: Optional[UUID] = None,
        viewer_role: Optional[Union[UserRole, str]] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Tuple[List[Event], int]:
        """
        List events, newest first.

        Students only ever see approved events.

        Returns:
            (page of events, total matching)
        """
        conditions = []
        if status:
            conditions.append(Event.status == EventStatus(status).value)
        if submitted_by:
            conditions.append(Event.submitted_by == submitted_by)
        if viewer_role is not None and UserRole(viewer_role) == UserRole.STUDENT:
            conditions.append(Event.status == EventStatus.APPROVED.value)

        where = and_(True, *conditions)
        total = self.db.scalar(select(func.count(Event.id)).where(where))
        events = self.db.scalars(
            select(Event)
            .where(where)
            .order_by(Event.created_at.desc())
            .offset(offset)
            .limit(limit)
        ).all()
        return list(events), total or 0

    def _owned_event(self, event_id: UUID, editor: User) -> Event:
        event = self.get_event(event_id)
        if event.submitted_by != editor.id:
            raise Unauthorized("Only the submitter can change this event")
        return event

    def update_event(
        self,
        event_id: UUID,
        changes: Dict[str, Any],
        editor: User,
        *,
        today: Optional[date] = None,
    ) -> Event:
        """
        Owner edit of a proposal that is still under review.

        Raises:
            NotFound: Unknown event
            Unauthorized: Editor is not the submitter
            InvalidTransition: Event already approved or rejected
            ValidationError: Protected field or invalid values
        """
        event = self._owned_event(event_id, editor)

        if EventStatus(event.status) in TERMINAL_STATES:
            raise InvalidTransition(f"Event is {event.status} and can no longer be edited")

        protected = PROTECTED_FIELDS.intersection(changes)
        if protected:
            raise ValidationError({field: "Field cannot be edited" for field in protected})

        unknown = set(changes) - set(PROPOSAL_FIELDS)
        if unknown:
            raise ValidationError({field: "Unknown field" for field in unknown})

        merged = {field: getattr(event, field) for field in PROPOSAL_FIELDS}
        merged.update(changes)
        cleaned = validate_proposal(merged, today=today)

        for field in changes:
            setattr(event, field, cleaned.get(field))
        self.db.flush()

        logger.info("Event %s edited by %s: %s", event.id, editor.id, ", ".join(sorted(changes)))
        return event

    def delete_event(self, event_id: UUID, editor: User) -> None:
        """
        Withdraw a proposal before anyone has reviewed it.

        Raises:
            NotFound: Unknown event
            Unauthorized: Editor is not the submitter
            InvalidTransition: Event has already been reviewed
        """
        event = self._owned_event(event_id, editor)

        reviewed = self.db.scalar(
            select(func.count(Approval.id)).where(Approval.event_id == event.id)
        )
        if event.status != INITIAL_STATUS.value or reviewed:
            raise InvalidTransition("Event has already been reviewed and cannot be deleted")

        self.db.delete(event)
        self.db.flush()
        logger.info("Event %s withdrawn by %s", event_id, editor.id)

    def event_stats(self, user: Optional[User] = None) -> Dict[str, int]:
        """Total, approved and in-review counts; leads only count their own events."""
        base = []
        if user is not None and UserRole(user.role) == UserRole.LEAD:
            base.append(Event.submitted_by == user.id)

        def count(*conditions) -> int:
            return self.db.scalar(
                select(func.count(Event.id)).where(and_(True, *base, *conditions))
            ) or 0

        return {
            "total": count(),
            "approved": count(Event.status == EventStatus.APPROVED.value),
            "pending": count(Event.status.not_in([s.value for s in TERMINAL_STATES])),
        }
