"""Approval service for the event review workflow.

Applies reviewer decisions through the approval state machine and
persists them: a compare-and-set status update plus one approval record,
committed or rolled back together. Also serves the review queues and the
per-event audit trail.
"""

import logging
from typing import Optional, Dict, Any, List, Union
from uuid import UUID

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from campus_events.core.approval.machine import ApprovalStateMachine
from campus_events.core.approval.states import (
    ApprovalDecision,
    EventStatus,
    UserRole,
    DECISIVE_DECISIONS,
    REVIEWER_ROLES,
    authorized_stage,
)
from campus_events.core.errors import (
    AlreadyReviewed,
    CampusEventsError,
    Conflict,
    InvalidRole,
    NotFound,
    ValidationError,
)
from campus_events.db.models import Approval, Event, User

logger = logging.getLogger(__name__)


def _reviewer_role(role) -> UserRole:
    try:
        role = UserRole(role)
    except ValueError:
        raise InvalidRole(role)
    if role not in REVIEWER_ROLES:
        raise InvalidRole(role)
    return role


class ApprovalService:
    """
    High-level service for reviewing event proposals.

    Handles:
    - Recording review decisions with persistence
    - Review queues per role and per reviewer
    - Audit trail and reviewer statistics
    """

    def __init__(self, db: Session):
        """
        Initialize the approval service.

        Args:
            db: Database session; the caller commits
        """
        self.db = db

    def update_if(self, event_id: UUID, expected_status: EventStatus, new_fields: Dict[str, Any]) -> bool:
        """
        Compare-and-set update of an event.

        Applies ``new_fields`` only while the event's status is still
        ``expected_status``.
        Loaded instances are not refreshed; expire them after a successful update.

        Returns:
            True if the row was updated
        """
        result = self.db.execute(
            update(Event)
            .where(and_(Event.id == event_id, Event.status == EventStatus(expected_status).value))
            .values(**new_fields)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def review_event(
        self,
        event_id: UUID,
        reviewer: User,
        decision: Union[ApprovalDecision, str],
        *,
        comment: Optional[str] = None,
        expected_status: Optional[Union[EventStatus, str]] = None,
    ) -> Approval:
        """
        Record a reviewer's decision on an event.

        Args:
            event_id: Event under review
            reviewer: Acting user; their current role decides the stage
            decision: approved, rejected or revision_requested
            comment: Optional reviewer comment
            expected_status: Status the reviewer saw; a mismatch is a conflict

        Returns:
            The approval record appended for this decision

        Raises:
            InvalidRole: Reviewer's role does not review events
            NotFound: Event does not exist
            Conflict: Event status changed since the reviewer loaded it
            InvalidTransition: Event already approved or rejected
            Unauthorized: Event is not on the reviewer's stage
            AlreadyReviewed: Role already recorded a decision for the event
        """
        try:
            decision = ApprovalDecision(decision)
        except ValueError:
            raise ValidationError({"decision": f"Unknown decision: {decision}"})

        role = _reviewer_role(reviewer.role)

        event = self.db.get(Event, event_id)
        if event is None:
            raise NotFound("Event", event_id)

        if expected_status is not None and EventStatus(expected_status).value != event.status:
            logger.info(
                "Review conflict on event %s: expected %s, found %s",
                event_id, EventStatus(expected_status).value, event.status,
            )
            raise Conflict(
                f"Event is now {event.status}, expected {EventStatus(expected_status).value}"
            )

        machine = ApprovalStateMachine(event.id, EventStatus(event.status))
        try:
            record = machine.review(role, decision, reviewer_id=reviewer.id, comment=comment)
        except CampusEventsError as e:
            logger.warning("Rejected %s review by %s on event %s: %s", decision.value, reviewer.id, event_id, e)
            raise

        if self._has_decisive_record(event.id, role):
            raise AlreadyReviewed(f"{role.value} has already reviewed this event")

        from_status = EventStatus(record["from_status"])
        to_status = EventStatus(record["to_status"])

        try:
            updated = self.update_if(
                event.id,
                from_status,
                {"status": to_status.value, "updated_at": record["reviewed_at"]},
            )
            if not updated:
                logger.info("Lost review race on event %s at %s", event_id, from_status.value)
                raise Conflict(f"Event is no longer {from_status.value}")
            self.db.expire(event, ["status", "updated_at"])

            approval = Approval(
                event_id=event.id,
                reviewed_by=reviewer.id,
                role=record["role"],
                status=record["status"],
                comment=record["comment"],
                reviewed_at=record["reviewed_at"],
            )
            self.db.add(approval)
            self.db.flush()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Failed to record review on event %s", event_id)
            raise

        logger.info(
            "Event %s %s by %s (%s): %s -> %s",
            event_id, decision.value, reviewer.id, role.value, from_status.value, to_status.value,
        )
        return approval

    def _has_decisive_record(self, event_id: UUID, role: UserRole) -> bool:
        existing = self.db.execute(
            select(Approval.id).where(
                and_(
                    Approval.event_id == event_id,
                    Approval.role == role.value,
                    Approval.status.in_([d.value for d in DECISIVE_DECISIONS]),
                )
            ).limit(1)
        ).first()
        return existing is not None

    def events_pending_for_role(
        self,
        role: Union[UserRole, str],
        *,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Event]:
        """Events waiting on the role's stage, oldest submission first."""
        stage = authorized_stage(_reviewer_role(role))

        query = (
            select(Event)
            .where(Event.status == stage.value)
            .order_by(Event.created_at.asc())
            .offset(offset)
        )
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.scalars(query).all())

    def pending_for_reviewer(self, reviewer: User) -> List[Event]:
        """Role queue minus events this reviewer already left a record on."""
        role = _reviewer_role(reviewer.role)
        stage = authorized_stage(role)

        already_reviewed = select(Approval.event_id).where(
            and_(Approval.reviewed_by == reviewer.id, Approval.role == role.value)
        )
        query = (
            select(Event)
            .where(and_(Event.status == stage.value, Event.id.not_in(already_reviewed)))
            .order_by(Event.created_at.asc())
        )
        return list(self.db.scalars(query).all())

    def approvals_for_event(self, event_id: UUID) -> List[Approval]:
        """Audit trail of an event, oldest decision first."""
        if self.db.get(Event, event_id) is None:
            raise NotFound("Event", event_id)

        query = (
            select(Approval)
            .where(Approval.event_id == event_id)
            .order_by(Approval.reviewed_at.asc())
        )
        return list(self.db.scalars(query).all())

    def approval_history(self, reviewer: User, *, limit: int = 100) -> List[Approval]:
        """Decisions made by a reviewer in their current role, newest first."""
        role = _reviewer_role(reviewer.role)
        query = (
            select(Approval)
            .where(and_(Approval.reviewed_by == reviewer.id, Approval.role == role.value))
            .order_by(Approval.reviewed_at.desc())
            .limit(limit)
        )
        return list(self.db.scalars(query).all())

    def approval_stats(self, reviewer: User) -> Dict[str, int]:
        """Approved/rejected counts for a reviewer plus the size of their role queue."""
        role = _reviewer_role(reviewer.role)

        counts = dict(
            self.db.execute(
                select(Approval.status, func.count(Approval.id))
                .where(and_(Approval.reviewed_by == reviewer.id, Approval.role == role.value))
                .group_by(Approval.status)
            ).all()
        )
        pending = self.db.scalar(
            select(func.count(Event.id)).where(Event.status == authorized_stage(role).value)
        )

        return {
            "approved": counts.get(ApprovalDecision.APPROVED.value, 0),
            "rejected": counts.get(ApprovalDecision.REJECTED.value, 0),
            "pending": pending or 0,
        }

