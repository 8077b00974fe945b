"""Approval workflow API endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campus_events.api.deps import get_db, get_current_user
from campus_events.api.schemas.events import (
    ApprovalResponse,
    ApprovalStatsResponse,
    EventResponse,
    ReviewRequest,
)
from campus_events.core.errors import CampusEventsError
from campus_events.core.rbac import require_permission
from campus_events.db.models import User
from campus_events.services import ApprovalService, EventService

router = APIRouter(prefix="/approvals", tags=["approvals"])


@router.get("/pending", response_model=List[EventResponse])
@require_permission("approvals:list")
async def list_pending_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Events waiting on the reviewer's stage that they have not acted on yet."""
    events = ApprovalService(db).pending_for_reviewer(current_user)
    return [EventResponse.model_validate(e) for e in events]


@router.get("/history", response_model=List[ApprovalResponse])
@require_permission("approvals:list")
async def list_review_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    limit: int = Query(100, ge=1, le=500),
):
    """Decisions made by the current reviewer, newest first."""
    approvals = ApprovalService(db).approval_history(current_user, limit=limit)
    return [ApprovalResponse.model_validate(a) for a in approvals]


@router.get("/stats", response_model=ApprovalStatsResponse)
@require_permission("approvals:list")
async def get_review_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return ApprovalStatsResponse(**ApprovalService(db).approval_stats(current_user))


@router.get("/events/{event_id}", response_model=List[ApprovalResponse])
@require_permission("approvals:read")
async def get_event_approvals(
    event_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get the approval trail of an event, oldest decision first."""
    EventService(db).get_visible_event(event_id, current_user)
    approvals = ApprovalService(db).approvals_for_event(event_id)
    return [ApprovalResponse.model_validate(a) for a in approvals]


@router.post(
    "/events/{event_id}",
    response_model=ApprovalResponse,
    status_code=status.HTTP_201_CREATED,
)
@require_permission("approvals:review")
async def review_event(
    event_id: UUID,
    review: ReviewRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Record the current reviewer's decision on an event."""
    try:
        approval = ApprovalService(db).review_event(
            event_id,
            current_user,
            review.decision,
            comment=review.comment,
            expected_status=review.expected_status,
        )
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise

    db.refresh(approval)
    return ApprovalResponse.model_validate(approval)
