"""Event proposal API endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from campus_events.api.deps import get_db, get_current_user
from campus_events.api.schemas.common import PaginatedResponse
from campus_events.api.schemas.events import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventDetailResponse,
    EventStatsResponse,
)
from campus_events.core.approval.states import EventStatus
from campus_events.core.errors import CampusEventsError
from campus_events.core.rbac import require_permission
from campus_events.db.models import User
from campus_events.services import EventService

router = APIRouter(prefix="/events", tags=["events"])


# Endpoints
@router.get("", response_model=PaginatedResponse[EventResponse])
@require_permission("events:list")
async def list_events(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    status: Optional[EventStatus] = None,
    mine: bool = False,
):
    """List events, newest first. Students only see approved events."""
    events, total = EventService(db).list_events(
        status=status,
        submitted_by=current_user.id if mine else None,
        viewer_role=current_user.role,
        limit=per_page,
        offset=(page - 1) * per_page,
    )
    return PaginatedResponse[EventResponse].create(
        items=[EventResponse.model_validate(e) for e in events],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.get("/stats", response_model=EventStatsResponse)
@require_permission("events:list")
async def get_event_stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Dashboard counters; leads get counts for their own proposals."""
    return EventStatsResponse(**EventService(db).event_stats(current_user))


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
@require_permission("events:create")
async def create_event(
    event_in: EventCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Submit a new event proposal to the staff advisor."""
    try:
        event = EventService(db).create_event(event_in.model_dump(), current_user)
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise

    db.refresh(event)
    return EventResponse.model_validate(event)


@router.get("/{event_id}", response_model=EventDetailResponse)
@require_permission("events:read")
async def get_event(
    event_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get an event with its approval trail."""
    event = EventService(db).get_visible_event(event_id, current_user)
    return EventDetailResponse.model_validate(event)


@router.patch("/{event_id}", response_model=EventResponse)
@require_permission("events:update")
async def update_event(
    event_id: UUID,
    event_in: EventUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit an own proposal while it is still under review."""
    try:
        event = EventService(db).update_event(
            event_id, event_in.model_dump(exclude_unset=True), current_user
        )
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise

    db.refresh(event)
    return EventResponse.model_validate(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
@require_permission("events:delete")
async def delete_event(
    event_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Withdraw an own proposal before anyone reviewed it."""
    try:
        EventService(db).delete_event(event_id, current_user)
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise
    return None
