"""Announcement API endpoints."""

from typing import List, Optional
from uuid import UUID
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from campus_events.api.deps import get_db, get_current_user
from campus_events.core.approval.states import Audience
from campus_events.core.errors import CampusEventsError, NotFound
from campus_events.core.rbac import require_permission
from campus_events.core.visibility import is_visible_to
from campus_events.db.models import Priority, User
from campus_events.services import AnnouncementService

router = APIRouter(prefix="/announcements", tags=["announcements"])


# Schemas
class AnnouncementCreate(BaseModel):
    title: str = Field(..., max_length=255)
    content: str
    priority: Priority = Priority.NORMAL
    target_audience: Audience = Audience.ALL


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    priority: Optional[Priority] = None
    target_audience: Optional[Audience] = None


class AnnouncementResponse(BaseModel):
    id: UUID
    title: str
    content: str
    priority: str
    target_audience: str
    created_by: Optional[UUID]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


# Endpoints
@router.get("", response_model=List[AnnouncementResponse])
@require_permission("announcements:list")
async def list_announcements(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Announcements addressed to the current user's audience."""
    announcements = AnnouncementService(db).announcements_for_role(current_user.role)
    return [AnnouncementResponse.model_validate(a) for a in announcements]


@router.post("", response_model=AnnouncementResponse, status_code=status.HTTP_201_CREATED)
@require_permission("announcements:create")
async def create_announcement(
    announcement_in: AnnouncementCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        announcement = AnnouncementService(db).create_announcement(
            announcement_in.model_dump(mode="json"), current_user
        )
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise

    db.refresh(announcement)
    return AnnouncementResponse.model_validate(announcement)


@router.get("/{announcement_id}", response_model=AnnouncementResponse)
@require_permission("announcements:read")
async def get_announcement(
    announcement_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    announcement = AnnouncementService(db).get_announcement(announcement_id)
    if not is_visible_to(announcement.target_audience, current_user.role):
        raise NotFound("Announcement", announcement_id)
    return AnnouncementResponse.model_validate(announcement)


@router.patch("/{announcement_id}", response_model=AnnouncementResponse)
@require_permission("announcements:update")
async def update_announcement(
    announcement_id: UUID,
    announcement_in: AnnouncementUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit an announcement; only its author may."""
    try:
        announcement = AnnouncementService(db).update_announcement(
            announcement_id,
            announcement_in.model_dump(mode="json", exclude_unset=True),
            current_user,
        )
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise

    db.refresh(announcement)
    return AnnouncementResponse.model_validate(announcement)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
@require_permission("announcements:delete")
async def delete_announcement(
    announcement_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        AnnouncementService(db).delete_announcement(announcement_id, current_user)
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise
    return None
