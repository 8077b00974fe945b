"""Notice board API endpoints."""

from typing import List, Optional
from uuid import UUID
from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from campus_events.api.deps import get_db, get_current_user
from campus_events.core.approval.states import Audience
from campus_events.core.config import get_settings
from campus_events.core.errors import CampusEventsError, NotFound
from campus_events.core.rbac import require_permission
from campus_events.core.visibility import is_expiring_soon, notice_visible_to
from campus_events.db.models import NoticeCategory, Priority, User
from campus_events.services import NoticeService

router = APIRouter(prefix="/notices", tags=["notices"])


# Schemas
class NoticeCreate(BaseModel):
    title: str = Field(..., max_length=255)
    content: str
    category: NoticeCategory
    priority: Priority = Priority.NORMAL
    target_audience: Audience = Audience.ALL
    expires_at: Optional[datetime] = None


class NoticeUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    category: Optional[NoticeCategory] = None
    priority: Optional[Priority] = None
    target_audience: Optional[Audience] = None
    expires_at: Optional[datetime] = None


class NoticeResponse(BaseModel):
    id: UUID
    title: str
    content: str
    category: str
    priority: str
    target_audience: str
    posted_by: Optional[UUID]
    posted_at: datetime
    expires_at: Optional[datetime]
    updated_at: datetime
    expiring_soon: bool = False

    class Config:
        from_attributes = True


def _to_response(notice, now: datetime) -> NoticeResponse:
    response = NoticeResponse.model_validate(notice)
    response.expiring_soon = is_expiring_soon(
        notice.expires_at, now, days=get_settings().notice_expiring_days
    )
    return response


# Endpoints
@router.get("", response_model=List[NoticeResponse])
@require_permission("notices:list")
async def list_notices(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    category: Optional[NoticeCategory] = None,
):
    """Notices visible to the current user; expired ones are hidden from students and leads."""
    now = datetime.utcnow()
    notices = NoticeService(db).notices_for_role(current_user.role, now=now)
    if category:
        notices = [n for n in notices if n.category == category.value]
    return [_to_response(n, now) for n in notices]


@router.post("", response_model=NoticeResponse, status_code=status.HTTP_201_CREATED)
@require_permission("notices:create")
async def create_notice(
    notice_in: NoticeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        notice = NoticeService(db).create_notice(notice_in.model_dump(), current_user)
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise

    db.refresh(notice)
    return _to_response(notice, datetime.utcnow())


@router.get("/{notice_id}", response_model=NoticeResponse)
@require_permission("notices:read")
async def get_notice(
    notice_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    now = datetime.utcnow()
    notice = NoticeService(db).get_notice(notice_id)
    if not notice_visible_to(notice, current_user.role, now):
        raise NotFound("Notice", notice_id)
    return _to_response(notice, now)


@router.patch("/{notice_id}", response_model=NoticeResponse)
@require_permission("notices:update")
async def update_notice(
    notice_id: UUID,
    notice_in: NoticeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit a notice; only its poster may."""
    try:
        notice = NoticeService(db).update_notice(
            notice_id,
            notice_in.model_dump(exclude_unset=True),
            current_user,
        )
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise

    db.refresh(notice)
    return _to_response(notice, datetime.utcnow())


@router.delete("/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
@require_permission("notices:delete")
async def delete_notice(
    notice_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        NoticeService(db).delete_notice(notice_id, current_user)
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise
    return None
