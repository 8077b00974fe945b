"""User profile and search endpoints."""

from typing import Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from campus_events.api.deps import get_db, get_current_user
from campus_events.api.schemas.auth import UserResponse
from campus_events.core.approval.states import UserRole
from campus_events.core.errors import CampusEventsError
from campus_events.core.rbac import require_permission
from campus_events.db.models import User
from campus_events.services import ProfileService

router = APIRouter(prefix="/users", tags=["users"])


# Schemas
class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    department: Optional[str] = None
    designation: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"extra": "allow"}


class ProfileResponse(BaseModel):
    user: UserResponse
    stats: Dict[str, int]


# Endpoints
@router.get("/search", response_model=List[UserResponse])
@require_permission("users:list")
async def search_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    q: Optional[str] = Query(None, max_length=100),
    role: Optional[UserRole] = None,
):
    """Search users by name, email or department."""
    users = ProfileService(db).search_users(q, role)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/me", response_model=ProfileResponse)
@require_permission("users:read")
async def get_my_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Current user's profile with dashboard statistics."""
    profile = ProfileService(db).get_profile_with_stats(current_user.id)
    return ProfileResponse(
        user=UserResponse.model_validate(profile["user"]),
        stats=profile["stats"],
    )


@router.patch("/me", response_model=UserResponse)
@require_permission("users:update")
async def update_my_profile(
    profile_in: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update contact details. Role and email cannot be changed."""
    changes = profile_in.model_dump(exclude_unset=True)
    changes.update(profile_in.model_extra or {})
    try:
        user = ProfileService(db).update_profile(current_user.id, changes)
        db.commit()
    except CampusEventsError:
        db.rollback()
        raise

    db.refresh(user)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=ProfileResponse)
@require_permission("users:read")
async def get_user_profile(
    user_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    profile = ProfileService(db).get_profile_with_stats(user_id)
    return ProfileResponse(
        user=UserResponse.model_validate(profile["user"]),
        stats=profile["stats"],
    )
