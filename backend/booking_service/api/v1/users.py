from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from booking_service.api.deps import get_db_service
from booking_service.core.errors import BadRequest, NotFound, PersistenceFailed, Unauthorized
from booking_service.core.security import Session, require_session
from booking_service.services.db_service import DBService

router = APIRouter()


class UserProfileData(BaseModel):
    """Profile fields a user may edit on their own account."""

    username: Optional[str] = None
    name: Optional[str] = None
    avatar: Optional[str] = None
    time_zone: Optional[str] = Field(default=None, alias="timeZone")
    week_start: Optional[str] = Field(default=None, alias="weekStart")
    hide_branding: Optional[bool] = Field(default=None, alias="hideBranding")
    theme: Optional[str] = None
    completed_onboarding: Optional[bool] = Field(default=None, alias="completedOnboarding")
    bio: Optional[str] = None

    class Config:
        populate_by_name = True
        extra = "ignore"


class UpdateUserRequest(BaseModel):
    data: UserProfileData = Field(default_factory=UserProfileData)
    description: Optional[str] = None


def _parse_user_id(raw: str) -> int:
    try:
        user_id = int(raw)
    except ValueError:
        user_id = 0
    if user_id <= 0:
        raise BadRequest("Invalid user id")
    return user_id


def _public_profile(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "emailVerified": user.email_verified.isoformat() if user.email_verified else None,
        "bio": user.bio,
        "avatar": user.avatar,
        "timeZone": user.time_zone,
        "weekStart": user.week_start,
        "startTime": user.start_time,
        "endTime": user.end_time,
        "bufferTime": user.buffer_time,
        "hideBranding": user.hide_branding,
        "theme": user.theme,
        "createdDate": user.created_date.isoformat() if user.created_date else None,
        "plan": user.plan,
        "completedOnboarding": user.completed_onboarding,
    }


@router.patch("/{user_id}")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    session: Session = Depends(require_session),
    db: DBService = Depends(get_db_service),
):
    """Update the signed-in user's own profile"""
    authenticated = await db.get_user(session.user_id)
    if not authenticated:
        raise NotFound("User not found")

    try:
        target_id = int(user_id)
    except ValueError:
        target_id = None
    if target_id != authenticated.id:
        raise Unauthorized()

    changes = request.data.model_dump(exclude_unset=True, exclude={"bio"})
    bio = request.description if request.description is not None else request.data.bio
    if bio is not None:
        changes["bio"] = bio

    user = await db.update_user(authenticated.id, changes)
    return {"message": "User Updated", "data": _public_profile(user)}


@router.delete("/{user_id}", status_code=204)
async def delete_user(
    user_id: str,
    db: DBService = Depends(get_db_service),
):
    target_id = _parse_user_id(user_id)

    deleted = await db.delete_user(target_id)
    if not deleted:
        raise PersistenceFailed(
            f"Error while deleting a user. Maybe user with id {target_id} does not exist"
        )
    return Response(status_code=204)
