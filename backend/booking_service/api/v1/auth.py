from fastapi import APIRouter, Depends
from pydantic import BaseModel

from booking_service.api.deps import get_db_service
from booking_service.core.config import Settings, get_settings
from booking_service.core.errors import Unauthorized
from booking_service.core.security import create_session_token, verify_password
from booking_service.services.db_service import DBService

router = APIRouter()


class SessionRequest(BaseModel):
    email: str
    password: str


@router.post("/session")
async def create_session(
    request: SessionRequest,
    db: DBService = Depends(get_db_service),
    settings: Settings = Depends(get_settings),
):
    """Exchange email and password for a bearer token"""
    user = await db.get_user_by_email(request.email)
    if not user or not verify_password(request.password, user.password):
        raise Unauthorized("Invalid email or password")

    return {
        "accessToken": create_session_token(user.id, settings),
        "tokenType": "bearer",
        "expiresIn": settings.session_ttl_seconds,
        "userId": user.id,
    }
