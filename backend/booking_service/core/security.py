"""Sessions, password hashing and small account helpers."""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from booking_service.core.config import Settings, get_settings
from booking_service.core.errors import NotAuthenticated

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)
_password_hasher = PasswordHasher()

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Session:
    user_id: int


def hash_password(password: str) -> str:
    return _password_hasher.hash(password)


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    try:
        return _password_hasher.verify(hashed, password)
    except (VerificationError, InvalidHashError):
        return False


def create_session_token(user_id: int, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "user_id": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=settings.session_ttl_seconds)).timestamp()),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=JWT_ALGORITHM)


def decode_session_token(token: str, settings: Settings) -> Optional[Session]:
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError as e:
        logger.info(f"Rejected session token: {e}")
        return None

    user_id = payload.get("user_id")
    if not isinstance(user_id, int):
        return None
    return Session(user_id=user_id)


async def get_session(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> Optional[Session]:
    """FastAPI dependency: the caller's session, or None when there is none."""
    if credentials is None:
        return None
    return decode_session_token(credentials.credentials, settings)


async def require_session(session: Optional[Session] = Depends(get_session)) -> Session:
    if session is None:
        raise NotAuthenticated()
    return session


def slugify(text: str) -> str:
    # apostrophes join words: "Zoë's" -> "zoes"
    normalized = unicodedata.normalize("NFKD", re.sub(r"['’]", "", text or ""))
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_text.lower()).strip("-")
    return slug
