"""Tests for sessions, password hashing and settings."""

import jwt
import pytest
from fastapi.security import HTTPAuthorizationCredentials

from booking_service.core.config import Settings
from booking_service.core.errors import ConfigurationError, NotAuthenticated
from booking_service.core.security import (
    Session,
    create_session_token,
    decode_session_token,
    get_session,
    hash_password,
    require_session,
    slugify,
    verify_password,
)


# ── Passwords ───────────────────────────────────────────────────────


class TestPasswords:
    def test_hash_verifies(self):
        hashed = hash_password("123456")

        assert hashed != "123456"
        assert verify_password("123456", hashed)
        assert not verify_password("654321", hashed)

    def test_missing_or_garbage_hash(self):
        assert not verify_password("123456", None)
        assert not verify_password("123456", "plaintext")


# ── Sessions ────────────────────────────────────────────────────────


class TestSessions:
    def test_token_carries_user_id(self, settings):
        token = create_session_token(42, settings)

        assert decode_session_token(token, settings) == Session(user_id=42)

    def test_wrong_secret(self, settings):
        token = create_session_token(42, Settings(jwt_secret="another-secret-0123456789abcdef012345"))

        assert decode_session_token(token, settings) is None

    def test_expired(self, settings):
        token = create_session_token(42, Settings(jwt_secret=settings.jwt_secret, session_ttl_seconds=-10))

        assert decode_session_token(token, settings) is None

    def test_non_integer_user_id(self, settings):
        token = jwt.encode({"user_id": "42"}, settings.jwt_secret, algorithm="HS256")

        assert decode_session_token(token, settings) is None

    async def test_get_session_without_header(self, settings):
        assert await get_session(credentials=None, settings=settings) is None

    async def test_get_session_with_bearer(self, settings):
        creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials=create_session_token(7, settings))

        assert await get_session(credentials=creds, settings=settings) == Session(user_id=7)

    async def test_require_session(self):
        with pytest.raises(NotAuthenticated) as exc_info:
            await require_session(session=None)

        assert exc_info.value.message == "Not authenticated"
        assert await require_session(session=Session(user_id=1)) == Session(user_id=1)


# ── Helpers ─────────────────────────────────────────────────────────


def test_slugify():
    assert slugify("Zoë's Coaching Co.") == "zoes-coaching-co"
    assert slugify("Zoë’s Coaching") == "zoes-coaching"
    assert slugify("Acme / Coaching") == "acme-coaching"
    assert slugify("  ") == ""


# ── Settings ────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("EMPLOYER_PASSWORD", "TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "WEBHOOK_API_URL"):
            monkeypatch.setenv(name, "")

        settings = Settings.from_env()

        assert settings.employer_password == "123456"
        assert settings.twilio is None
        assert settings.webhook_api_url is None

    def test_twilio_configured(self, monkeypatch):
        monkeypatch.setenv("TWILIO_ACCOUNT_SID", "AC123")
        monkeypatch.setenv("TWILIO_AUTH_TOKEN", "token")

        assert Settings.from_env().twilio.account_sid == "AC123"

    def test_bad_timeout(self, monkeypatch):
        monkeypatch.setenv("WEBHOOK_TIMEOUT_SECONDS", "soon")

        with pytest.raises(ConfigurationError):
            Settings.from_env()
