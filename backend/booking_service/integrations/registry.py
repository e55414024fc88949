from __future__ import annotations

from typing import Any, Callable, Optional, Protocol

from booking_service.core.config import Settings
from booking_service.core.errors import ConfigurationError
from booking_service.integrations.calendar.base import CalendarApiAdapter
from booking_service.integrations.calendar.google import GOOGLE_CALENDAR_TYPE, GoogleCalendarAdapter
from booking_service.integrations.calendar.oauth import GoogleCalendarOAuth
from booking_service.integrations.video.base import VideoApiAdapter
from booking_service.integrations.video.twilio_video import TWILIO_VIDEO_TYPE, TwilioVideoApiAdapter


class CredentialLike(Protocol):
    type: str
    key: Any


def _twilio_video(credential: CredentialLike, settings: Settings) -> VideoApiAdapter:
    if settings.twilio is None:
        raise ConfigurationError(
            "Twilio video is not configured, missing: TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN"
        )
    return TwilioVideoApiAdapter(settings.twilio)


def _google_calendar(credential: CredentialLike, settings: Settings) -> CalendarApiAdapter:
    oauth = GoogleCalendarOAuth(settings.google, settings.encryption_key)
    return GoogleCalendarAdapter(credential.key or {}, settings.google, oauth)


_VIDEO_ADAPTERS: dict[str, Callable[[CredentialLike, Settings], VideoApiAdapter]] = {
    TWILIO_VIDEO_TYPE: _twilio_video,
}

_CALENDAR_ADAPTERS: dict[str, Callable[[CredentialLike, Settings], CalendarApiAdapter]] = {
    GOOGLE_CALENDAR_TYPE: _google_calendar,
}


def is_video_type(credential_type: str) -> bool:
    return credential_type in _VIDEO_ADAPTERS


def is_calendar_type(credential_type: str) -> bool:
    return credential_type in _CALENDAR_ADAPTERS


def get_video_adapter(credential: CredentialLike, settings: Settings) -> Optional[VideoApiAdapter]:
    factory = _VIDEO_ADAPTERS.get(credential.type)
    return factory(credential, settings) if factory else None


def get_calendar_adapter(credential: CredentialLike, settings: Settings) -> Optional[CalendarApiAdapter]:
    factory = _CALENDAR_ADAPTERS.get(credential.type)
    return factory(credential, settings) if factory else None
