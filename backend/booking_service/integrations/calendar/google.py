"""Google Calendar as a calendar integration.

The credential key holds ``access_token``, ``expiry_date`` (epoch seconds) and
a Fernet-encrypted ``refresh_token``. Expired access tokens are refreshed
before each call; the refreshed token lives only on this adapter instance.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import aiohttp

from booking_service.core.config import GoogleCalendarConfig
from booking_service.core.errors import ConfigurationError
from booking_service.integrations.calendar.base import NewCalendarEvent
from booking_service.integrations.calendar.models import BusyInterval, CalendarEvent
from booking_service.integrations.calendar.oauth import GoogleCalendarOAuth, GoogleOAuthError

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_TYPE = "google_calendar"
API_BASE = "https://www.googleapis.com/calendar/v3"


class GoogleCalendarError(Exception):
    pass


_REMOTE_ERRORS = (
    aiohttp.ClientError,
    asyncio.TimeoutError,
    ConfigurationError,
    GoogleOAuthError,
    GoogleCalendarError,
)


class GoogleCalendarAdapter:
    type = GOOGLE_CALENDAR_TYPE

    def __init__(
        self,
        key: dict[str, Any],
        config: GoogleCalendarConfig,
        oauth: Optional[GoogleCalendarOAuth] = None,
    ):
        self.key = dict(key or {})
        self.config = config
        self.oauth = oauth or GoogleCalendarOAuth(config)

    async def _access_token(self) -> str:
        expiry = float(self.key.get("expiry_date") or 0)
        access_token = self.key.get("access_token")
        if access_token and expiry - 60 > time.time():
            return access_token

        encrypted_refresh = self.key.get("refresh_token")
        if not encrypted_refresh:
            if access_token:
                return access_token
            raise GoogleOAuthError("Google credential has neither access nor refresh token")

        refresh_token = self.oauth.decrypt_token(encrypted_refresh)
        access_token, expires_in = await self.oauth.refresh_access_token(refresh_token)
        self.key["access_token"] = access_token
        self.key["expiry_date"] = time.time() + expires_in
        return access_token

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        token = await self._access_token()
        timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.request(
                method,
                f"{API_BASE}{path}",
                json=json,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            ) as resp:
                if resp.status >= 400:
                    body = await resp.text()
                    raise GoogleCalendarError(f"{method} {path} returned {resp.status}: {body}")
                if resp.status == 204:
                    return {}
                return await resp.json()

    @staticmethod
    def _calendar_id(event: Optional[CalendarEvent]) -> str:
        destination = event.destination_calendar if event else None
        if destination and destination.integration == GOOGLE_CALENDAR_TYPE:
            return destination.external_id
        return "primary"

    @staticmethod
    def to_google_event(event: CalendarEvent) -> dict[str, Any]:
        """Convert to Google Calendar API event format"""
        tz = event.organizer.time_zone
        return {
            "summary": event.title,
            "description": event.description or "",
            "start": {"dateTime": event.start_time, "timeZone": tz},
            "end": {"dateTime": event.end_time, "timeZone": tz},
            "attendees": [
                {"email": attendee.email, "displayName": attendee.name}
                for attendee in event.attendees
            ],
            "location": event.location or None,
            "reminders": {"useDefault": True},
        }

    def _created(self, data: dict[str, Any]) -> NewCalendarEvent:
        conference_data = data.get("conferenceData")
        return NewCalendarEvent(
            type=self.type,
            uid=data.get("id", ""),
            id=data.get("id", ""),
            url=data.get("htmlLink"),
            hangout_link=data.get("hangoutLink"),
            conference_data=conference_data,
            entry_points=(conference_data or {}).get("entryPoints"),
        )

    async def get_availability(self, date_from: str, date_to: str) -> list[BusyInterval]:
        try:
            data = await self._request(
                "POST",
                "/freeBusy",
                json={"timeMin": date_from, "timeMax": date_to, "items": [{"id": "primary"}]},
            )
        except _REMOTE_ERRORS as e:
            logger.error(f"Google freeBusy query failed: {e}")
            return []

        busy: list[BusyInterval] = []
        for calendar in (data.get("calendars") or {}).values():
            for interval in calendar.get("busy", []):
                busy.append(BusyInterval(start=interval["start"], end=interval["end"]))
        return busy

    async def create_event(self, event: CalendarEvent) -> NewCalendarEvent:
        calendar_id = self._calendar_id(event)
        try:
            data = await self._request(
                "POST",
                f"/calendars/{quote(calendar_id, safe='')}/events",
                json=self.to_google_event(event),
                params={"conferenceDataVersion": 1, "sendUpdates": "none"},
            )
        except _REMOTE_ERRORS as e:
            logger.error(f"❌ Google Calendar event creation failed for {event.uid}: {e}")
            return NewCalendarEvent(type=self.type, uid="", id="", error=str(e) or type(e).__name__)

        logger.info(f"📅 Google Calendar event {data.get('id')} created for {event.uid}")
        return self._created(data)

    async def update_event(self, uid: str, event: CalendarEvent) -> NewCalendarEvent:
        calendar_id = self._calendar_id(event)
        try:
            data = await self._request(
                "PATCH",
                f"/calendars/{quote(calendar_id, safe='')}/events/{quote(uid, safe='')}",
                json=self.to_google_event(event),
                params={"conferenceDataVersion": 1},
            )
        except _REMOTE_ERRORS as e:
            logger.error(f"❌ Google Calendar event update failed for {uid}: {e}")
            return NewCalendarEvent(type=self.type, uid=uid, id=uid, error=str(e) or type(e).__name__)
        return self._created(data)

    async def delete_event(self, uid: str, event: Optional[CalendarEvent] = None) -> bool:
        calendar_id = self._calendar_id(event)
        try:
            await self._request(
                "DELETE",
                f"/calendars/{quote(calendar_id, safe='')}/events/{quote(uid, safe='')}",
            )
        except _REMOTE_ERRORS as e:
            logger.error(f"❌ Google Calendar event deletion failed for {uid}: {e}")
            return False
        return True
