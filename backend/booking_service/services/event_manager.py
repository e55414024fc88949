"""Materialize a booking in every calendar and video service the organizer linked."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence, Union

from booking_service.core.config import Settings
from booking_service.core.errors import ConfigurationError
from booking_service.integrations.calendar.base import CalendarApiAdapter, NewCalendarEvent
from booking_service.integrations.calendar.models import AdditionInformation, CalendarEvent
from booking_service.integrations.registry import (
    CredentialLike,
    get_calendar_adapter,
    get_video_adapter,
    is_calendar_type,
    is_video_type,
)
from booking_service.integrations.video.base import VideoApiAdapter, VideoCallData

logger = logging.getLogger(__name__)

LOCATION_PREFIX = "integrations:"

CreatedEvent = Union[NewCalendarEvent, VideoCallData]


@dataclass
class EventResult:
    type: str
    success: bool
    uid: str
    created_event: Optional[CreatedEvent] = None
    original_event: Optional[CalendarEvent] = None
    error: Optional[str] = None

    def addition_information(self) -> AdditionInformation:
        created = self.created_event
        if isinstance(created, NewCalendarEvent):
            return AdditionInformation(
                hangout_link=created.hangout_link,
                conference_data=created.conference_data,
                entry_points=created.entry_points,
            )
        if isinstance(created, VideoCallData) and created.url:
            return AdditionInformation(
                entry_points=[{"entryPointType": "video", "uri": created.url, "label": created.url}],
            )
        return AdditionInformation()

    def to_reference(self) -> dict[str, Any]:
        created = self.created_event
        if isinstance(created, VideoCallData):
            return {
                "type": self.type,
                "uid": self.uid,
                "meeting_id": created.id or None,
                "meeting_password": created.password or None,
                "meeting_url": created.url or None,
            }
        return {
            "type": self.type,
            "uid": self.uid,
            "meeting_id": None,
            "meeting_password": getattr(created, "password", None),
            "meeting_url": getattr(created, "url", None),
        }


@dataclass
class CreateResult:
    results: list[EventResult] = field(default_factory=list)
    references_to_create: list[dict[str, Any]] = field(default_factory=list)
    # the event as sent to the calendars, location swapped for the video url
    event: Optional[CalendarEvent] = None

    @property
    def all_failed(self) -> bool:
        return bool(self.results) and all(not result.success for result in self.results)


class EventManager:
    """Fans a calendar event out to the organizer's integrations.

    A video meeting is created only when the event location names a video
    integration the organizer holds a credential for (``integrations:<type>``);
    it is created first so its join url can become the calendar location.
    Every calendar credential then gets its own event.
    """

    def __init__(self, credentials: Sequence[CredentialLike], settings: Settings):
        self.settings = settings
        self.calendar_credentials = [c for c in credentials if is_calendar_type(c.type)]
        self.video_credentials = [c for c in credentials if is_video_type(c.type)]
        # id(EventResult) -> adapter that produced it, for cleanup
        self._adapters_by_result: dict[int, Union[CalendarApiAdapter, VideoApiAdapter]] = {}

    def _video_credential_for(self, location: str) -> Optional[CredentialLike]:
        if not location or not location.startswith(LOCATION_PREFIX):
            return None
        integration = location[len(LOCATION_PREFIX):]
        for credential in self.video_credentials:
            if credential.type in (integration, f"{integration}_video"):
                return credential
        return None

    async def create(self, event: CalendarEvent) -> CreateResult:
        results: list[EventResult] = []

        video_credential = self._video_credential_for(event.location)
        if video_credential is not None:
            video_result = await self._create_video_event(video_credential, event)
            results.append(video_result)
            created = video_result.created_event
            if video_result.success and isinstance(created, VideoCallData) and created.url:
                event = event.with_changes(location=created.url)

        results.extend(
            await asyncio.gather(
                *(self._create_calendar_event(credential, event) for credential in self.calendar_credentials)
            )
        )

        return CreateResult(
            results=results,
            references_to_create=[result.to_reference() for result in results if result.success],
            event=event,
        )

    async def delete(self, results: Sequence[EventResult], event: Optional[CalendarEvent] = None) -> None:
        """Best-effort removal of events this manager created."""
        for result in results:
            if not result.success:
                continue
            adapter = self._adapters_by_result.get(id(result))
            if adapter is None:
                continue
            if isinstance(result.created_event, VideoCallData):
                removed = await adapter.delete_meeting(result.uid)
            else:
                removed = await adapter.delete_event(result.uid, event)
            if not removed:
                logger.error(f"Could not remove {result.type} event {result.uid}")

    async def _create_video_event(self, credential: CredentialLike, event: CalendarEvent) -> EventResult:
        try:
            adapter = get_video_adapter(credential, self.settings)
        except ConfigurationError as e:
            logger.error(f"❌ {credential.type} unavailable: {e.message}")
            return EventResult(type=credential.type, success=False, uid="", original_event=event, error=e.message)

        meeting = await adapter.create_meeting(event)
        result = EventResult(
            type=credential.type,
            success=meeting.ok,
            uid=meeting.id,
            created_event=meeting,
            original_event=event,
            error=meeting.error,
        )
        self._adapters_by_result[id(result)] = adapter
        return result

    async def _create_calendar_event(self, credential: CredentialLike, event: CalendarEvent) -> EventResult:
        try:
            adapter = get_calendar_adapter(credential, self.settings)
        except ConfigurationError as e:
            logger.error(f"❌ {credential.type} unavailable: {e.message}")
            return EventResult(type=credential.type, success=False, uid="", original_event=event, error=e.message)

        created = await adapter.create_event(event)
        result = EventResult(
            type=credential.type,
            success=created.ok,
            uid=created.uid,
            created_event=created,
            original_event=event,
            error=created.error,
        )
        self._adapters_by_result[id(result)] = adapter
        return result
