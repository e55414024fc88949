"""Twilio Video rooms as a video-conferencing integration."""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Callable, Optional

from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from booking_service.core.config import TwilioVideoConfig
from booking_service.integrations.calendar.models import CalendarEvent
from booking_service.integrations.video.base import BusyInterval, PartialReference, VideoCallData

logger = logging.getLogger(__name__)

TWILIO_VIDEO_TYPE = "twilio_video"

_REMOTE_ERRORS = (TwilioException, asyncio.TimeoutError, OSError)


class TwilioVideoApiAdapter:
    """Creates one Twilio Video room per booking.

    Credentials are read once from ``config`` when the adapter is built; the
    adapter holds no other state between calls.
    """

    type = TWILIO_VIDEO_TYPE

    def __init__(self, config: TwilioVideoConfig, client: Optional[Client] = None):
        self.config = config
        self.client = client or Client(config.account_sid, config.auth_token)

    async def _call(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        # twilio's REST client blocks, keep it off the event loop
        return await asyncio.wait_for(
            asyncio.to_thread(fn, *args, **kwargs),
            timeout=self.config.timeout_seconds,
        )

    async def get_availability(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[BusyInterval]:
        # Twilio rooms have no notion of busy time
        return []

    async def create_meeting(self, event: CalendarEvent) -> VideoCallData:
        unique_name = event.uid or uuid.uuid4().hex
        try:
            room = await self._call(
                self.client.video.v1.rooms.create,
                unique_name=unique_name,
                max_participants=self.config.max_participants,
                max_participant_duration=self.config.max_participant_duration,
            )
        except _REMOTE_ERRORS as e:
            error = str(e) or type(e).__name__
            logger.error(f"❌ Twilio room creation failed for {unique_name}: {error}")
            return VideoCallData(type=self.type, id="", password="", url="", error=error)

        logger.info(f"🎥 Twilio room {room.sid} created for {unique_name}")
        return VideoCallData(type=self.type, id=room.sid, password="", url=room.url or "")

    async def update_meeting(
        self, reference: PartialReference, event: Optional[CalendarEvent] = None
    ) -> VideoCallData:
        """Rooms are not editable; the stored reference is handed back as-is."""
        return VideoCallData(
            type=self.type,
            id=reference.meeting_id or "",
            password=reference.meeting_password or "",
            url=reference.meeting_url or "",
        )

    async def delete_meeting(self, uid: str) -> bool:
        """Complete the room. Failures are logged and reported as False."""
        try:
            await self._call(self.client.video.v1.rooms(uid).update, status="completed")
        except _REMOTE_ERRORS as e:
            logger.error(f"❌ Failed to complete Twilio room {uid}: {e}")
            return False
        return True
