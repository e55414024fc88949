from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from booking_service.integrations.calendar.models import BusyInterval, CalendarEvent


@dataclass
class PartialReference:
    """The subset of a stored booking reference an adapter needs."""

    type: str
    uid: str
    meeting_id: Optional[str] = None
    meeting_password: Optional[str] = None
    meeting_url: Optional[str] = None


@dataclass
class VideoCallData:
    """Handle to a video meeting.

    A failed creation still yields a handle (empty url) but carries ``error``,
    so callers can tell "created without a url" from "not created".
    """

    type: str
    id: str
    password: str
    url: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class VideoApiAdapter(Protocol):
    type: str

    async def get_availability(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
    ) -> list[BusyInterval]:
        ...

    async def create_meeting(self, event: CalendarEvent) -> VideoCallData:
        ...

    async def update_meeting(
        self, reference: PartialReference, event: Optional[CalendarEvent] = None
    ) -> VideoCallData:
        ...

    async def delete_meeting(self, uid: str) -> bool:
        ...
