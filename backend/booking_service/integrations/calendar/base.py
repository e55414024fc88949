from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from booking_service.integrations.calendar.models import BusyInterval, CalendarEvent


@dataclass
class NewCalendarEvent:
    """What a calendar integration reports back after writing an event."""

    type: str
    uid: str
    id: str
    url: Optional[str] = None
    password: Optional[str] = None
    hangout_link: Optional[str] = None
    conference_data: Optional[dict[str, Any]] = None
    entry_points: Optional[list[dict[str, Any]]] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class CalendarApiAdapter(Protocol):
    type: str

    async def get_availability(self, date_from: str, date_to: str) -> list[BusyInterval]:
        ...

    async def create_event(self, event: CalendarEvent) -> NewCalendarEvent:
        ...

    async def update_event(self, uid: str, event: CalendarEvent) -> NewCalendarEvent:
        ...

    async def delete_event(self, uid: str, event: Optional[CalendarEvent] = None) -> bool:
        ...
