"""Calendar event value objects shared by the calendar and video adapters."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Optional

from booking_service.core.i18n import Translator


@dataclass
class BusyInterval:
    start: str  # ISO-8601
    end: str  # ISO-8601


@dataclass
class Language:
    translate: Translator
    locale: str


@dataclass
class Person:
    name: str
    email: str
    time_zone: str
    language: Language

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "email": self.email,
            "timeZone": self.time_zone,
            "language": {"locale": self.language.locale},
        }


@dataclass
class DestinationCalendarRef:
    integration: str
    external_id: str


@dataclass
class AdditionInformation:
    """Join details produced by a successful downstream event creation."""

    hangout_link: Optional[str] = None
    conference_data: Optional[dict[str, Any]] = None
    entry_points: Optional[list[dict[str, Any]]] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "hangoutLink": self.hangout_link,
            "conferenceData": self.conference_data,
            "entryPoints": self.entry_points,
        }


@dataclass
class CalendarEvent:
    """Adapter-agnostic representation of a booking passed to the Event Manager.

    Built fresh for each confirmation or rejection and never persisted; the
    outcome is projected back onto the booking and its references.
    """

    type: str
    title: str
    description: Optional[str]
    start_time: str  # ISO-8601
    end_time: str  # ISO-8601
    organizer: Person
    attendees: list[Person] = field(default_factory=list)
    agreed_fee: Optional[Decimal] = None
    location: str = ""
    uid: Optional[str] = None
    destination_calendar: Optional[DestinationCalendarRef] = None
    status: Optional[str] = None
    confirmed: bool = False
    rejected: bool = False
    rejection_reason: Optional[str] = None
    addition_information: Optional[AdditionInformation] = None

    def with_changes(self, **changes: Any) -> "CalendarEvent":
        return replace(self, **changes)

    def to_payload(self) -> dict[str, Any]:
        """camelCase dict for webhook subscribers; translator callables are dropped."""
        return {
            "type": self.type,
            "title": self.title,
            "description": self.description,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "agreedFee": str(self.agreed_fee) if self.agreed_fee is not None else None,
            "organizer": self.organizer.to_payload(),
            "attendees": [attendee.to_payload() for attendee in self.attendees],
            "location": self.location,
            "uid": self.uid,
            "destinationCalendar": (
                {
                    "integration": self.destination_calendar.integration,
                    "externalId": self.destination_calendar.external_id,
                }
                if self.destination_calendar
                else None
            ),
            "status": self.status,
            "confirmed": self.confirmed,
            "rejected": self.rejected,
            "rejectionReason": self.rejection_reason,
            "additionInformation": (
                self.addition_information.to_payload() if self.addition_information else None
            ),
        }
