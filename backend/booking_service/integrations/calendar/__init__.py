"""Calendar integrations and the calendar event value objects"""

from booking_service.integrations.calendar.models import (
    AdditionInformation,
    CalendarEvent,
    DestinationCalendarRef,
    Language,
    Person,
)
from booking_service.integrations.calendar.base import CalendarApiAdapter, NewCalendarEvent

__all__ = [
    "AdditionInformation",
    "CalendarEvent",
    "DestinationCalendarRef",
    "Language",
    "Person",
    "CalendarApiAdapter",
    "NewCalendarEvent",
]
