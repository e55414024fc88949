from booking_service.models.user import User
from booking_service.models.event_type import EventType, event_type_users
from booking_service.models.booking import Booking, Attendee, BookingReference, Payment
from booking_service.models.integration import Credential, DestinationCalendar, Webhook
from booking_service.models.enums import (
    BookingStatus,
    IdentityProvider,
    PaymentType,
    SchedulingType,
    WebhookTriggerEvents,
)

__all__ = [
    "User",
    "EventType",
    "event_type_users",
    "Booking",
    "Attendee",
    "BookingReference",
    "Payment",
    "Credential",
    "DestinationCalendar",
    "Webhook",
    "BookingStatus",
    "IdentityProvider",
    "PaymentType",
    "SchedulingType",
    "WebhookTriggerEvents",
]
