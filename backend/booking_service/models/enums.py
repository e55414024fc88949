from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class SchedulingType(str, Enum):
    ROUND_ROBIN = "ROUND_ROBIN"
    COLLECTIVE = "COLLECTIVE"


class IdentityProvider(str, Enum):
    CAL = "CAL"
    GOOGLE = "GOOGLE"
    SAML = "SAML"


class PaymentType(str, Enum):
    STRIPE = "STRIPE"


class WebhookTriggerEvents(str, Enum):
    BOOKING_CREATED = "BOOKING_CREATED"
    BOOKING_CANCELLED = "BOOKING_CANCELLED"
    BOOKING_RESCHEDULED = "BOOKING_RESCHEDULED"
    BOOKING_CONFIRMED = "BOOKING_CONFIRMED"
    BOOKING_REJECTED = "BOOKING_REJECTED"
    RESCHEDULED_BOOKING_CUSTOMER_CONFIRMED = "RESCHEDULED_BOOKING_CUSTOMER_CONFIRMED"
    RESCHEDULED_BOOKING_COACH_CONFIRMED = "RESCHEDULED_BOOKING_COACH_CONFIRMED"
