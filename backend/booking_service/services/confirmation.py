"""Booking confirmation and rejection.

Within one request the steps run in a fixed order: authorize, idempotency
check, build the calendar event, create downstream events (or refund), persist,
notify attendees, fan out webhooks. The final status write is conditional, so
of two concurrent confirmations only one can win.
"""

from __future__ import annotations

import logging
from datetime import timezone
from typing import Any, Callable, Optional, Protocol, Sequence

from booking_service.core.errors import AlreadyFinalized, AttendeeNotFound, NotFound, Unauthorized
from booking_service.core.i18n import get_translation, resolve_locale
from booking_service.integrations.calendar.models import (
    CalendarEvent,
    DestinationCalendarRef,
    Language,
    Person,
)
from booking_service.models.enums import SchedulingType, WebhookTriggerEvents
from booking_service.services.email_manager import EmailManager
from booking_service.services.event_manager import EventManager
from booking_service.services.payments import PaymentService
from booking_service.services.webhooks import WebhookNotifier, summarize

logger = logging.getLogger(__name__)

DEFAULT_ORGANIZER_NAME = "Unnamed"


class BookingStore(Protocol):
    async def get_user(self, user_id: int) -> Any:
        ...

    async def get_booking(self, booking_id: int) -> Any:
        ...

    async def get_booking_by_uid(self, uid: str) -> Any:
        ...

    async def get_event_type(self, event_type_id: int) -> Any:
        ...

    async def mark_booking_confirmed(self, booking_id: int, references: list[dict]) -> Optional[str]:
        ...

    async def mark_booking_rejected(self, booking_id: int, reason: str) -> Optional[str]:
        ...

    async def set_customer_confirmed(self, uid: str) -> bool:
        ...


EventManagerFactory = Callable[[Sequence[Any]], EventManager]


def to_iso(value: Any) -> str:
    """ISO-8601 in UTC with a trailing Z; naive datetimes are taken as UTC."""
    if isinstance(value, str):
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _language(locale: Optional[str]) -> Language:
    resolved = resolve_locale(locale)
    return Language(translate=get_translation(resolved), locale=resolved)


def build_calendar_event(booking: Any, organizer: Any) -> CalendarEvent:
    attendees = [
        Person(
            name=attendee.name,
            email=attendee.email,
            time_zone=attendee.time_zone,
            language=_language(attendee.locale),
        )
        for attendee in booking.attendees or []
    ]

    destination = booking.destination_calendar or organizer.destination_calendar

    return CalendarEvent(
        type=booking.title,
        title=booking.title,
        description=booking.description,
        start_time=to_iso(booking.start_time),
        end_time=to_iso(booking.end_time),
        organizer=Person(
            name=organizer.name or DEFAULT_ORGANIZER_NAME,
            email=organizer.email,
            time_zone=organizer.time_zone,
            language=_language(organizer.locale),
        ),
        attendees=attendees,
        agreed_fee=booking.agreed_fee,
        location=booking.location or "",
        uid=booking.uid,
        destination_calendar=(
            DestinationCalendarRef(integration=destination.integration, external_id=destination.external_id)
            if destination
            else None
        ),
        status=booking.status,
        confirmed=bool(booking.confirmed),
        rejected=bool(booking.rejected),
        rejection_reason=booking.rejection_reason,
    )


class ConfirmationWorkflow:
    def __init__(
        self,
        store: BookingStore,
        event_manager_factory: EventManagerFactory,
        emails: EmailManager,
        payments: PaymentService,
        webhooks: WebhookNotifier,
    ):
        self.store = store
        self.event_manager_factory = event_manager_factory
        self.emails = emails
        self.payments = payments
        self.webhooks = webhooks

    async def _authorize(self, requestor_id: int, booking_id: int) -> tuple[Any, Any]:
        user = await self.store.get_user(requestor_id)
        if not user:
            raise NotFound("User not found")

        booking = await self.store.get_booking(booking_id)
        if not booking:
            raise NotFound("booking not found")

        if booking.user_id == user.id:
            return user, booking

        event_type = await self.store.get_event_type(booking.event_type_id) if booking.event_type_id else None
        if (
            event_type is not None
            and event_type.scheduling_type == SchedulingType.COLLECTIVE.value
            and any(member.id == user.id for member in event_type.users or [])
        ):
            return user, booking

        raise Unauthorized()

    async def confirm_booking(
        self,
        requestor_id: int,
        booking_id: int,
        confirmed: bool,
        reason: Optional[str] = None,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        user, booking = await self._authorize(requestor_id, booking_id)

        if booking.confirmed:
            raise AlreadyFinalized()
        if confirmed and booking.rejected:
            raise AlreadyFinalized("booking already rejected")

        event = build_calendar_event(booking, user)

        if confirmed:
            await self._confirm(user, booking, event, metadata)
        else:
            await self._reject(booking, event, reason if isinstance(reason, str) else "", metadata)

    async def _confirm(
        self,
        user: Any,
        booking: Any,
        event: CalendarEvent,
        metadata: Optional[dict[str, Any]],
    ) -> None:
        event_manager = self.event_manager_factory(user.credentials or [])
        outcome = await event_manager.create(event)
        if outcome.event is not None:
            event = outcome.event

        if outcome.all_failed:
            logger.error(
                f"BookingCreatingMeetingFailed: booking {booking.uid}, "
                f"{[result.error for result in outcome.results]}"
            )
        else:
            first_success = next((result for result in outcome.results if result.success), None)
            if first_success is not None:
                event = event.with_changes(addition_information=first_success.addition_information())

        status = await self.store.mark_booking_confirmed(booking.id, outcome.references_to_create)
        if status is None:
            logger.warning(f"Booking {booking.uid} was finalized by another request, removing created events")
            await event_manager.delete(outcome.results, event)
            raise AlreadyFinalized()
        logger.info(f"✅ Booking {booking.uid} confirmed ({len(outcome.references_to_create)} references)")

        if not outcome.all_failed:
            await self.emails.send_scheduled_emails(event)

        event = event.with_changes(status=status, confirmed=True)
        deliveries = await self.webhooks.trigger(
            WebhookTriggerEvents.BOOKING_CONFIRMED,
            booking.user_id,
            event.to_payload(),
            booking.uid,
            metadata,
        )
        if deliveries:
            logger.info(f"🔔 BOOKING_CONFIRMED webhooks for {booking.uid}: {summarize(deliveries)}")

    async def _reject(
        self,
        booking: Any,
        event: CalendarEvent,
        reason: str,
        metadata: Optional[dict[str, Any]],
    ) -> None:
        payment_id = await self.payments.refund(booking, event)

        status = await self.store.mark_booking_rejected(booking.id, reason)
        if status is None:
            if payment_id is not None:
                logger.error(
                    f"❌ Booking {booking.uid} was confirmed while being rejected, "
                    f"payment {payment_id} was already refunded"
                )
            raise AlreadyFinalized()
        logger.info(f"🚫 Booking {booking.uid} rejected")

        event = event.with_changes(status=status, rejected=True, rejection_reason=reason)
        deliveries = await self.webhooks.trigger(
            WebhookTriggerEvents.BOOKING_REJECTED,
            booking.user_id,
            event.to_payload(),
            booking.uid,
            metadata,
        )
        if deliveries:
            logger.info(f"🔔 BOOKING_REJECTED webhooks for {booking.uid}: {summarize(deliveries)}")

        await self.emails.send_declined_emails(event)


async def customer_confirm(store: BookingStore, uid: str, email: str) -> None:
    """Mark a booking as confirmed by one of its attendees."""
    booking = await store.get_booking_by_uid(uid)
    if not booking:
        raise NotFound("Requested booking not found")

    if not any(attendee.email == email for attendee in booking.attendees or []):
        raise AttendeeNotFound(f"Attendee with email {email} does not exist")

    await store.set_customer_confirmed(uid)
