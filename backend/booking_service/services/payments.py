"""Refunds for rejected bookings."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol

import stripe

from booking_service.core.config import Settings
from booking_service.core.errors import RefundFailed
from booking_service.integrations.calendar.models import CalendarEvent
from booking_service.models.enums import PaymentType

logger = logging.getLogger(__name__)


class PaymentStore(Protocol):
    async def mark_payment_refunded(self, payment_id: int) -> None:
        ...


def refundable_payment(booking: Any) -> Optional[Any]:
    for payment in booking.payment or []:
        if payment.success and not payment.refunded:
            return payment
    return None


class PaymentService:
    def __init__(self, settings: Settings, store: PaymentStore):
        self.api_key = settings.stripe_secret_key
        self.store = store

    async def refund(self, booking: Any, event: CalendarEvent) -> Optional[int]:
        """Refund the booking's captured payment, if there is one, and return its id.

        Raises RefundFailed when a payment exists but cannot be refunded; the
        caller must not reject the booking in that case.
        """
        payment = refundable_payment(booking)
        if payment is None:
            return None

        if payment.type != PaymentType.STRIPE.value:
            raise RefundFailed(f"Cannot refund non Stripe payment for booking {event.uid}")
        if not self.api_key:
            raise RefundFailed("Stripe is not configured, cannot refund payment")

        try:
            refund = await asyncio.to_thread(
                stripe.Refund.create,
                payment_intent=payment.external_id,
                api_key=self.api_key,
            )
        except stripe.StripeError as e:
            logger.error(f"❌ Stripe refund failed for booking {event.uid}: {e}")
            raise RefundFailed(f"Refund failed: {e.user_message or e}") from e

        if not refund or getattr(refund, "status", None) == "failed":
            logger.error(f"❌ Stripe refund for booking {event.uid} returned status failed")
            raise RefundFailed("Refund failed")

        await self.store.mark_payment_refunded(payment.id)
        logger.info(f"💸 Refunded payment {payment.id} for booking {event.uid}")
        return payment.id
