"""Tests for refunds on rejected bookings."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import stripe

from booking_service.core.config import Settings
from booking_service.core.errors import RefundFailed
from booking_service.services.confirmation import build_calendar_event
from booking_service.services.payments import PaymentService, refundable_payment

from fakes import FakeStore, make_booking, make_user


def payment(payment_id=1, type_="STRIPE", success=True, refunded=False):
    return SimpleNamespace(id=payment_id, type=type_, success=success, refunded=refunded, external_id="pi_123")


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def refund_create(monkeypatch):
    create = MagicMock(return_value=SimpleNamespace(id="re_1", status="succeeded"))
    monkeypatch.setattr(stripe.Refund, "create", create)
    return create


def event_for(booking):
    return build_calendar_event(booking, make_user())


class TestRefundablePayment:
    def test_skips_unpaid_and_refunded(self):
        booking = make_booking(payment=[payment(1, success=False), payment(2, refunded=True), payment(3)])

        assert refundable_payment(booking).id == 3

    def test_none_without_payments(self):
        assert refundable_payment(make_booking()) is None


class TestPaymentService:
    async def test_no_payment_is_a_no_op(self, store, refund_create):
        booking = make_booking()

        refunded = await PaymentService(Settings(stripe_secret_key="sk_test"), store).refund(booking, event_for(booking))

        assert refunded is None
        refund_create.assert_not_called()
        assert store.refunded_payments == []

    async def test_refunds_and_marks_payment(self, store, refund_create):
        booking = make_booking(payment=[payment(7)])

        refunded = await PaymentService(Settings(stripe_secret_key="sk_test"), store).refund(booking, event_for(booking))

        assert refunded == 7
        refund_create.assert_called_once_with(payment_intent="pi_123", api_key="sk_test")
        assert store.refunded_payments == [7]

    async def test_stripe_error(self, store, refund_create):
        refund_create.side_effect = stripe.InvalidRequestError("charge already refunded", param="payment_intent")
        booking = make_booking(payment=[payment(7)])

        with pytest.raises(RefundFailed) as exc_info:
            await PaymentService(Settings(stripe_secret_key="sk_test"), store).refund(booking, event_for(booking))

        assert exc_info.value.status_code == 502
        assert store.refunded_payments == []

    async def test_failed_status(self, store, refund_create):
        refund_create.return_value = SimpleNamespace(id="re_1", status="failed")
        booking = make_booking(payment=[payment(7)])

        with pytest.raises(RefundFailed):
            await PaymentService(Settings(stripe_secret_key="sk_test"), store).refund(booking, event_for(booking))

        assert store.refunded_payments == []

    async def test_missing_api_key(self, store, refund_create):
        booking = make_booking(payment=[payment(7)])

        with pytest.raises(RefundFailed):
            await PaymentService(Settings(stripe_secret_key=None), store).refund(booking, event_for(booking))

        refund_create.assert_not_called()

    async def test_non_stripe_payment(self, store, refund_create):
        booking = make_booking(payment=[payment(7, type_="PAYPAL")])

        with pytest.raises(RefundFailed):
            await PaymentService(Settings(stripe_secret_key="sk_test"), store).refund(booking, event_for(booking))
