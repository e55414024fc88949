import pytest

from booking_service.core.config import Settings
from booking_service.models.enums import SchedulingType
from booking_service.services.confirmation import ConfirmationWorkflow
from booking_service.services.webhooks import WebhookNotifier

from fakes import (
    FakeDispatcher,
    FakeEmails,
    FakeEventManager,
    FakePayments,
    FakeStore,
    google_result,
    make_booking,
    make_event_type,
    make_user,
)


@pytest.fixture
def settings():
    return Settings(jwt_secret="test-secret-0123456789abcdef0123456789", employer_password="s3cret")


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def organizer(store):
    return store.add_user(make_user())


@pytest.fixture
def booking(store, organizer):
    return store.add_booking(make_booking(user_id=organizer.id))


@pytest.fixture
def event_manager():
    return FakeEventManager(results=[google_result()])


@pytest.fixture
def emails():
    return FakeEmails()


@pytest.fixture
def payments():
    return FakePayments()


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
def workflow(store, event_manager, emails, payments, dispatcher):
    return ConfirmationWorkflow(
        store=store,
        event_manager_factory=lambda credentials: event_manager,
        emails=emails,
        payments=payments,
        webhooks=WebhookNotifier(store, dispatcher),
    )


@pytest.fixture
def collective_event_type(store):
    return store.add_event_type(make_event_type(scheduling_type=SchedulingType.COLLECTIVE.value))
