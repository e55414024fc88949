"""HTTP tests for the v1 routes, with the database and outbound services faked."""

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from booking_service.api.deps import get_confirmation_workflow, get_db_service
from booking_service.core.config import get_settings
from booking_service.core.errors import RefundFailed
from booking_service.core.security import create_session_token, decode_session_token, hash_password
from booking_service.main import app
from booking_service.models.enums import BookingStatus

from fakes import make_user


@pytest.fixture
def client(settings, store, workflow):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_db_service] = lambda: store
    app.dependency_overrides[get_confirmation_workflow] = lambda: workflow
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth(settings):
    def headers(user_id):
        return {"Authorization": f"Bearer {create_session_token(user_id, settings)}"}

    return headers


# ── Bookings ────────────────────────────────────────────────────────


class TestConfirmRoute:
    def test_requires_session(self, client, booking):
        resp = client.patch("/bookings/confirm", json={"id": booking.id, "confirmed": True})

        assert resp.status_code == 401
        assert resp.json() == {"message": "Not authenticated"}

    def test_invalid_token(self, client, booking):
        resp = client.patch(
            "/bookings/confirm",
            json={"id": booking.id, "confirmed": True},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert resp.status_code == 401

    def test_missing_id(self, client, organizer, auth):
        resp = client.patch("/bookings/confirm", json={"confirmed": True}, headers=auth(organizer.id))

        assert resp.status_code == 400
        assert resp.json() == {"message": "bookingId missing"}

    def test_confirm(self, client, booking, organizer, auth, emails):
        resp = client.patch(
            "/bookings/confirm", json={"id": booking.id, "confirmed": True}, headers=auth(organizer.id)
        )

        assert resp.status_code == 204
        assert resp.content == b""
        assert booking.status == BookingStatus.CONFIRMED.value
        assert len(emails.scheduled) == 1

    def test_reconfirm(self, client, booking, organizer, auth):
        body = {"id": booking.id, "confirmed": True}
        client.patch("/bookings/confirm", json=body, headers=auth(organizer.id))

        resp = client.patch("/bookings/confirm", json=body, headers=auth(organizer.id))

        assert resp.status_code == 400
        assert resp.json() == {"message": "booking already confirmed"}

    def test_not_organizer(self, client, store, booking, auth):
        stranger = store.add_user(make_user(user_id=2, email="other@example.com"))

        resp = client.patch(
            "/bookings/confirm", json={"id": booking.id, "confirmed": True}, headers=auth(stranger.id)
        )

        assert resp.status_code == 401
        assert resp.json() == {"message": "Unauthorized"}

    def test_unknown_booking(self, client, organizer, auth):
        resp = client.patch("/bookings/confirm", json={"id": 404, "confirmed": True}, headers=auth(organizer.id))

        assert resp.status_code == 404
        assert resp.json() == {"message": "booking not found"}

    def test_reject_with_failed_refund(self, client, booking, organizer, auth, payments):
        payments.error = RefundFailed("Refund failed: card_declined")

        resp = client.patch(
            "/bookings/confirm",
            json={"id": booking.id, "confirmed": False, "reason": "No slots"},
            headers=auth(organizer.id),
        )

        assert resp.status_code == 502
        assert resp.json() == {"message": "Refund failed: card_declined"}
        assert booking.status == BookingStatus.PENDING.value

    def test_reject(self, client, booking, organizer, auth, emails):
        resp = client.patch(
            "/bookings/confirm",
            json={"id": booking.id, "confirmed": False, "reason": "No slots", "metadata": {"a": 1}},
            headers=auth(organizer.id),
        )

        assert resp.status_code == 204
        assert booking.rejection_reason == "No slots"
        assert len(emails.declined) == 1


class TestCustomerConfirmRoute:
    def test_confirms(self, client, booking):
        resp = client.post("/bookings/customer-confirm", json={"email": "x@y.com", "appointmentId": "b1"})

        assert resp.status_code == 204
        assert booking.customer_confirmed is True

    def test_unknown_attendee(self, client, booking):
        resp = client.post("/bookings/customer-confirm", json={"email": "nope@y.com", "appointmentId": "b1"})

        assert resp.status_code == 404
        assert resp.json() == {"message": "Attendee with email nope@y.com does not exist"}

    def test_unknown_booking(self, client, booking):
        resp = client.post("/bookings/customer-confirm", json={"email": "x@y.com", "appointmentId": "zz"})

        assert resp.status_code == 404
        assert resp.json() == {"message": "Requested booking not found"}

    def test_missing_fields(self, client):
        resp = client.post("/bookings/customer-confirm", json={"appointmentId": "b1"})

        assert resp.status_code == 400
        assert "email" in resp.json()["message"]


# ── Users ───────────────────────────────────────────────────────────


class TestUsersRoute:
    def test_update_requires_session(self, client, organizer):
        resp = client.patch(f"/users/{organizer.id}", json={"data": {"name": "New"}})

        assert resp.status_code == 401
        assert resp.json() == {"message": "Not authenticated"}

    def test_update_other_user(self, client, store, organizer, auth):
        other = store.add_user(make_user(user_id=2, email="other@example.com"))

        resp = client.patch(f"/users/{other.id}", json={"data": {"name": "Hijack"}}, headers=auth(organizer.id))

        assert resp.status_code == 401
        assert resp.json() == {"message": "Unauthorized"}
        assert other.name == "Coach Carter"

    def test_update_profile(self, client, organizer, auth):
        resp = client.patch(
            f"/users/{organizer.id}",
            json={
                "data": {"name": "Coach C", "timeZone": "Europe/Madrid", "hideBranding": True, "email": "ignored@x.com"},
                "description": "Certified coach",
            },
            headers=auth(organizer.id),
        )

        assert resp.status_code == 200
        body = resp.json()
        assert body["message"] == "User Updated"
        assert body["data"]["name"] == "Coach C"
        assert body["data"]["timeZone"] == "Europe/Madrid"
        assert body["data"]["hideBranding"] is True
        assert body["data"]["bio"] == "Certified coach"
        assert body["data"]["email"] == "coach@example.com"

    def test_bio_from_data(self, client, organizer, auth):
        resp = client.patch(f"/users/{organizer.id}", json={"data": {"bio": "Hello"}}, headers=auth(organizer.id))

        assert resp.json()["data"]["bio"] == "Hello"

    @pytest.mark.parametrize("user_id", ["abc", "0", "-3"])
    def test_delete_invalid_id(self, client, user_id):
        resp = client.delete(f"/users/{user_id}")

        assert resp.status_code == 400
        assert resp.json() == {"message": "Invalid user id"}

    def test_delete_missing(self, client):
        resp = client.delete("/users/99")

        assert resp.status_code == 500
        assert resp.json() == {"message": "Error while deleting a user. Maybe user with id 99 does not exist"}

    def test_delete(self, client, store, organizer):
        resp = client.delete(f"/users/{organizer.id}")

        assert resp.status_code == 204
        assert organizer.id not in store.users


# ── Employers ───────────────────────────────────────────────────────


class TestEmployersRoute:
    def test_create_employer(self, client, store):
        resp = client.post(
            "/employers", json={"employerId": 12, "email": "boss@example.com", "employerName": "Acme Coaching"}
        )

        assert resp.status_code == 201
        user = store.users[resp.json()["calUserId"]]
        assert resp.json()["calUserName"] == "Acme Coaching"
        assert user.username == "acme-coaching"
        assert user.plan == "PRO"
        assert user.completed_onboarding is True

        event_type = next(iter(store.event_types.values()))
        assert (event_type.slug, event_type.length, event_type.requires_confirmation) == ("default-book", 60, True)
        assert event_type.users == [user]
        assert store.webhooks == []

    def test_create_employer_with_webhooks(self, client, store, settings):
        app.dependency_overrides[get_settings] = lambda: replace(settings, webhook_api_url="https://crm.example.com/")

        client.post("/employers", json={"employerId": "12", "email": "boss@example.com", "employerName": "Acme"})

        urls = {w["subscriber_url"] for w in store.webhooks}
        assert len(store.webhooks) == 7
        assert "https://crm.example.com/api/calcom/appointments/confirmed" in urls
        assert "https://crm.example.com/api/calcom/appointments/rescheduled/coachConfirmed" in urls

    def test_duplicate_email(self, client, organizer):
        resp = client.post(
            "/employers", json={"employerId": "1", "email": organizer.email, "employerName": "Again"}
        )

        assert resp.status_code == 422
        assert resp.json() == {"message": "employer_reg_duplicate"}

    def test_same_name_gets_distinct_username(self, client, store):
        first = client.post("/employers", json={"employerId": 12, "email": "a@example.com", "employerName": "Acme"})
        second = client.post("/employers", json={"employerId": 13, "email": "b@example.com", "employerName": "Acme"})

        assert (first.status_code, second.status_code) == (201, 201)
        usernames = {store.users[resp.json()["calUserId"]].username for resp in (first, second)}
        assert usernames == {"acme", "acme-13"}

    def test_credentials(self, client, organizer):
        resp = client.get(f"/employers/{organizer.id}/credentials")

        assert resp.status_code == 200
        assert resp.json() == {"email": "coach@example.com", "password": "s3cret"}

    def test_credentials_with_prefix(self, client, organizer, settings):
        app.dependency_overrides[get_settings] = lambda: replace(settings, employer_id_prefix="emp_")

        resp = client.get(f"/employers/emp_{organizer.id}/credentials")

        assert resp.status_code == 200

    @pytest.mark.parametrize("employer_id", ["99", "abc"])
    def test_credentials_unknown(self, client, employer_id):
        resp = client.get(f"/employers/{employer_id}/credentials")

        assert resp.status_code == 400
        assert resp.json() == {"message": "Couldn't find an account for this email"}


# ── Auth ────────────────────────────────────────────────────────────


class TestSessionRoute:
    def test_login(self, client, organizer, settings):
        organizer.password = hash_password("123456")

        resp = client.post("/auth/session", json={"email": organizer.email, "password": "123456"})

        assert resp.status_code == 200
        session = decode_session_token(resp.json()["accessToken"], settings)
        assert session.user_id == organizer.id

    def test_wrong_password(self, client, organizer):
        organizer.password = hash_password("123456")

        resp = client.post("/auth/session", json={"email": organizer.email, "password": "nope"})

        assert resp.status_code == 401


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"
