"""Tests for the Twilio Video adapter."""

from unittest.mock import MagicMock

import pytest
from twilio.base.exceptions import TwilioRestException

from booking_service.core.config import TwilioVideoConfig
from booking_service.core.errors import ConfigurationError
from booking_service.integrations.video import PartialReference
from booking_service.integrations.video.twilio_video import TwilioVideoApiAdapter
from booking_service.services.confirmation import build_calendar_event

from fakes import make_booking, make_user


@pytest.fixture
def config():
    return TwilioVideoConfig(account_sid="AC123", auth_token="token", max_participants=3)


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def adapter(config, client):
    return TwilioVideoApiAdapter(config, client=client)


@pytest.fixture
def event():
    return build_calendar_event(make_booking(uid="b1"), make_user())


# ── Config ──────────────────────────────────────────────────────────


class TestTwilioVideoConfig:
    def test_missing_keys(self, monkeypatch):
        monkeypatch.delenv("TWILIO_ACCOUNT_SID", raising=False)
        monkeypatch.setenv("TWILIO_AUTH_TOKEN", "token")

        with pytest.raises(ConfigurationError) as exc_info:
            TwilioVideoConfig.from_env()

        assert "TWILIO_ACCOUNT_SID" in exc_info.value.message
        assert "TWILIO_AUTH_TOKEN" not in exc_info.value.message

    def test_optional_limits(self, monkeypatch):
        monkeypatch.setenv("TWILIO_ACCOUNT_SID", "AC123")
        monkeypatch.setenv("TWILIO_AUTH_TOKEN", "token")
        monkeypatch.setenv("TWILIO_MAX_PARTICIPANTS", "4")
        monkeypatch.delenv("TWILIO_MAX_PARTICIPANT_DURATION", raising=False)

        config = TwilioVideoConfig.from_env()

        assert config.max_participants == 4
        assert config.max_participant_duration == 14400

    def test_bad_integer(self, monkeypatch):
        monkeypatch.setenv("TWILIO_ACCOUNT_SID", "AC123")
        monkeypatch.setenv("TWILIO_AUTH_TOKEN", "token")
        monkeypatch.setenv("TWILIO_MAX_PARTICIPANTS", "many")

        with pytest.raises(ConfigurationError):
            TwilioVideoConfig.from_env()


# ── Adapter ─────────────────────────────────────────────────────────


class TestTwilioVideoApiAdapter:
    async def test_availability_is_empty(self, adapter):
        assert await adapter.get_availability() == []

    async def test_create_meeting(self, adapter, client, event):
        client.video.v1.rooms.create.return_value = MagicMock(sid="RM1", url="https://video.twilio.com/v1/Rooms/RM1")

        meeting = await adapter.create_meeting(event)

        assert meeting.ok
        assert meeting.type == "twilio_video"
        assert meeting.id == "RM1"
        assert meeting.url == "https://video.twilio.com/v1/Rooms/RM1"
        client.video.v1.rooms.create.assert_called_once_with(
            unique_name="b1", max_participants=3, max_participant_duration=14400
        )

    async def test_create_failure_returns_empty_url(self, adapter, client, event):
        client.video.v1.rooms.create.side_effect = TwilioRestException(
            status=400, uri="/Rooms", msg="Room exists"
        )

        meeting = await adapter.create_meeting(event)

        assert meeting.url == ""
        assert not meeting.ok
        assert "Room exists" in meeting.error

    async def test_update_remaps_reference(self, adapter, client):
        reference = PartialReference(
            type="twilio_video", uid="RM1", meeting_id="RM1", meeting_password=None, meeting_url="https://x/RM1"
        )

        meeting = await adapter.update_meeting(reference)

        assert (meeting.id, meeting.password, meeting.url) == ("RM1", "", "https://x/RM1")
        client.video.v1.rooms.assert_not_called()

    async def test_delete_completes_room(self, adapter, client):
        assert await adapter.delete_meeting("RM1") is True

        client.video.v1.rooms.assert_called_once_with("RM1")
        client.video.v1.rooms.return_value.update.assert_called_once_with(status="completed")

    async def test_delete_failure_is_false(self, adapter, client):
        client.video.v1.rooms.return_value.update.side_effect = TwilioRestException(
            status=404, uri="/Rooms/RM1", msg="not found"
        )

        assert await adapter.delete_meeting("RM1") is False
