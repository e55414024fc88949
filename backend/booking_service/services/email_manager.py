"""Booking notification emails sent through Resend."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import resend

from booking_service.core.config import Settings
from booking_service.integrations.calendar.models import CalendarEvent, Person
from booking_service.services.email_templates import (
    declined_subject,
    declined_template,
    scheduled_subject,
    scheduled_template,
)

logger = logging.getLogger(__name__)


class EmailManager:
    """Sends one email per recipient; a failed recipient is logged and skipped."""

    def __init__(self, settings: Settings):
        self.from_address = settings.email_from_address
        self.api_key = settings.resend_api_key

    async def _send(self, to: str, subject: str, html: str) -> Optional[dict[str, Any]]:
        if not self.api_key:
            logger.warning(f"📧 RESEND_API_KEY missing, not sending '{subject}' to {to}")
            return None

        resend.api_key = self.api_key
        params = {"from": self.from_address, "to": [to], "subject": subject, "html": html}
        try:
            response = await asyncio.to_thread(resend.Emails.send, params)
        except Exception as e:
            # resend raises its own error hierarchy plus requests errors
            logger.error(f"❌ Email send error to {to}: {e}")
            return None

        logger.info(f"📧 Sent '{subject}' to {to}")
        return response

    async def _send_to(self, person: Person, event: CalendarEvent, subject_fn, template_fn) -> None:
        t = person.language.translate
        await self._send(
            person.email,
            subject_fn(event, t),
            template_fn(event, person.name, t),
        )

    async def send_scheduled_emails(self, event: CalendarEvent) -> None:
        """Attendees and the organizer each get a confirmation."""
        recipients = [*event.attendees, event.organizer]
        await asyncio.gather(
            *(self._send_to(person, event, scheduled_subject, scheduled_template) for person in recipients)
        )

    async def send_declined_emails(self, event: CalendarEvent) -> None:
        await asyncio.gather(
            *(
                self._send_to(person, event, declined_subject, declined_template)
                for person in event.attendees
            )
        )
