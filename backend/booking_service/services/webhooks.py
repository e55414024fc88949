"""Outbound webhooks: subscriber lookup, payload delivery and fan-out.

Payload without a template:
    {"triggerEvent": "BOOKING_CONFIRMED", "createdAt": "...", "payload": {...event, "bookingId": ...}}

With a template, ``{{key}}`` placeholders are filled from the same data
(``triggerEvent`` and ``createdAt`` included, dotted keys reach nested
values). Templates that are valid JSON are sent as ``application/json``,
anything else as ``application/x-www-form-urlencoded``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Protocol, Sequence

import aiohttp

from booking_service.models.enums import WebhookTriggerEvents

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{(.*?)\}\}")


@dataclass
class Subscriber:
    subscriber_url: str
    payload_template: Optional[str] = None


@dataclass
class WebhookDelivery:
    """Outcome of one delivery; failures are values, not exceptions."""

    subscriber_url: str
    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None


class SubscriberRegistry(Protocol):
    async def get_subscribers(self, user_id: int, trigger: WebhookTriggerEvents) -> list[Subscriber]:
        ...


def _lookup(data: dict[str, Any], key: str) -> Any:
    value: Any = data
    for part in key.strip().split("."):
        if not isinstance(value, dict) or part not in value:
            return None
        value = value[part]
    return value


def apply_template(template: str, data: dict[str, Any]) -> str:
    def _fill(match: re.Match) -> str:
        value = _lookup(data, match.group(1))
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return json.dumps(value, default=str)

    return _PLACEHOLDER.sub(_fill, template)


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def build_body(
    trigger: str,
    created_at: str,
    data: dict[str, Any],
    template: Optional[str] = None,
) -> tuple[str, str]:
    """Return (body, content_type) for one subscriber."""
    if not template:
        body = json.dumps({"triggerEvent": trigger, "createdAt": created_at, "payload": data}, default=str)
        return body, "application/json"

    content_type = "application/json" if _is_json(template) else "application/x-www-form-urlencoded"
    body = apply_template(template, {**data, "triggerEvent": trigger, "createdAt": created_at})
    return body, content_type


class PayloadDispatcher:
    """POSTs webhook payloads, one subscriber at a time, with a bounded timeout."""

    def __init__(self, timeout_seconds: float = 10.0):
        self.timeout_seconds = timeout_seconds

    async def send_payload(
        self,
        trigger: str,
        created_at: str,
        subscriber_url: str,
        data: dict[str, Any],
        template: Optional[str] = None,
    ) -> WebhookDelivery:
        body, content_type = build_body(trigger, created_at, data, template)
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    subscriber_url,
                    data=body.encode("utf-8"),
                    headers={"Content-Type": content_type},
                ) as resp:
                    if 200 <= resp.status < 300:
                        return WebhookDelivery(subscriber_url=subscriber_url, ok=True, status_code=resp.status)
                    text = await resp.text()
                    return WebhookDelivery(
                        subscriber_url=subscriber_url,
                        ok=False,
                        status_code=resp.status,
                        error=text[:500],
                    )
        except asyncio.TimeoutError:
            return WebhookDelivery(
                subscriber_url=subscriber_url,
                ok=False,
                error=f"timed out after {self.timeout_seconds}s",
            )
        except (aiohttp.ClientError, ValueError) as e:
            return WebhookDelivery(subscriber_url=subscriber_url, ok=False, error=str(e) or type(e).__name__)


class WebhookNotifier:
    """Fans a booking event out to every subscriber of the organizer."""

    def __init__(self, registry: SubscriberRegistry, dispatcher: PayloadDispatcher):
        self.registry = registry
        self.dispatcher = dispatcher

    async def trigger(
        self,
        trigger: WebhookTriggerEvents,
        user_id: int,
        event: dict[str, Any],
        booking_id: Any,
        metadata: Optional[dict[str, Any]] = None,
    ) -> list[WebhookDelivery]:
        subscribers = await self.registry.get_subscribers(user_id, trigger)
        if not subscribers:
            return []

        created_at = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        data = {**event, "bookingId": booking_id}
        if metadata is not None:
            data["metadata"] = metadata

        deliveries = await asyncio.gather(
            *(self._deliver(trigger, created_at, sub, data) for sub in subscribers)
        )
        return list(deliveries)

    async def _deliver(
        self,
        trigger: WebhookTriggerEvents,
        created_at: str,
        subscriber: Subscriber,
        data: dict[str, Any],
    ) -> WebhookDelivery:
        try:
            delivery = await self.dispatcher.send_payload(
                trigger.value,
                created_at,
                subscriber.subscriber_url,
                data,
                subscriber.payload_template,
            )
        except Exception as e:
            # one subscriber must never break delivery to the others
            delivery = WebhookDelivery(subscriber_url=subscriber.subscriber_url, ok=False, error=repr(e))

        if not delivery.ok:
            logger.error(
                f"Error executing webhook for event: {trigger.value}, "
                f"URL: {subscriber.subscriber_url}: {delivery.error or delivery.status_code}"
            )
        return delivery


def summarize(deliveries: Sequence[WebhookDelivery]) -> str:
    delivered = sum(1 for d in deliveries if d.ok)
    return f"{delivered}/{len(deliveries)} delivered"
