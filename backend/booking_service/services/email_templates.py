"""HTML bodies for booking notification emails.

Each template takes the recipient's translator so subjects and copy follow
the recipient's locale.
"""

from __future__ import annotations

from html import escape
from typing import Optional

from booking_service.core.i18n import Translator
from booking_service.integrations.calendar.models import AdditionInformation, CalendarEvent

THEME = {
    "text": "#111827",
    "muted": "#6B7280",
    "accent": "#2563EB",
    "danger": "#B91C1C",
}


def _layout(title: str, body: str, color: str) -> str:
    return f"""
    <div style="font-family: Arial, sans-serif; color: {THEME['text']}; max-width: 560px;">
      <h2 style="color: {color};">{escape(title)}</h2>
      {body}
    </div>
    """


def _when(event: CalendarEvent, t: Translator) -> str:
    return (
        f"<p><strong>{escape(t('When'))}:</strong> "
        f"{escape(event.start_time)} – {escape(event.end_time)}</p>"
    )


def _join_details(info: Optional[AdditionInformation], location: str, t: Translator) -> str:
    rows = []
    if location:
        rows.append(f"<p><strong>{escape(t('Where'))}:</strong> {escape(location)}</p>")
    if info and info.hangout_link:
        link = escape(info.hangout_link)
        rows.append(f'<p><strong>{escape(t("Meeting link"))}:</strong> <a href="{link}">{link}</a></p>')
    for entry in (info.entry_points or []) if info else []:
        uri = entry.get("uri")
        if uri and uri != (info.hangout_link if info else None):
            label = entry.get("label") or entry.get("entryPointType") or uri
            rows.append(f'<p><a href="{escape(uri)}">{escape(label)}</a></p>')
    return "".join(rows)


def scheduled_subject(event: CalendarEvent, t: Translator) -> str:
    return f"{t('Confirmed')}: {event.title}"


def scheduled_template(event: CalendarEvent, recipient_name: str, t: Translator) -> str:
    body = (
        f"<p>{escape(t('Hi'))} {escape(recipient_name)},</p>"
        f"<p>{escape(t('Your booking has been confirmed.'))}</p>"
        f"<p><strong>{escape(t('What'))}:</strong> {escape(event.title)}</p>"
        f"{_when(event, t)}"
        f"{_join_details(event.addition_information, event.location, t)}"
    )
    if event.description:
        body += f"<p style=\"color: {THEME['muted']};\">{escape(event.description)}</p>"
    return _layout(t("Your event has been scheduled"), body, THEME["accent"])


def declined_subject(event: CalendarEvent, t: Translator) -> str:
    return f"{t('Declined')}: {event.title}"


def declined_template(event: CalendarEvent, recipient_name: str, t: Translator) -> str:
    body = (
        f"<p>{escape(t('Hi'))} {escape(recipient_name)},</p>"
        f"<p>{escape(t('Your booking request has been declined.'))}</p>"
        f"<p><strong>{escape(t('What'))}:</strong> {escape(event.title)}</p>"
        f"{_when(event, t)}"
    )
    if event.rejection_reason:
        body += (
            f"<p><strong>{escape(t('Reason'))}:</strong> "
            f"{escape(event.rejection_reason)}</p>"
        )
    return _layout(t("Your booking was declined"), body, THEME["danger"])
