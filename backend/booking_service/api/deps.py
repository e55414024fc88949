"""Request-scoped service wiring for the v1 routers.

Tests replace these through ``app.dependency_overrides``.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from booking_service.core.config import Settings, get_settings
from booking_service.core.database import get_db
from booking_service.services.confirmation import ConfirmationWorkflow
from booking_service.services.db_service import DBService
from booking_service.services.email_manager import EmailManager
from booking_service.services.event_manager import EventManager
from booking_service.services.payments import PaymentService
from booking_service.services.webhooks import PayloadDispatcher, WebhookNotifier


def get_db_service(db: AsyncSession = Depends(get_db)) -> DBService:
    return DBService(db)


def get_confirmation_workflow(
    store: DBService = Depends(get_db_service),
    settings: Settings = Depends(get_settings),
) -> ConfirmationWorkflow:
    return ConfirmationWorkflow(
        store=store,
        event_manager_factory=lambda credentials: EventManager(credentials, settings),
        emails=EmailManager(settings),
        payments=PaymentService(settings, store),
        webhooks=WebhookNotifier(store, PayloadDispatcher(settings.webhook_timeout_seconds)),
    )
