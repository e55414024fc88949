import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from booking_service.api.deps import get_db_service
from booking_service.core.config import Settings, get_settings
from booking_service.core.database import utcnow
from booking_service.core.errors import BadRequest, DuplicateAccount
from booking_service.core.security import hash_password, slugify
from booking_service.models.enums import IdentityProvider, WebhookTriggerEvents
from booking_service.services.db_service import DBService

logger = logging.getLogger(__name__)

router = APIRouter()

# Trigger -> path below {WEBHOOK_API_URL}/api/calcom/appointments
EMPLOYER_WEBHOOK_PATHS = {
    WebhookTriggerEvents.BOOKING_CREATED: "created",
    WebhookTriggerEvents.BOOKING_CANCELLED: "cancelled",
    WebhookTriggerEvents.BOOKING_RESCHEDULED: "rescheduled",
    WebhookTriggerEvents.BOOKING_CONFIRMED: "confirmed",
    WebhookTriggerEvents.BOOKING_REJECTED: "rejected",
    WebhookTriggerEvents.RESCHEDULED_BOOKING_CUSTOMER_CONFIRMED: "rescheduled/customerConfirmed",
    WebhookTriggerEvents.RESCHEDULED_BOOKING_COACH_CONFIRMED: "rescheduled/coachConfirmed",
}


class CreateEmployerRequest(BaseModel):
    employer_id: str = Field(alias="employerId")
    email: str
    employer_name: str = Field(alias="employerName")

    class Config:
        populate_by_name = True
        coerce_numbers_to_str = True


def employer_webhooks(user_id: int, webhook_api_url: str) -> list[dict]:
    base = webhook_api_url.rstrip("/")
    return [
        {
            "user_id": user_id,
            "subscriber_url": f"{base}/api/calcom/appointments/{path}",
            "event_triggers": [trigger.value],
        }
        for trigger, path in EMPLOYER_WEBHOOK_PATHS.items()
    ]


async def available_username(db: DBService, employer_name: str, employer_id: str) -> str:
    username = slugify(employer_name)
    if await db.get_user_by_username(username):
        username = f"{username}-{slugify(employer_id)}"
    return username


@router.post("", status_code=201)
async def create_employer(
    request: CreateEmployerRequest,
    db: DBService = Depends(get_db_service),
    settings: Settings = Depends(get_settings),
):
    """Provision a coach account with a default event type and webhooks"""
    if await db.get_user_by_email(request.email):
        raise DuplicateAccount()

    user = await db.create_user({
        "name": request.employer_name,
        "username": await available_username(db, request.employer_name, request.employer_id),
        "email": request.email,
        "password": hash_password(settings.employer_password),
        "email_verified": utcnow(),
        "identity_provider": IdentityProvider.CAL.value,
        "completed_onboarding": True,
        "locale": "en",
        "plan": "PRO",
    })

    await db.create_event_type(
        {
            "user_id": user.id,
            "title": "Coaching",
            "slug": "default-book",
            "length": 60,
            "disable_guests": True,
            "requires_confirmation": True,
        },
        users=[user],
    )

    if settings.webhook_api_url:
        await db.create_webhooks(employer_webhooks(user.id, settings.webhook_api_url))

    logger.info(f"👤 Employer {request.employer_id} provisioned as user {user.id}")
    return {"calUserId": user.id, "calUserName": user.name}


@router.get("/{employer_id}/credentials")
async def employer_credentials(
    employer_id: str,
    db: DBService = Depends(get_db_service),
    settings: Settings = Depends(get_settings),
):
    """Login details for a provisioned employer account"""
    raw_id = employer_id
    if settings.employer_id_prefix and raw_id.startswith(settings.employer_id_prefix):
        raw_id = raw_id[len(settings.employer_id_prefix):]

    user = await db.get_user(int(raw_id)) if raw_id.isdigit() else None
    if not user:
        raise BadRequest("Couldn't find an account for this email")

    return {"email": user.email, "password": settings.employer_password}
