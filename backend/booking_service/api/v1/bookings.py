from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field

from booking_service.api.deps import get_confirmation_workflow, get_db_service
from booking_service.core.errors import BadRequest
from booking_service.core.security import Session, require_session
from booking_service.services.confirmation import ConfirmationWorkflow, customer_confirm
from booking_service.services.db_service import DBService

router = APIRouter()


class ConfirmBookingRequest(BaseModel):
    id: Optional[int] = None
    confirmed: bool
    reason: Optional[Any] = None
    metadata: Optional[Dict[str, Any]] = None


class CustomerConfirmRequest(BaseModel):
    email: str
    appointment_id: str = Field(alias="appointmentId")

    class Config:
        populate_by_name = True


@router.patch("/confirm", status_code=204)
async def confirm_booking(
    request: ConfirmBookingRequest,
    session: Session = Depends(require_session),
    workflow: ConfirmationWorkflow = Depends(get_confirmation_workflow),
):
    """Confirm or reject a pending booking as its organizer"""
    if not request.id:
        raise BadRequest("bookingId missing")

    await workflow.confirm_booking(
        requestor_id=session.user_id,
        booking_id=request.id,
        confirmed=request.confirmed,
        reason=request.reason,
        metadata=request.metadata,
    )
    return Response(status_code=204)


@router.post("/customer-confirm", status_code=204)
async def confirm_by_customer(
    request: CustomerConfirmRequest,
    db: DBService = Depends(get_db_service),
):
    """An attendee confirms a booking they were invited to"""
    await customer_confirm(db, request.appointment_id, request.email)
    return Response(status_code=204)
