from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from booking_service.core.errors import DuplicateAccount, PersistenceFailed
from booking_service.models import (
    Booking,
    BookingReference,
    BookingStatus,
    EventType,
    Payment,
    User,
    Webhook,
    WebhookTriggerEvents,
)
from booking_service.services.webhooks import Subscriber
from typing import Any, Optional, List
from booking_service.core.database import utcnow
import logging

logger = logging.getLogger(__name__)


class DBService:
    """
    Service for database operations
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # ==================== USERS ====================

    async def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID, with credentials and destination calendar"""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def create_user(self, data: dict) -> User:
        """Create new user. Raises DuplicateAccount when the email or username is taken."""
        user = User(**data)
        self.session.add(user)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning(f"User {data.get('email')} collides with an existing account: {e.orig}")
            raise DuplicateAccount() from e
        await self.session.refresh(user)
        return user

    async def update_user(self, user_id: int, data: dict) -> Optional[User]:
        """Update user fields by ID."""
        user = await self.get_user(user_id)
        if user:
            for key, value in data.items():
                setattr(user, key, value)
            await self.session.commit()
            await self.session.refresh(user)
        return user

    async def delete_user(self, user_id: int) -> bool:
        """Delete user by ID. Returns False when no row was deleted."""
        try:
            result = await self.session.execute(
                delete(User).where(User.id == user_id)
            )
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to delete user {user_id}: {e}")
            raise PersistenceFailed(
                f"Error while deleting a user. Maybe user with id {user_id} does not exist"
            ) from e
        return result.rowcount > 0

    # ==================== EVENT TYPES ====================

    async def get_event_type(self, event_type_id: int) -> Optional[EventType]:
        result = await self.session.execute(
            select(EventType).where(EventType.id == event_type_id)
        )
        return result.scalar_one_or_none()

    async def create_event_type(self, data: dict, users: Optional[List[User]] = None) -> EventType:
        event_type = EventType(**data)
        if users:
            event_type.users = list(users)
        self.session.add(event_type)
        await self.session.commit()
        await self.session.refresh(event_type)
        return event_type

    # ==================== BOOKINGS ====================

    async def get_booking(self, booking_id: int) -> Optional[Booking]:
        """Get booking by ID, with attendees, payments and references"""
        result = await self.session.execute(
            select(Booking).where(Booking.id == booking_id)
        )
        return result.scalar_one_or_none()

    async def get_booking_by_uid(self, uid: str) -> Optional[Booking]:
        result = await self.session.execute(
            select(Booking).where(Booking.uid == uid)
        )
        return result.scalar_one_or_none()

    async def mark_booking_confirmed(
        self,
        booking_id: int,
        references: List[dict],
    ) -> Optional[str]:
        """Confirm a booking that is still undecided and store its event references.

        The status change and the reference rows commit together. Returns the
        new status, or None when another request already confirmed or
        rejected the booking.
        """
        try:
            result = await self.session.execute(
                update(Booking)
                .where(
                    Booking.id == booking_id,
                    Booking.confirmed.is_(False),
                    Booking.rejected.is_(False),
                )
                .values(
                    confirmed=True,
                    status=BookingStatus.CONFIRMED.value,
                    updated_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self.session.rollback()
                return None

            self.session.add_all([
                BookingReference(booking_id=booking_id, **reference)
                for reference in references
            ])
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to confirm booking {booking_id}: {e}")
            raise PersistenceFailed() from e
        return BookingStatus.CONFIRMED.value

    async def mark_booking_rejected(self, booking_id: int, reason: str) -> Optional[str]:
        """Reject a booking unless it was confirmed. Rejecting twice is allowed."""
        try:
            result = await self.session.execute(
                update(Booking)
                .where(Booking.id == booking_id, Booking.confirmed.is_(False))
                .values(
                    rejected=True,
                    status=BookingStatus.REJECTED.value,
                    rejection_reason=reason,
                    updated_at=utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await self.session.rollback()
                return None
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Failed to reject booking {booking_id}: {e}")
            raise PersistenceFailed() from e
        return BookingStatus.REJECTED.value

    async def set_customer_confirmed(self, uid: str) -> bool:
        result = await self.session.execute(
            update(Booking)
            .where(Booking.uid == uid)
            .values(customer_confirmed=True, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        return result.rowcount > 0

    # ==================== PAYMENTS ====================

    async def mark_payment_refunded(self, payment_id: int) -> None:
        await self.session.execute(
            update(Payment)
            .where(Payment.id == payment_id)
            .values(refunded=True)
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()

    # ==================== WEBHOOKS ====================

    async def create_webhooks(self, webhooks: List[dict]) -> List[Webhook]:
        rows = [Webhook(**data) for data in webhooks]
        self.session.add_all(rows)
        await self.session.commit()
        return rows

    async def get_subscribers(
        self,
        user_id: int,
        trigger: WebhookTriggerEvents,
    ) -> List[Subscriber]:
        """Active webhooks of a user subscribed to the given trigger"""
        result = await self.session.execute(
            select(Webhook).where(
                Webhook.user_id == user_id,
                Webhook.active.is_(True),
            )
        )
        subscribers = []
        for webhook in result.scalars().all():
            triggers: Any = webhook.event_triggers or []
            if isinstance(triggers, str):
                triggers = [triggers]
            if trigger.value in triggers:
                subscribers.append(
                    Subscriber(
                        subscriber_url=webhook.subscriber_url,
                        payload_template=webhook.payload_template,
                    )
                )
        return subscribers
