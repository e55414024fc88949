from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text, JSON
from sqlalchemy.orm import relationship
import uuid
from booking_service.core.database import Base, utcnow


class Credential(Base):
    """Per-user secret/config blob for one integration (e.g. twilio_video)."""

    __tablename__ = "credentials"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)
    type = Column(String, nullable=False)
    key = Column(JSON, nullable=False, default=dict)

    user = relationship("User", back_populates="credentials")

    def __repr__(self):
        return f"<Credential(id={self.id}, type={self.type})>"


class DestinationCalendar(Base):
    __tablename__ = "destination_calendars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    integration = Column(String, nullable=False)  # credential type
    external_id = Column(String, nullable=False)  # calendar id inside the integration
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), unique=True, nullable=True)

    user = relationship("User", back_populates="destination_calendar")
    booking = relationship("Booking", back_populates="destination_calendar")

    def __repr__(self):
        return f"<DestinationCalendar(id={self.id}, integration={self.integration})>"


class Webhook(Base):
    __tablename__ = "webhooks"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    subscriber_url = Column(String, nullable=False)
    payload_template = Column(Text, nullable=True)
    active = Column(Boolean, default=True, nullable=False)
    event_triggers = Column(JSON, default=list, nullable=False)  # list of WebhookTriggerEvents values

    created_at = Column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="webhooks")

    def __repr__(self):
        return f"<Webhook(id={self.id}, url={self.subscriber_url})>"
