from sqlalchemy import Column, String, Integer, DateTime, Numeric, Boolean, ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from booking_service.core.database import Base, utcnow
from booking_service.models.enums import BookingStatus


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    uid = Column(String, unique=True, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    event_type_id = Column(Integer, ForeignKey("event_types.id", ondelete="SET NULL"), nullable=True)

    # Booking Details
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    agreed_fee = Column(Numeric(10, 2), nullable=True)
    location = Column(String, nullable=True)

    # Status
    status = Column(String, default=BookingStatus.PENDING.value, nullable=False)
    confirmed = Column(Boolean, default=False, nullable=False)
    rejected = Column(Boolean, default=False, nullable=False)
    rejection_reason = Column(Text, nullable=True)
    customer_confirmed = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User")
    event_type = relationship("EventType")
    attendees = relationship(
        "Attendee",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="Attendee.id",
        lazy="selectin",
    )
    references = relationship(
        "BookingReference",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    payment = relationship(
        "Payment",
        back_populates="booking",
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    destination_calendar = relationship(
        "DestinationCalendar",
        back_populates="booking",
        uselist=False,
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Booking(id={self.id}, uid={self.uid}, status={self.status})>"


class Attendee(Base):
    __tablename__ = "attendees"
    __table_args__ = (UniqueConstraint("booking_id", "email", name="uq_attendees_booking_email"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)

    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    time_zone = Column(String, nullable=False)
    locale = Column(String, nullable=True)

    booking = relationship("Booking", back_populates="attendees")

    def __repr__(self):
        return f"<Attendee(id={self.id}, email={self.email})>"


class BookingReference(Base):
    """An event created in an external calendar or video service for a booking."""

    __tablename__ = "booking_references"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)

    type = Column(String, nullable=False)  # credential type, e.g. twilio_video
    uid = Column(String, nullable=False)
    meeting_id = Column(String, nullable=True)
    meeting_password = Column(String, nullable=True)
    meeting_url = Column(String, nullable=True)

    booking = relationship("Booking", back_populates="references")

    def __repr__(self):
        return f"<BookingReference(id={self.id}, type={self.type}, uid={self.uid})>"


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False)

    uid = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False)  # STRIPE
    amount = Column(Integer, nullable=False)  # minor units
    currency = Column(String, nullable=False, default="usd")
    success = Column(Boolean, default=False)
    refunded = Column(Boolean, default=False)
    external_id = Column(String, nullable=False)  # stripe payment intent id

    booking = relationship("Booking", back_populates="payment")

    def __repr__(self):
        return f"<Payment(id={self.id}, external_id={self.external_id})>"
