from sqlalchemy import Column, String, Integer, DateTime, Boolean, Text
from sqlalchemy.orm import relationship
from booking_service.core.database import Base, utcnow
from booking_service.models.enums import IdentityProvider


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, nullable=True)
    name = Column(String, nullable=True)
    email = Column(String, unique=True, nullable=False)
    email_verified = Column(DateTime(timezone=True), nullable=True)
    password = Column(String, nullable=True)  # argon2 hash

    # Profile
    bio = Column(Text, nullable=True)
    avatar = Column(Text, nullable=True)
    time_zone = Column(String, default="Europe/London")
    week_start = Column(String, default="Sunday")
    locale = Column(String, nullable=True)
    theme = Column(String, nullable=True)
    hide_branding = Column(Boolean, default=False)

    # Working hours, minutes from midnight
    start_time = Column(Integer, default=0)
    end_time = Column(Integer, default=1440)
    buffer_time = Column(Integer, default=0)

    # Account
    plan = Column(String, default="TRIAL")
    completed_onboarding = Column(Boolean, default=False)
    identity_provider = Column(String, default=IdentityProvider.CAL.value)

    created_date = Column(DateTime(timezone=True), default=utcnow)

    # Relationships
    credentials = relationship(
        "Credential",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Credential.id.desc()",
        lazy="selectin",
    )
    destination_calendar = relationship(
        "DestinationCalendar",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        lazy="selectin",
    )
    webhooks = relationship("Webhook", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
