from sqlalchemy import Column, String, Integer, Boolean, ForeignKey, Table, Text
from sqlalchemy.orm import relationship
from booking_service.core.database import Base

event_type_users = Table(
    "event_type_users",
    Base.metadata,
    Column("event_type_id", Integer, ForeignKey("event_types.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class EventType(Base):
    __tablename__ = "event_types"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)

    title = Column(String, nullable=False)
    slug = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    length = Column(Integer, nullable=False)  # minutes

    scheduling_type = Column(String, nullable=True)  # ROUND_ROBIN | COLLECTIVE
    requires_confirmation = Column(Boolean, default=False)
    disable_guests = Column(Boolean, default=False)

    # Assigned hosts; for COLLECTIVE types any of them may confirm bookings
    users = relationship("User", secondary=event_type_users, lazy="selectin")

    def __repr__(self):
        return f"<EventType(id={self.id}, slug={self.slug})>"
