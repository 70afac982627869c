"""Event ORM model."""
import uuid
import enum
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from campus_events.database import Base
from campus_events.timeutil import utcnow


class EventStatus(str, enum.Enum):
    draft = "draft"
    pending_approval = "pending_approval"
    confirmed = "confirmed"
    cancelled = "cancelled"


class Event(Base):
    __tablename__ = "events"
    __table_args__ = (CheckConstraint("start_time < end_time", name="ck_events_interval"),)

    event_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    status = Column(SAEnum(EventStatus), nullable=False, default=EventStatus.draft)
    banner_image = Column(String(500), nullable=True)
    registration_link = Column(String(500), nullable=True)
    resize_mode = Column(String(20), nullable=False, default="cover")
    college_id = Column(String(36), ForeignKey("colleges.college_id", ondelete="CASCADE"), nullable=False)
    forum_id = Column(String(36), ForeignKey("forums.forum_id", ondelete="CASCADE"), nullable=False)
    venue_id = Column(String(36), ForeignKey("venues.venue_id", ondelete="SET NULL"), nullable=True, index=True)
    organizer_id = Column(String(36), ForeignKey("users.user_id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    venue = relationship("Venue")
    organizer = relationship("User", foreign_keys=[organizer_id])
    staff_assignments = relationship(
        "StaffAssignment",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="StaffAssignment.created_at",
    )
