"""Venue ORM model."""
import uuid
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey
from campus_events.database import Base
from campus_events.timeutil import utcnow


class Venue(Base):
    __tablename__ = "venues"

    venue_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    capacity = Column(Integer, nullable=False)
    location_details = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    college_id = Column(String(36), ForeignKey("colleges.college_id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
