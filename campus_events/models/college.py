"""College (tenant) ORM model."""
import uuid
from sqlalchemy import Column, String, Boolean, DateTime
from campus_events.database import Base
from campus_events.timeutil import utcnow


class College(Base):
    __tablename__ = "colleges"

    college_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(200), nullable=False)
    domain_name = Column(String(255), nullable=True, unique=True)
    has_paid = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
