"""StaffAssignment ORM model — a teacher's participation as event staff."""
import uuid
import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from campus_events.database import Base
from campus_events.timeutil import utcnow


class AssignmentStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class StaffAssignment(Base):
    __tablename__ = "event_staff_assignments"
    __table_args__ = (UniqueConstraint("event_id", "user_id", name="uq_staff_event_user"),)

    assignment_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    event_id = Column(String(36), ForeignKey("events.event_id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), nullable=False, index=True)
    assignment_role = Column(String(150), nullable=False, default="Staff in Charge")
    status = Column(SAEnum(AssignmentStatus), nullable=False, default=AssignmentStatus.pending)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    event = relationship("Event", back_populates="staff_assignments")
    user = relationship("User", back_populates="staff_assignments")
