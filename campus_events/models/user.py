"""User ORM model — accounts, roles and approval state."""
import uuid
import enum
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum
from sqlalchemy.orm import relationship
from campus_events.database import Base
from campus_events.timeutil import utcnow


class UserRole(str, enum.Enum):
    college_admin = "college_admin"
    forum_head = "forum_head"
    teacher = "teacher"
    student = "student"


class ApprovalStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class User(Base):
    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("college_id", "email", name="uq_users_college_email"),)

    user_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    full_name = Column(String(150), nullable=False)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False, default="")
    role = Column(SAEnum(UserRole), nullable=False)
    approval_status = Column(SAEnum(ApprovalStatus), nullable=False, default=ApprovalStatus.pending)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    email_verification_expires = Column(DateTime, nullable=True)
    college_id = Column(String(36), ForeignKey("colleges.college_id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    # Deleting a user releases every calendar slot and membership they hold
    forum_memberships = relationship("ForumHead", back_populates="user", cascade="all, delete-orphan")
    staff_assignments = relationship("StaffAssignment", back_populates="user", cascade="all, delete-orphan")
