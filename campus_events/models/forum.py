"""Forum and ForumHead membership ORM models."""
import uuid
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from campus_events.database import Base
from campus_events.timeutil import utcnow


class Forum(Base):
    __tablename__ = "forums"

    forum_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(150), nullable=False)
    description = Column(Text, nullable=True)
    college_id = Column(String(36), ForeignKey("colleges.college_id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    heads = relationship("ForumHead", back_populates="forum", cascade="all, delete-orphan")


class ForumHead(Base):
    """A user's membership as head of one forum.

    An unverified row marks a pending candidacy; verified rows are the
    memberships that grant peer-approval rights.
    """

    __tablename__ = "forum_heads"

    user_id = Column(String(36), ForeignKey("users.user_id", ondelete="CASCADE"), primary_key=True)
    forum_id = Column(String(36), ForeignKey("forums.forum_id", ondelete="CASCADE"), primary_key=True)
    is_verified = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="forum_memberships")
    forum = relationship("Forum", back_populates="heads")
