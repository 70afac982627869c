"""Pydantic schemas for Users and approval decisions."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class UserOut(BaseModel):
    user_id: str
    full_name: str
    email: str
    role: str
    approval_status: str
    college_id: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ApprovalPayload(BaseModel):
    forum_id: Optional[str] = None


class ForumSummary(BaseModel):
    forum_id: str
    name: str

    model_config = {"from_attributes": True}


class MembershipOut(BaseModel):
    forum_id: str
    is_verified: bool
    forum: ForumSummary

    model_config = {"from_attributes": True}


class CollegeUserOut(UserOut):
    """Admin view of an account, including the forums it heads or applied to."""

    is_email_verified: bool
    forum_memberships: list[MembershipOut] = []


class TeacherOut(BaseModel):
    user_id: str
    full_name: str
    email: str

    model_config = {"from_attributes": True}
