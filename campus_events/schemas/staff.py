"""Pydantic schemas for staff assignments."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from campus_events.schemas.event import EventOut


class StaffRequestCreate(BaseModel):
    user_id: str
    assignment_role: Optional[str] = None


class StaffAssignmentOut(BaseModel):
    assignment_id: str
    event_id: str
    user_id: str
    assignment_role: str
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class PendingStaffRequestOut(StaffAssignmentOut):
    event: EventOut


class AcceptedEventOut(EventOut):
    my_assignment_role: str
