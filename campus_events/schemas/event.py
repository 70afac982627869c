"""Pydantic schemas for Events."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class EventCreate(BaseModel):
    forum_id: str
    name: str
    start_time: datetime
    end_time: datetime
    venue_id: Optional[str] = None
    description: Optional[str] = None
    registration_link: Optional[str] = None
    banner_image: Optional[str] = None
    resize_mode: Optional[str] = None


class EventUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    venue_id: Optional[str] = None  # explicit null frees the venue
    registration_link: Optional[str] = None
    banner_image: Optional[str] = None
    resize_mode: Optional[str] = None


class VenueSummary(BaseModel):
    venue_id: str
    name: str
    location_details: Optional[str] = None

    model_config = {"from_attributes": True}


class EventOut(BaseModel):
    event_id: str
    name: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    status: str
    college_id: str
    forum_id: str
    venue_id: Optional[str] = None
    organizer_id: str
    registration_link: Optional[str] = None
    banner_image: Optional[str] = None
    resize_mode: str
    created_at: datetime
    updated_at: datetime
    venue: Optional[VenueSummary] = None

    model_config = {"from_attributes": True}


class StaffUserOut(BaseModel):
    user_id: str
    full_name: str

    model_config = {"from_attributes": True}


class EventStaffOut(BaseModel):
    assignment_id: str
    assignment_role: str
    status: str
    user: StaffUserOut

    model_config = {"from_attributes": True}


class EventDetailOut(EventOut):
    staff_assignments: list[EventStaffOut] = []
