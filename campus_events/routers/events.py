"""Event API routes — delegates to event_service and staff_service."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from campus_events.auth import Principal, get_principal
from campus_events.database import get_db
from campus_events.schemas.event import EventCreate, EventUpdate, EventOut, EventDetailOut
from campus_events.schemas.staff import StaffRequestCreate, StaffAssignmentOut
from campus_events.services import event_service, staff_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Create a confirmed event; 409 if the venue is already booked."""
    return event_service.create_event(
        db,
        principal,
        forum_id=payload.forum_id,
        name=payload.name,
        start_time=payload.start_time,
        end_time=payload.end_time,
        venue_id=payload.venue_id,
        description=payload.description,
        registration_link=payload.registration_link,
        banner_image=payload.banner_image,
        resize_mode=payload.resize_mode,
    )


@router.get("/", response_model=list[EventOut])
def list_events(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Upcoming events of the caller's college."""
    return event_service.list_upcoming_events(db, principal)


@router.get("/{event_id}", response_model=EventDetailOut)
def get_event(event_id: str, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Fetch a single event with venue and staff."""
    return event_service.get_event(db, principal, event_id)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: str,
    payload: EventUpdate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Partially update an event (forum heads only)."""
    updates = payload.model_dump(exclude_unset=True)
    return event_service.update_event(db, principal, event_id, updates)


@router.delete("/{event_id}", status_code=status.HTTP_200_OK)
def delete_event(event_id: str, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Permanently delete an event (organizer or college admin)."""
    event_service.delete_event(db, principal, event_id)
    return {"message": "Event deleted successfully."}


@router.post("/{event_id}/staff", response_model=StaffAssignmentOut, status_code=status.HTTP_201_CREATED)
def request_staff(
    event_id: str,
    payload: StaffRequestCreate,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Ask a teacher to staff the event; the request starts out pending."""
    return staff_service.request_staff(
        db, principal, event_id, payload.user_id, assignment_role=payload.assignment_role,
    )


@router.delete("/{event_id}/staff/{staff_user_id}", status_code=status.HTTP_200_OK)
def remove_staff(
    event_id: str,
    staff_user_id: str,
    principal: Principal = Depends(get_principal),
    db: Session = Depends(get_db),
):
    """Remove a staff member from the event, whatever the assignment status."""
    event_service.remove_staff_from_event(db, principal, event_id, staff_user_id)
    return {"message": "Staff member successfully removed from the event."}
