"""Teacher-side staff request routes."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from campus_events.auth import Principal, get_principal
from campus_events.database import get_db
from campus_events.schemas.event import EventOut
from campus_events.schemas.staff import AcceptedEventOut, PendingStaffRequestOut, StaffAssignmentOut
from campus_events.services import staff_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/requests/pending", response_model=list[PendingStaffRequestOut])
def pending_requests(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    return staff_service.get_pending_staff_requests(db, principal)


@router.post("/requests/{assignment_id}/accept", response_model=StaffAssignmentOut)
def accept_request(assignment_id: str, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Accept a pending request; 409 if it clashes with an accepted event."""
    return staff_service.accept_staff_request(db, principal, assignment_id)


@router.post("/requests/{assignment_id}/reject", response_model=StaffAssignmentOut)
def reject_request(assignment_id: str, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    return staff_service.reject_staff_request(db, principal, assignment_id)


@router.post("/requests/{assignment_id}/cancel")
def cancel_request(assignment_id: str, principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Withdraw from an accepted assignment."""
    staff_service.cancel_staff_request(db, principal, assignment_id)
    return {"message": "Your assignment to the event has been successfully cancelled."}


@router.get("/events/accepted", response_model=list[AcceptedEventOut])
def accepted_events(principal: Principal = Depends(get_principal), db: Session = Depends(get_db)):
    """Events the teacher has agreed to staff."""
    return [
        AcceptedEventOut(**EventOut.model_validate(event).model_dump(), my_assignment_role=role)
        for event, role in staff_service.get_accepted_events(db, principal)
    ]
