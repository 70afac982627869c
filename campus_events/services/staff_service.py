"""Staff assignment workflow — forum heads request teachers, teachers respond.

State machine per (event, teacher):

    (none) --request--> pending --accept--> approved --cancel--> (row deleted)
                        pending --reject--> rejected (terminal)

The teacher's calendar is checked when the request is made and checked
again at acceptance, because other commitments may have been approved in
between. Rejecting and cancelling only shrink commitments and never check.
"""
import logging
from typing import Optional

from sqlalchemy.orm import Session, joinedload

from campus_events.auth import Capability, Principal, requires
from campus_events.config import settings
from campus_events.database import unit_of_work
from campus_events.errors import DuplicateRequest, Forbidden, InvalidRole, NotFound, ScheduleConflict
from campus_events.models.event import Event, EventStatus
from campus_events.models.staff_assignment import AssignmentStatus, StaffAssignment
from campus_events.models.user import ApprovalStatus, User, UserRole
from campus_events.services.conflict_service import find_overlapping

logger = logging.getLogger(__name__)


def _approved_commitments(db: Session, teacher_id: str) -> list[Event]:
    """Events the teacher has accepted, i.e. their occupied calendar."""
    return (
        db.query(Event)
        .join(StaffAssignment, StaffAssignment.event_id == Event.event_id)
        .filter(
            StaffAssignment.user_id == teacher_id,
            StaffAssignment.status == AssignmentStatus.approved,
            Event.status != EventStatus.cancelled,
        )
        .order_by(Event.start_time)
        .all()
    )


def _check_teacher_free(db: Session, teacher_id: str, event: Event, message: str) -> None:
    clashes = find_overlapping(event.start_time, event.end_time, _approved_commitments(db, teacher_id))
    if clashes:
        clash = clashes[0]
        raise ScheduleConflict(
            message.format(name=clash.name),
            details={"conflicting_event_id": clash.event_id, "conflicting_event": clash.name},
        )


def _load_own_assignment(
    db: Session,
    assignment_id: str,
    teacher_id: str,
    expected: AssignmentStatus,
    lock: bool = False,
) -> StaffAssignment:
    query = db.query(StaffAssignment).filter(
        StaffAssignment.assignment_id == assignment_id,
        StaffAssignment.user_id == teacher_id,
        StaffAssignment.status == expected,
    )
    if lock:
        query = query.with_for_update()
    assignment = query.first()
    if not assignment:
        label = "Pending request" if expected == AssignmentStatus.pending else "Accepted assignment"
        raise NotFound(f"{label} not found or you are not authorized to act on it.")
    return assignment


@requires(Capability.request_staff)
def request_staff(
    db: Session,
    principal: Principal,
    event_id: str,
    teacher_id: str,
    assignment_role: Optional[str] = None,
) -> StaffAssignment:
    """Invite a teacher onto an event's staff as a pending assignment."""
    with unit_of_work(db):
        event = db.query(Event).filter(Event.event_id == event_id).first()
        teacher = db.query(User).filter(User.user_id == teacher_id).first()
        if not event:
            raise NotFound("Event not found.")
        if not teacher:
            raise NotFound("Teacher not found.")
        if event.college_id != principal.college_id or teacher.college_id != principal.college_id:
            raise Forbidden("Forbidden: Event and teacher must be within your college.")
        if teacher.role != UserRole.teacher:
            raise InvalidRole("You can only request teachers to be event staff.")

        existing = (
            db.query(StaffAssignment)
            .filter(StaffAssignment.event_id == event_id, StaffAssignment.user_id == teacher_id)
            .first()
        )
        if existing:
            raise DuplicateRequest(
                "This teacher has already been requested for this event.",
                details={"assignment_id": existing.assignment_id, "status": existing.status.value},
            )

        if settings.BLOCK_CONFLICTING_STAFF_REQUESTS:
            _check_teacher_free(
                db, teacher_id, event,
                "This teacher is already assigned to another event ('{name}') at this time.",
            )

        assignment = StaffAssignment(
            event_id=event_id,
            user_id=teacher_id,
            assignment_role=assignment_role or settings.DEFAULT_ASSIGNMENT_ROLE,
            status=AssignmentStatus.pending,
        )
        db.add(assignment)
        db.flush()

    db.refresh(assignment)
    logger.info("Staff request %s: teacher %s for event %s by %s",
                assignment.assignment_id, teacher_id, event_id, principal.id)
    return assignment


@requires(Capability.request_staff)
def get_requestable_teachers(db: Session, principal: Principal) -> list[User]:
    """Approved teachers of the caller's college, by name."""
    return (
        db.query(User)
        .filter(
            User.college_id == principal.college_id,
            User.role == UserRole.teacher,
            User.approval_status == ApprovalStatus.approved,
            User.user_id != principal.id,
        )
        .order_by(User.full_name.asc())
        .all()
    )


@requires(Capability.respond_to_staff_requests)
def accept_staff_request(db: Session, principal: Principal, assignment_id: str) -> StaffAssignment:
    """Approve a pending request after re-verifying the teacher's calendar.

    On conflict the assignment stays pending.
    """
    with unit_of_work(db):
        assignment = _load_own_assignment(db, assignment_id, principal.id, AssignmentStatus.pending, lock=True)
        _check_teacher_free(
            db, principal.id, assignment.event,
            "Conflict: You are already assigned to another event ('{name}') at this time.",
        )
        assignment.status = AssignmentStatus.approved

    db.refresh(assignment)
    logger.info("Teacher %s accepted staff request %s", principal.id, assignment_id)
    return assignment


@requires(Capability.respond_to_staff_requests)
def reject_staff_request(db: Session, principal: Principal, assignment_id: str) -> StaffAssignment:
    with unit_of_work(db):
        assignment = _load_own_assignment(db, assignment_id, principal.id, AssignmentStatus.pending)
        assignment.status = AssignmentStatus.rejected

    db.refresh(assignment)
    logger.info("Teacher %s rejected staff request %s", principal.id, assignment_id)
    return assignment


@requires(Capability.respond_to_staff_requests)
def cancel_staff_request(db: Session, principal: Principal, assignment_id: str) -> None:
    """Withdraw from an accepted assignment, freeing the calendar slot."""
    with unit_of_work(db):
        assignment = _load_own_assignment(db, assignment_id, principal.id, AssignmentStatus.approved)
        db.delete(assignment)

    logger.info("Teacher %s cancelled assignment %s", principal.id, assignment_id)


@requires(Capability.respond_to_staff_requests)
def get_pending_staff_requests(db: Session, principal: Principal) -> list[StaffAssignment]:
    return (
        db.query(StaffAssignment)
        .options(joinedload(StaffAssignment.event))
        .filter(
            StaffAssignment.user_id == principal.id,
            StaffAssignment.status == AssignmentStatus.pending,
        )
        .order_by(StaffAssignment.created_at.asc())
        .all()
    )


@requires(Capability.respond_to_staff_requests)
def get_accepted_events(db: Session, principal: Principal) -> list[tuple[Event, str]]:
    """Events the teacher has accepted, paired with their assignment role."""
    assignments = (
        db.query(StaffAssignment)
        .options(joinedload(StaffAssignment.event))
        .filter(
            StaffAssignment.user_id == principal.id,
            StaffAssignment.status == AssignmentStatus.approved,
        )
        .order_by(StaffAssignment.created_at.asc())
        .all()
    )
    return [(a.event, a.assignment_role) for a in assignments if a.event is not None]
