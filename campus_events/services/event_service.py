"""Event lifecycle — creation, update and deletion of venue bookings.

Responsibilities:
- Capability check at the boundary: only forum heads create/update events
- Tenant scoping: every event, forum and venue is looked up inside the caller's college
- Venue double-booking prevention, evaluated inside the same transaction as the write
- Ownership rule for destructive actions: organizer or college admin
- Cascade of staff assignments on event deletion
"""
import logging
from datetime import datetime
from typing import Optional, Any

from sqlalchemy.orm import Session

from campus_events.auth import Capability, Principal, requires
from campus_events.database import unit_of_work
from campus_events.errors import Forbidden, InvalidInterval, NotFound, VenueConflict
from campus_events.models.event import Event, EventStatus
from campus_events.models.forum import Forum
from campus_events.models.staff_assignment import StaffAssignment
from campus_events.models.venue import Venue
from campus_events.services.conflict_service import find_venue_conflict
from campus_events.timeutil import to_utc, utcnow

logger = logging.getLogger(__name__)

# Fields a forum head may change through update_event
UPDATABLE_FIELDS = (
    "name",
    "description",
    "start_time",
    "end_time",
    "venue_id",
    "registration_link",
    "banner_image",
    "resize_mode",
)

# NOT NULL columns; an explicit null leaves them unchanged
REQUIRED_FIELDS = ("name", "start_time", "end_time")


def _check_interval(start: datetime, end: datetime) -> None:
    if start >= end:
        raise InvalidInterval("End time must be after start time.")


def _load_event(db: Session, event_id: str, college_id: str) -> Event:
    event = (
        db.query(Event)
        .filter(Event.event_id == event_id, Event.college_id == college_id)
        .first()
    )
    if not event:
        raise NotFound("Event not found.")
    return event


def _load_venue(db: Session, venue_id: str, college_id: str) -> Venue:
    venue = (
        db.query(Venue)
        .filter(Venue.venue_id == venue_id, Venue.college_id == college_id)
        .first()
    )
    if not venue:
        raise NotFound("Venue not found.")
    return venue


def _check_venue_free(
    db: Session,
    venue_id: Optional[str],
    start: datetime,
    end: datetime,
    exclude_event_id: Optional[str] = None,
) -> None:
    conflict = find_venue_conflict(db, venue_id, start, end, exclude_event_id)
    if conflict:
        raise VenueConflict(
            "This venue is already booked for the selected time. Please choose a different time or venue.",
            details={"conflicting_event_id": conflict.event_id, "conflicting_event": conflict.name},
        )


def _check_can_administer(event: Event, principal: Principal) -> None:
    """Destructive actions belong to the organizer or a college admin."""
    if event.organizer_id != principal.id and not principal.can(Capability.administer_events):
        raise Forbidden("Forbidden: You do not have permission to modify this event.")


@requires(Capability.manage_events)
def create_event(
    db: Session,
    principal: Principal,
    forum_id: str,
    name: str,
    start_time: datetime,
    end_time: datetime,
    venue_id: Optional[str] = None,
    description: Optional[str] = None,
    registration_link: Optional[str] = None,
    banner_image: Optional[str] = None,
    resize_mode: Optional[str] = None,
) -> Event:
    """Book a confirmed event, refusing overlapping use of the venue."""
    start = to_utc(start_time)
    end = to_utc(end_time)
    _check_interval(start, end)

    with unit_of_work(db):
        forum = (
            db.query(Forum)
            .filter(Forum.forum_id == forum_id, Forum.college_id == principal.college_id)
            .first()
        )
        if not forum:
            raise NotFound("Forum not found.")
        if venue_id:
            _load_venue(db, venue_id, principal.college_id)
            _check_venue_free(db, venue_id, start, end)

        event = Event(
            name=name,
            description=description,
            start_time=start,
            end_time=end,
            status=EventStatus.confirmed,
            venue_id=venue_id,
            forum_id=forum_id,
            college_id=principal.college_id,
            organizer_id=principal.id,
            registration_link=registration_link,
            banner_image=banner_image,
            resize_mode=resize_mode or "cover",
        )
        db.add(event)
        db.flush()

    db.refresh(event)
    logger.info("Created event '%s' (%s) by organizer %s at venue %s", name, event.event_id, principal.id, venue_id)
    return event


@requires(Capability.manage_events)
def update_event(
    db: Session,
    principal: Principal,
    event_id: str,
    updates: dict[str, Any],
) -> Event:
    """Apply a partial update; only supplied fields are touched.

    The venue check reruns when start, end or venue was supplied and the
    resulting event still has a venue. The event never clashes with itself.
    """
    updates = {
        k: v for k, v in updates.items()
        if k in UPDATABLE_FIELDS and not (k in REQUIRED_FIELDS and v is None)
    }
    if "start_time" in updates:
        updates["start_time"] = to_utc(updates["start_time"])
    if "end_time" in updates:
        updates["end_time"] = to_utc(updates["end_time"])

    with unit_of_work(db):
        event = _load_event(db, event_id, principal.college_id)

        new_start = updates.get("start_time") or event.start_time
        new_end = updates.get("end_time") or event.end_time
        new_venue_id = updates["venue_id"] if "venue_id" in updates else event.venue_id
        _check_interval(new_start, new_end)

        schedule_touched = any(updates.get(f) is not None for f in ("start_time", "end_time", "venue_id"))
        if "venue_id" in updates and new_venue_id and new_venue_id != event.venue_id:
            _load_venue(db, new_venue_id, principal.college_id)
        if new_venue_id and schedule_touched:
            _check_venue_free(db, new_venue_id, new_start, new_end, exclude_event_id=event.event_id)

        for field, value in updates.items():
            if field == "resize_mode" and not value:
                value = "cover"
            setattr(event, field, value)
        event.updated_at = utcnow()

    db.refresh(event)
    logger.info("Updated event %s (fields: %s)", event_id, ", ".join(sorted(updates)) or "none")
    return event


def delete_event(db: Session, principal: Principal, event_id: str) -> None:
    """Permanently delete an event together with its staff assignments."""
    with unit_of_work(db):
        event = _load_event(db, event_id, principal.college_id)
        _check_can_administer(event, principal)
        staff_count = len(event.staff_assignments)
        db.delete(event)

    logger.info("Deleted event %s by %s (%d staff assignments removed)", event_id, principal.id, staff_count)


def remove_staff_from_event(db: Session, principal: Principal, event_id: str, staff_user_id: str) -> None:
    """Drop one teacher from an event's staff, whatever the assignment status."""
    with unit_of_work(db):
        event = _load_event(db, event_id, principal.college_id)
        _check_can_administer(event, principal)
        assignment = (
            db.query(StaffAssignment)
            .filter(StaffAssignment.event_id == event_id, StaffAssignment.user_id == staff_user_id)
            .first()
        )
        if not assignment:
            raise NotFound("Staff assignment not found.")
        db.delete(assignment)

    logger.info("Removed staff %s from event %s by %s", staff_user_id, event_id, principal.id)


@requires(Capability.view_events)
def list_upcoming_events(db: Session, principal: Principal) -> list[Event]:
    """Events of the caller's college that have not ended yet, soonest first."""
    return (
        db.query(Event)
        .filter(
            Event.college_id == principal.college_id,
            Event.status != EventStatus.cancelled,
            Event.end_time >= utcnow(),
        )
        .order_by(Event.start_time)
        .all()
    )


@requires(Capability.view_events)
def get_event(db: Session, principal: Principal, event_id: str) -> Event:
    return _load_event(db, event_id, principal.college_id)
