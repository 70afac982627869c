"""Interval conflict checks for venues and teacher calendars.

All intervals are half-open ``[start, end)``: two windows overlap iff
``s1 < e2 and s2 < e1``, so an event ending at 11:00 does not clash with
one starting at 11:00.
"""
import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from campus_events.models.event import Event, EventStatus

logger = logging.getLogger(__name__)


def intervals_overlap(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    return start1 < end2 and start2 < end1


def find_overlapping(start: datetime, end: datetime, events: Iterable[Event]) -> list[Event]:
    """Return the events from ``events`` whose window overlaps ``[start, end)``."""
    return [ev for ev in events if intervals_overlap(start, end, ev.start_time, ev.end_time)]


def find_venue_conflict(
    db: Session,
    venue_id: Optional[str],
    start: datetime,
    end: datetime,
    exclude_event_id: Optional[str] = None,
) -> Optional[Event]:
    """First confirmed event at ``venue_id`` overlapping the window, if any.

    Only venue-bearing events take part; ``venue_id=None`` never conflicts.
    ``exclude_event_id`` keeps an event from clashing with itself on update.
    """
    if venue_id is None:
        return None

    query = db.query(Event).filter(
        Event.venue_id == venue_id,
        Event.status == EventStatus.confirmed,
        Event.start_time < end,
        Event.end_time > start,
    )
    if exclude_event_id:
        query = query.filter(Event.event_id != exclude_event_id)

    conflict = query.order_by(Event.start_time).first()
    if conflict:
        logger.info(
            "Venue %s is booked by event %s (%s - %s)",
            venue_id, conflict.event_id, conflict.start_time, conflict.end_time,
        )
    return conflict


def has_conflict(
    db: Session,
    venue_id: Optional[str],
    start: datetime,
    end: datetime,
    exclude_event_id: Optional[str] = None,
) -> bool:
    return find_venue_conflict(db, venue_id, start, end, exclude_event_id) is not None
