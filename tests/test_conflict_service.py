"""Tests for the half-open interval overlap checks."""
from types import SimpleNamespace

from campus_events.models.event import Event, EventStatus
from campus_events.services.conflict_service import (
    find_overlapping,
    find_venue_conflict,
    has_conflict,
    intervals_overlap,
)
from tests.conftest import at, seed_event


class TestIntervalsOverlap:

    def test_partial_overlap(self):
        assert intervals_overlap(at(10), at(11), at(10, 30), at(11, 30))
        assert intervals_overlap(at(10, 30), at(11, 30), at(10), at(11))

    def test_containment(self):
        assert intervals_overlap(at(9), at(12), at(10), at(11))
        assert intervals_overlap(at(10), at(11), at(9), at(12))

    def test_identical_windows(self):
        assert intervals_overlap(at(10), at(11), at(10), at(11))

    def test_adjacent_windows_do_not_overlap(self):
        """End is exclusive: [10,11) and [11,12) touch but do not clash."""
        assert not intervals_overlap(at(10), at(11), at(11), at(12))
        assert not intervals_overlap(at(11), at(12), at(10), at(11))

    def test_disjoint(self):
        assert not intervals_overlap(at(8), at(9), at(10), at(11))


class TestFindOverlapping:

    def test_filters_candidates(self):
        morning = SimpleNamespace(name="morning", start_time=at(9), end_time=at(10))
        noon = SimpleNamespace(name="noon", start_time=at(12), end_time=at(13))
        found = find_overlapping(at(9, 30), at(10, 30), [morning, noon])
        assert [e.name for e in found] == ["morning"]

    def test_empty_candidate_set(self):
        assert find_overlapping(at(9), at(10), []) == []


class TestVenueConflict:

    def test_overlap_at_same_venue(self, db, campus):
        seed_event(db, campus["head"], campus["forum_id"], at(10), at(11), venue_id=campus["venue_id"], name="A")
        conflict = find_venue_conflict(db, campus["venue_id"], at(10, 30), at(11, 30))
        assert conflict is not None
        assert conflict.name == "A"

    def test_adjacent_booking_is_free(self, db, campus):
        seed_event(db, campus["head"], campus["forum_id"], at(10), at(11), venue_id=campus["venue_id"])
        assert not has_conflict(db, campus["venue_id"], at(11), at(12))
        assert not has_conflict(db, campus["venue_id"], at(9), at(10))

    def test_other_venue_is_free(self, db, campus):
        seed_event(db, campus["head"], campus["forum_id"], at(10), at(11), venue_id=campus["venue_id"])
        assert not has_conflict(db, campus["other_venue_id"], at(10), at(11))

    def test_no_venue_never_conflicts(self, db, campus):
        seed_event(db, campus["head"], campus["forum_id"], at(10), at(11), venue_id=None)
        assert not has_conflict(db, None, at(10), at(11))

    def test_excluded_event_does_not_conflict_with_itself(self, db, campus):
        event_id = seed_event(db, campus["head"], campus["forum_id"], at(10), at(11), venue_id=campus["venue_id"])
        assert has_conflict(db, campus["venue_id"], at(10, 15), at(10, 45))
        assert not has_conflict(db, campus["venue_id"], at(10, 15), at(10, 45), exclude_event_id=event_id)

    def test_cancelled_event_releases_venue(self, db, campus):
        event_id = seed_event(db, campus["head"], campus["forum_id"], at(10), at(11), venue_id=campus["venue_id"])
        db.query(Event).filter(Event.event_id == event_id).update({"status": EventStatus.cancelled})
        db.commit()
        assert not has_conflict(db, campus["venue_id"], at(10), at(11))
