"""Typed failures raised by the scheduling core.

Every kind carries a stable ``code`` and the HTTP status the API layer maps
it to, so callers can tell a venue clash from a missing row without parsing
messages.
"""
from typing import Any, Optional


class SchedulingError(Exception):
    """Base class for all scheduling-core failures."""

    code = "scheduling_error"
    status_code = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class InvalidInterval(SchedulingError):
    """Start time is not strictly before end time."""

    code = "invalid_interval"
    status_code = 400


class VenueConflict(SchedulingError):
    """The venue already hosts a confirmed event in the requested window."""

    code = "venue_conflict"
    status_code = 409


class ScheduleConflict(SchedulingError):
    """The teacher already holds an approved assignment in the window."""

    code = "schedule_conflict"
    status_code = 409


class DuplicateRequest(SchedulingError):
    code = "duplicate_request"
    status_code = 409


class NotFound(SchedulingError):
    """Row is absent or lives outside the caller's college."""

    code = "not_found"
    status_code = 404


class Forbidden(SchedulingError):
    code = "forbidden"
    status_code = 403


class InvalidRole(SchedulingError):
    """Target user does not hold the role the operation needs."""

    code = "invalid_role"
    status_code = 400


class InvalidTransition(SchedulingError):
    """Requested state change is not allowed from the current state."""

    code = "invalid_transition"
    status_code = 409


class InvalidRequest(SchedulingError):
    code = "invalid_request"
    status_code = 400
