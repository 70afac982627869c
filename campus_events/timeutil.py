"""Datetime normalization — everything is stored as naive UTC."""
from datetime import datetime
from typing import Optional

import pytz

from campus_events.config import settings


def to_utc(value: datetime, tz_name: Optional[str] = None) -> datetime:
    """Convert ``value`` to a naive UTC datetime.

    Naive input is interpreted in ``tz_name`` (default: the configured
    college timezone); aware input is converted from its own offset.
    """
    if value.tzinfo is None:
        value = pytz.timezone(tz_name or settings.DEFAULT_TIMEZONE).localize(value)
    return value.astimezone(pytz.utc).replace(tzinfo=None)


def utcnow() -> datetime:
    return datetime.now(pytz.utc).replace(tzinfo=None)
