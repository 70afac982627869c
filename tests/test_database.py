"""Tests for the unit-of-work transaction boundary."""
from types import SimpleNamespace

import pytest

from campus_events.config import settings
from campus_events.database import unit_of_work


class RecordingSession:
    """Stands in for a Session bound to a given dialect."""

    def __init__(self, dialect_name):
        self._bind = SimpleNamespace(dialect=SimpleNamespace(name=dialect_name))
        self.calls = []

    def get_bind(self):
        return self._bind

    def connection(self, execution_options=None):
        self.calls.append(("connection", execution_options))

    def commit(self):
        self.calls.append(("commit", None))

    def rollback(self):
        self.calls.append(("rollback", None))


def test_postgres_runs_serializable():
    session = RecordingSession("postgresql")
    with unit_of_work(session):
        pass
    assert session.calls == [
        ("connection", {"isolation_level": "SERIALIZABLE"}),
        ("commit", None),
    ]


def test_sqlite_isolation_untouched():
    session = RecordingSession("sqlite")
    with unit_of_work(session):
        pass
    assert session.calls == [("commit", None)]


def test_serializable_can_be_switched_off(monkeypatch):
    monkeypatch.setattr(settings, "SERIALIZABLE_WRITES", False)
    session = RecordingSession("postgresql")
    with unit_of_work(session):
        pass
    assert session.calls == [("commit", None)]


def test_error_rolls_back_and_propagates():
    session = RecordingSession("sqlite")
    with pytest.raises(ValueError):
        with unit_of_work(session):
            raise ValueError("boom")
    assert session.calls == [("rollback", None)]
