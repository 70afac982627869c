"""Pytest fixtures — SQLite database for fast, isolated tests."""
import uuid
from datetime import datetime

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from campus_events.auth import Principal
from campus_events.database import Base, get_db
from campus_events.main import app

# Import all models so they register with Base.metadata
from campus_events.models.college import College                                 # noqa: F401
from campus_events.models.user import User, UserRole, ApprovalStatus
from campus_events.models.forum import Forum, ForumHead
from campus_events.models.venue import Venue
from campus_events.models.event import Event, EventStatus
from campus_events.models.staff_assignment import StaffAssignment, AssignmentStatus

SQLITE_URL = "sqlite:///./test.db"

# Fixed calendar day far enough ahead to count as "upcoming"
DAY = datetime(2030, 5, 1)


def at(hour: int, minute: int = 0) -> datetime:
    return DAY.replace(hour=hour, minute=minute)


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_engine):
    """FastAPI TestClient with the database dependency overridden to use SQLite."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Seeding helpers — tenants, forums and venues are managed outside this
# service, so tests insert them directly.
# ---------------------------------------------------------------------------
def seed_college(db, name: str = "Test College", domain: str = None) -> str:
    college = College(name=name, domain_name=domain or f"{uuid.uuid4().hex[:8]}.edu")
    db.add(college)
    db.commit()
    return college.college_id


def seed_user(db, college_id: str, role: UserRole, name: str = "User",
              status: ApprovalStatus = ApprovalStatus.approved) -> dict:
    """Insert a user and return a plain dict describing it."""
    user = User(
        full_name=name,
        email=f"{uuid.uuid4().hex[:10]}@example.edu",
        role=role,
        approval_status=status,
        is_email_verified=True,
        college_id=college_id,
    )
    db.add(user)
    db.commit()
    return {"user_id": user.user_id, "role": role, "college_id": college_id, "name": name}


def seed_forum(db, college_id: str, name: str = "Forum") -> str:
    forum = Forum(name=name, college_id=college_id)
    db.add(forum)
    db.commit()
    return forum.forum_id


def seed_membership(db, user_id: str, forum_id: str, verified: bool = True) -> None:
    db.add(ForumHead(user_id=user_id, forum_id=forum_id, is_verified=verified))
    db.commit()


def seed_venue(db, college_id: str, name: str = "Main Hall", capacity: int = 200) -> str:
    venue = Venue(name=name, capacity=capacity, location_details="Block A", college_id=college_id)
    db.add(venue)
    db.commit()
    return venue.venue_id


def seed_event(db, organizer: dict, forum_id: str, start: datetime, end: datetime,
               venue_id: str = None, name: str = "Seeded Event") -> str:
    ev = Event(
        name=name,
        start_time=start,
        end_time=end,
        status=EventStatus.confirmed,
        college_id=organizer["college_id"],
        forum_id=forum_id,
        venue_id=venue_id,
        organizer_id=organizer["user_id"],
    )
    db.add(ev)
    db.commit()
    return ev.event_id


def seed_assignment(db, event_id: str, teacher: dict,
                    status: AssignmentStatus = AssignmentStatus.approved) -> str:
    assignment = StaffAssignment(event_id=event_id, user_id=teacher["user_id"], status=status)
    db.add(assignment)
    db.commit()
    return assignment.assignment_id


def principal_for(user: dict) -> Principal:
    return Principal(id=user["user_id"], role=user["role"], college_id=user["college_id"])


def auth_headers(user: dict) -> dict:
    """Headers the upstream auth gateway would forward for ``user``."""
    return {
        "X-User-Id": user["user_id"],
        "X-User-Role": user["role"].value,
        "X-College-Id": user["college_id"],
    }


@pytest.fixture(scope="function")
def campus(db):
    """One college with an admin, a verified forum head, two teachers, a forum and two venues."""
    college_id = seed_college(db, name="Springfield College", domain="springfield.edu")
    forum_id = seed_forum(db, college_id, name="Robotics Club")
    admin = seed_user(db, college_id, UserRole.college_admin, name="Admin")
    head = seed_user(db, college_id, UserRole.forum_head, name="Head")
    seed_membership(db, head["user_id"], forum_id, verified=True)
    return {
        "college_id": college_id,
        "forum_id": forum_id,
        "admin": admin,
        "head": head,
        "teacher": seed_user(db, college_id, UserRole.teacher, name="Teacher X"),
        "other_teacher": seed_user(db, college_id, UserRole.teacher, name="Teacher Y"),
        "student": seed_user(db, college_id, UserRole.student, name="Student"),
        "venue_id": seed_venue(db, college_id, name="Main Hall"),
        "other_venue_id": seed_venue(db, college_id, name="Seminar Room"),
    }
