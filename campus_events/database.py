"""Database engine, session factory, and the transactional unit of work."""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from campus_events.config import settings

logger = logging.getLogger(__name__)

_connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_conn, connection_record):
    """SQLite ignores ON DELETE clauses unless foreign keys are switched on."""
    if type(dbapi_conn).__module__.startswith("sqlite3"):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Run a read-decide-write sequence as one transaction.

    On PostgreSQL the transaction is upgraded to SERIALIZABLE so that two
    concurrent bookings cannot both pass the same conflict check. Only
    PostgreSQL is protected: pysqlite defers BEGIN until the first write, so
    two SQLite sessions may both pass the conflict read. SQLite is meant for
    development and tests only.
    Any exception rolls the whole transaction back and is re-raised.
    """
    if settings.SERIALIZABLE_WRITES and db.get_bind().dialect.name == "postgresql":
        db.connection(execution_options={"isolation_level": "SERIALIZABLE"})
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        logger.debug("Unit of work rolled back", exc_info=True)
        raise
