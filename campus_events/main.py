"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from campus_events.config import settings
from campus_events.database import Base, engine
from campus_events.errors import SchedulingError

# Import routers
from campus_events.routers import events, teachers, approvals

# Import all models so Base.metadata knows about them
from campus_events.models.college import College                 # noqa: F401
from campus_events.models.user import User                       # noqa: F401
from campus_events.models.forum import Forum, ForumHead          # noqa: F401
from campus_events.models.venue import Venue                     # noqa: F401
from campus_events.models.event import Event                     # noqa: F401
from campus_events.models.staff_assignment import StaffAssignment  # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Campus Events",
    description="College event scheduling — venue booking and event staff assignment",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchedulingError)
async def scheduling_error_handler(request: Request, exc: SchedulingError):
    """Map typed core failures to their HTTP status."""
    logger.info("%s %s -> %d %s: %s", request.method, request.url.path, exc.status_code, exc.code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code, **({"details": exc.details} if exc.details else {})},
    )


# Register routers
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(teachers.router, prefix="/api/teachers", tags=["Teachers"])
app.include_router(approvals.admin_router, prefix="/api/admin/users", tags=["Approvals"])
app.include_router(approvals.forum_router, prefix="/api/forums", tags=["Approvals"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
