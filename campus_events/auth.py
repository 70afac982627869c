"""Principal and capability model.

The upstream authentication layer (JWT verification lives outside this
service) forwards the caller identity as headers. Every core operation
declares the capability it needs with ``@requires``; the check runs once,
at the workflow boundary, before any row is read or written.
"""
import enum
import functools
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException, status

from campus_events.errors import Forbidden
from campus_events.models.user import UserRole

logger = logging.getLogger(__name__)


class Capability(str, enum.Enum):
    manage_events = "manage_events"
    administer_events = "administer_events"
    request_staff = "request_staff"
    respond_to_staff_requests = "respond_to_staff_requests"
    approve_accounts = "approve_accounts"
    peer_approve_forum_heads = "peer_approve_forum_heads"
    view_events = "view_events"


ROLE_CAPABILITIES: dict[UserRole, frozenset[Capability]] = {
    UserRole.college_admin: frozenset({
        Capability.administer_events,
        Capability.approve_accounts,
        Capability.view_events,
    }),
    UserRole.forum_head: frozenset({
        Capability.manage_events,
        Capability.request_staff,
        Capability.peer_approve_forum_heads,
        Capability.view_events,
    }),
    UserRole.teacher: frozenset({
        Capability.respond_to_staff_requests,
        Capability.view_events,
    }),
    UserRole.student: frozenset({Capability.view_events}),
}


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, trusted as given."""

    id: str
    role: UserRole
    college_id: str

    def can(self, capability: Capability) -> bool:
        return capability in ROLE_CAPABILITIES.get(self.role, frozenset())


def ensure_capability(principal: Principal, capability: Capability) -> None:
    if not principal.can(capability):
        logger.info("Denied %s to user %s (%s)", capability.value, principal.id, principal.role.value)
        raise Forbidden(f"Forbidden: role '{principal.role.value}' may not {capability.value.replace('_', ' ')}.")


def requires(capability: Capability):
    """Decorate a service function taking ``(db, principal, ...)``."""

    def decorator(func):
        @functools.wraps(func)
        def wrapper(db, principal: Principal, *args, **kwargs):
            ensure_capability(principal, capability)
            return func(db, principal, *args, **kwargs)

        wrapper.required_capability = capability
        return wrapper

    return decorator


def get_principal(
    x_user_id: Optional[str] = Header(None),
    x_user_role: Optional[str] = Header(None),
    x_college_id: Optional[str] = Header(None),
) -> Principal:
    """FastAPI dependency — build the principal from gateway headers."""
    if not x_user_id or not x_user_role or not x_college_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing authentication headers")
    try:
        role = UserRole(x_user_role)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=f"Unknown role: {x_user_role}")
    return Principal(id=x_user_id, role=role, college_id=x_college_id)
