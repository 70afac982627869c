"""Tests for the principal / capability layer."""
import pytest

from campus_events.auth import ROLE_CAPABILITIES, Capability, Principal, requires
from campus_events.errors import Forbidden
from campus_events.models.user import UserRole


def _principal(role):
    return Principal(id="u1", role=role, college_id="c1")


def test_every_role_has_capabilities():
    assert set(ROLE_CAPABILITIES) == set(UserRole)


@pytest.mark.parametrize("role,capability,allowed", [
    (UserRole.forum_head, Capability.manage_events, True),
    (UserRole.forum_head, Capability.request_staff, True),
    (UserRole.forum_head, Capability.approve_accounts, False),
    (UserRole.college_admin, Capability.administer_events, True),
    (UserRole.college_admin, Capability.manage_events, False),
    (UserRole.teacher, Capability.respond_to_staff_requests, True),
    (UserRole.teacher, Capability.request_staff, False),
    (UserRole.student, Capability.view_events, True),
    (UserRole.student, Capability.respond_to_staff_requests, False),
])
def test_capability_map(role, capability, allowed):
    assert _principal(role).can(capability) is allowed


def test_requires_blocks_before_call():
    calls = []

    @requires(Capability.manage_events)
    def operation(db, principal, value):
        calls.append(value)
        return value

    assert operation(None, _principal(UserRole.forum_head), 3) == 3
    with pytest.raises(Forbidden):
        operation(None, _principal(UserRole.teacher), 4)
    assert calls == [3]
    assert operation.required_capability is Capability.manage_events


class TestPrincipalHeaders:

    def test_missing_headers(self, client):
        assert client.get("/api/events/").status_code == 401

    def test_unknown_role(self, client):
        resp = client.get("/api/events/", headers={
            "X-User-Id": "u1", "X-User-Role": "dean", "X-College-Id": "c1",
        })
        assert resp.status_code == 401

    def test_health_needs_no_auth(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}
