"""
Tests for the leave capability decision table
"""
import pytest

from hrms.core.errors import UnauthorizedError
from hrms.services.authorization import (
    APPROVE_LEAVE,
    CANCEL_OWN_LEAVE,
    CREATE_LEAVE,
    REJECT_LEAVE,
    AuthorizationProvider,
)

provider = AuthorizationProvider()


@pytest.mark.parametrize("role", ["hr", "admin", "employer", "HR"])
def test_reviewer_roles_can_decide(role):
    assert provider.can(role, APPROVE_LEAVE)
    assert provider.can(role, REJECT_LEAVE)
    assert provider.is_reviewer(role)


@pytest.mark.parametrize("role", ["employee", "manager"])
def test_self_service_roles_cannot_decide(role):
    assert not provider.can(role, APPROVE_LEAVE)
    assert not provider.can(role, REJECT_LEAVE)
    assert not provider.is_reviewer(role)


@pytest.mark.parametrize("role", ["employee", "manager", "hr", "admin", "employer"])
def test_every_role_can_create_and_cancel_own(role):
    assert provider.can(role, CREATE_LEAVE)
    assert provider.can(role, CANCEL_OWN_LEAVE)


@pytest.mark.parametrize("role", [None, "", "contractor"])
def test_unknown_role_holds_nothing(role):
    assert not provider.can(role, CREATE_LEAVE)


def test_require_raises_permission_denied():
    with pytest.raises(UnauthorizedError) as exc_info:
        provider.require("employee", APPROVE_LEAVE)

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Permission denied"
