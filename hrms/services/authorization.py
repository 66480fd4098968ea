"""
Authorization provider - the single decision table for leave capabilities
"""
from typing import Dict, FrozenSet, Optional

from hrms.core.errors import UnauthorizedError
from hrms.models.employee import Role

APPROVE_LEAVE = "approve:leave"
REJECT_LEAVE = "reject:leave"
CREATE_LEAVE = "create:leave"
CANCEL_OWN_LEAVE = "cancel:own_leave"

_SELF_SERVICE = frozenset({CREATE_LEAVE, CANCEL_OWN_LEAVE})
_REVIEWER = _SELF_SERVICE | {APPROVE_LEAVE, REJECT_LEAVE}

DEFAULT_PERMISSIONS: Dict[str, FrozenSet[str]] = {
    Role.EMPLOYEE.value: _SELF_SERVICE,
    Role.MANAGER.value: _SELF_SERVICE,
    Role.HR.value: _REVIEWER,
    Role.ADMIN.value: _REVIEWER,
    Role.EMPLOYER.value: _REVIEWER,
}


class AuthorizationProvider:
    """Pure predicate over (role, capability); unknown roles hold nothing."""

    def __init__(self, permissions: Optional[Dict[str, FrozenSet[str]]] = None):
        self.permissions = permissions or DEFAULT_PERMISSIONS

    def can(self, role: Optional[str], capability: str) -> bool:
        if not role:
            return False
        return capability in self.permissions.get(role.strip().lower(), frozenset())

    def require(self, role: Optional[str], capability: str) -> None:
        if not self.can(role, capability):
            raise UnauthorizedError()

    def is_reviewer(self, role: Optional[str]) -> bool:
        return self.can(role, APPROVE_LEAVE)
