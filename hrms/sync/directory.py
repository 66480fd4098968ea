"""
Employee directory read from the HRMS API, with the mirror's "employees" slot as fallback
"""
from typing import List, Optional

import httpx

from hrms.core.errors import TransportError
from hrms.core.logging import get_logger
from hrms.schemas.employee import EmployeeSummary
from hrms.services.directory import EmployeeDirectory
from hrms.sync.http_ledger import decode_error
from hrms.sync.local_mirror import LocalMirror

logger = get_logger(__name__)


class HttpEmployeeDirectory(EmployeeDirectory):
    def __init__(self, client: httpx.Client, mirror: Optional[LocalMirror] = None):
        self.client = client
        self.mirror = mirror

    def _fetch_all(self) -> List[EmployeeSummary]:
        try:
            response = self.client.get("/employees")
        except httpx.HTTPError as exc:
            raise TransportError(str(exc)) from exc
        if not response.is_success:
            raise decode_error(response)
        body = response.json()
        items = body.get("items", []) if isinstance(body, dict) else body
        return [EmployeeSummary.model_validate(item) for item in items]

    def list_all(self) -> List[EmployeeSummary]:
        try:
            employees = self._fetch_all()
        except TransportError as exc:
            if self.mirror is None:
                raise
            logger.warning("employee directory unreachable, using local mirror: %s", exc.cause)
            return self.mirror.load_employees()
        if self.mirror is not None:
            self.mirror.store_employees(employees)
        return employees

    def resolve_by_email(self, email: str) -> Optional[str]:
        if not email or not email.strip():
            return None
        needle = email.strip().lower()
        for employee in self.list_all():
            if employee.email.lower() == needle:
                return employee.id
        return None

    def resolve_by_id(self, employee_id: str) -> Optional[EmployeeSummary]:
        if not employee_id:
            return None
        for employee in self.list_all():
            if employee.id == employee_id:
                return employee
        return None
