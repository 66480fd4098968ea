"""
Record builders and session helpers shared by the tests
"""
from datetime import date, datetime, timezone

from hrms.core.security import create_access_token
from hrms.models.leave import LeaveStatus, LeaveType
from hrms.schemas.auth import SessionUser
from hrms.schemas.leave import LeaveRequestRecord
from hrms.utils.datetime_utils import inclusive_days

_counter = {"n": 0}


def make_record(
    employee_id="EMP001",
    leave_type=LeaveType.ANNUAL,
    start=date(2025, 3, 3),
    end=date(2025, 3, 7),
    status=LeaveStatus.APPROVED,
    applied_at=None,
    **extra,
) -> LeaveRequestRecord:
    _counter["n"] += 1
    return LeaveRequestRecord(
        id=extra.pop("id", f"req-{_counter['n']}"),
        employee_id=employee_id,
        employee_name=extra.pop("employee_name", "Asha Verma"),
        leave_type=leave_type,
        start_date=start,
        end_date=end,
        total_days=inclusive_days(start, end),
        reason=extra.pop("reason", "Family trip"),
        status=status,
        applied_at=applied_at or datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc),
        **extra,
    )


def session_for(employee, **overrides) -> SessionUser:
    """Session as issued by the identity provider: email only, no explicit employee link"""
    data = {"user_id": f"idp|{employee.id}", "email": employee.email, "name": employee.name}
    data.update(overrides)
    return SessionUser(**data)


def auth_headers(employee=None, **claims) -> dict:
    payload = {}
    if employee is not None:
        payload = {"sub": f"idp|{employee.id}", "email": employee.email, "name": employee.name}
    payload.update(claims)
    token = create_access_token(payload)
    return {"Authorization": f"Bearer {token}"}
