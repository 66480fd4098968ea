"""
Balance calculator - derives remaining entitlement from approved requests.

remaining = policy default + carried over - sum(total_days of approved requests)
for the requests of one employee whose start date falls in the target year.
The result is floored at 0 for display; callers that mutate state must check
the requested days against it instead of relying on the floor.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping, Optional

from hrms.models.leave import LeaveStatus, LeaveType, PAID_LEAVE_TYPES
from hrms.schemas.leave import BalanceItemOut, BalanceSnapshot, LeaveRequestRecord


@dataclass(frozen=True)
class LeavePolicy:
    """Yearly entitlement per leave type. None = unbounded (unpaid)."""

    entitlements: Dict[LeaveType, Optional[int]] = field(default_factory=lambda: {
        LeaveType.ANNUAL: 20,
        LeaveType.CASUAL: 12,
        LeaveType.SICK: 10,
        LeaveType.MATERNITY: 180,
        LeaveType.PATERNITY: 7,
        LeaveType.UNPAID: None,
    })

    @classmethod
    def from_settings(cls, settings=None) -> "LeavePolicy":
        if settings is None:
            from hrms.core.config import settings
        return cls(entitlements={
            LeaveType.ANNUAL: settings.ANNUAL_LEAVE_DAYS,
            LeaveType.CASUAL: settings.CASUAL_LEAVE_DAYS,
            LeaveType.SICK: settings.SICK_LEAVE_DAYS,
            LeaveType.MATERNITY: settings.MATERNITY_LEAVE_DAYS,
            LeaveType.PATERNITY: settings.PATERNITY_LEAVE_DAYS,
            LeaveType.UNPAID: None,
        })

    def entitlement(self, leave_type: LeaveType) -> Optional[int]:
        if leave_type not in PAID_LEAVE_TYPES:
            return None
        return self.entitlements.get(leave_type, 0) or 0


def approved_days(
    requests: Iterable[LeaveRequestRecord],
    employee_id: str,
    year: int,
) -> Dict[LeaveType, int]:
    """Sum approved total_days per leave type, attributing each request to its start date's year."""
    used = {lt: 0 for lt in LeaveType}
    for request in requests:
        if request.employee_id != employee_id:
            continue
        if request.status != LeaveStatus.APPROVED:
            continue
        if request.start_date.year != year:
            continue
        used[request.leave_type] += request.total_days
    return used


def calculate_balance(
    employee_id: str,
    year: int,
    requests: Iterable[LeaveRequestRecord],
    policy: Optional[LeavePolicy] = None,
    carried_over: Optional[Mapping[LeaveType, int]] = None,
) -> BalanceSnapshot:
    """
    Pure function from (employee, year, requests, policy) to a balance snapshot.

    Args:
        employee_id: Employee whose balance is computed
        year: Calendar year
        requests: Any requests; only approved ones of this employee/year count
        policy: Entitlements per type (defaults to the built-in policy)
        carried_over: Extra days per type rolled over from the prior year

    Returns:
        BalanceSnapshot with one item per leave type (unpaid has remaining=None)
    """
    policy = policy or LeavePolicy()
    carried_over = carried_over or {}
    used = approved_days(requests, employee_id, year)

    items = []
    for leave_type in LeaveType:
        entitlement = policy.entitlement(leave_type)
        if entitlement is None:
            items.append(BalanceItemOut(leave_type=leave_type, used=used[leave_type]))
            continue
        carried = int(carried_over.get(leave_type, 0) or 0)
        remaining = entitlement + carried - used[leave_type]
        items.append(
            BalanceItemOut(
                leave_type=leave_type,
                entitlement=entitlement,
                carried_over=carried,
                used=used[leave_type],
                remaining=max(0, remaining),
            )
        )
    return BalanceSnapshot(employee_id=employee_id, year=year, items=items)
