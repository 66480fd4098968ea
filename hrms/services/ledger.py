"""
Leave ledger - durable storage of leave requests and balances.

The ledger only persists; it enforces the record invariants (required fields,
date order, status transition table) but no business policy. Every backend
(SQL, HTTP API, local mirror) implements LeaveLedger and shares the helpers
below so they agree on ids, day counts and transition metadata.
"""
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Optional

from hrms.core.errors import InvalidTransitionError, ValidationError
from hrms.models.leave import LeaveStatus, PAID_LEAVE_TYPES
from hrms.schemas.leave import LeaveBalanceRecord, LeaveRequestRecord, NewLeaveRequest, StatusUpdate
from hrms.services.balance_calculator import LeavePolicy
from hrms.utils.datetime_utils import inclusive_days, now_utc

DEFAULT_REJECTION_REASON = "No reason provided"

# pending -> approved | rejected | cancelled | hold; hold -> approved | rejected;
# approved -> cancelled (reversal). Nothing re-enters pending.
ALLOWED_TRANSITIONS: Dict[LeaveStatus, FrozenSet[LeaveStatus]] = {
    LeaveStatus.PENDING: frozenset({
        LeaveStatus.APPROVED,
        LeaveStatus.REJECTED,
        LeaveStatus.CANCELLED,
        LeaveStatus.HOLD,
    }),
    LeaveStatus.HOLD: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED}),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELLED: frozenset(),
}

REQUIRED_FIELDS = ("employee_id", "leave_type", "start_date", "end_date", "reason")


def require_fields(data: object, names: Iterable[str]) -> None:
    """Raise ValidationError naming every field that is None or blank."""
    missing = []
    for name in names:
        value = getattr(data, name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def can_transition(current: LeaveStatus, target: LeaveStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def prepare_new_request(new: NewLeaveRequest, now: Optional[datetime] = None) -> LeaveRequestRecord:
    """
    Validate a new request and fill in identity, appliedDate and totalDays.

    Raises:
        ValidationError: If a required field is missing or end_date < start_date
    """
    require_fields(new, REQUIRED_FIELDS)

    if new.end_date < new.start_date:
        raise ValidationError("end_date cannot be before start_date")

    return LeaveRequestRecord(
        id=new.id or str(uuid.uuid4()),
        employee_id=new.employee_id,
        employee_name=new.employee_name or new.employee_id,
        leave_type=new.leave_type,
        start_date=new.start_date,
        end_date=new.end_date,
        total_days=inclusive_days(new.start_date, new.end_date),
        reason=new.reason.strip(),
        status=LeaveStatus.PENDING,
        applied_at=new.applied_at or now or now_utc(),
        attachments=list(new.attachments),
    )


def apply_status_update(
    record: LeaveRequestRecord,
    update: StatusUpdate,
    now: Optional[datetime] = None,
) -> LeaveRequestRecord:
    """
    Return a copy of record moved to update.status, with decision metadata set.

    Raises:
        InvalidTransitionError: If the target status is not reachable from the current one
    """
    if not can_transition(record.status, update.status):
        raise InvalidTransitionError(record.status.value, update.status.value)

    now = now or now_utc()
    changes = {"status": update.status}
    if update.status in (LeaveStatus.APPROVED, LeaveStatus.REJECTED):
        changes.update(
            approver_id=update.actor_id,
            approver_name=update.actor_name,
            decision_at=now,
            rejection_reason=None,
        )
        if update.status == LeaveStatus.REJECTED:
            reason = (update.rejection_reason or "").strip()
            changes["rejection_reason"] = reason or DEFAULT_REJECTION_REASON
    elif update.status == LeaveStatus.HOLD:
        changes.update(approver_id=update.actor_id, approver_name=update.actor_name)
    elif update.status == LeaveStatus.CANCELLED:
        changes.update(cancelled_at=now, cancelled_by_id=update.actor_id)
    return record.model_copy(update=changes)


def default_balance_record(employee_id: str, year: int, policy: LeavePolicy) -> LeaveBalanceRecord:
    """Freshly materialized balance: policy defaults, nothing carried over."""
    values = {lt.value: policy.entitlement(lt) for lt in PAID_LEAVE_TYPES}
    return LeaveBalanceRecord(employee_id=employee_id, year=year, **values)


def newest_first(requests: List[LeaveRequestRecord]) -> List[LeaveRequestRecord]:
    return sorted(requests, key=lambda r: r.applied_at, reverse=True)


class LeaveLedger(ABC):
    """Storage contract shared by the SQL, HTTP and local-mirror ledgers."""

    @abstractmethod
    def create_request(self, request: NewLeaveRequest) -> LeaveRequestRecord:
        raise NotImplementedError

    @abstractmethod
    def get_request(self, request_id: str) -> LeaveRequestRecord:
        """Raises NotFoundError if unknown."""
        raise NotImplementedError

    @abstractmethod
    def get_requests_by_employee(self, employee_id: str) -> List[LeaveRequestRecord]:
        """All requests of one employee, newest first."""
        raise NotImplementedError

    @abstractmethod
    def get_all_requests(self) -> List[LeaveRequestRecord]:
        """Unrestricted read; callers enforce authorization."""
        raise NotImplementedError

    @abstractmethod
    def update_request_status(self, request_id: str, update: StatusUpdate) -> LeaveRequestRecord:
        raise NotImplementedError

    @abstractmethod
    def delete_request(self, request_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_balance(self, employee_id: str, year: int) -> LeaveBalanceRecord:
        """Existing record, or a default-policy record materialized on first read."""
        raise NotImplementedError

    @abstractmethod
    def save_balance(self, balance: LeaveBalanceRecord) -> LeaveBalanceRecord:
        raise NotImplementedError
