"""
SQLAlchemy-backed leave ledger (server side of the document store)
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from hrms.core.errors import NotFoundError
from hrms.models.leave import LeaveBalance, LeaveRequest, PAID_LEAVE_TYPES
from hrms.schemas.leave import LeaveBalanceRecord, LeaveRequestRecord, NewLeaveRequest, StatusUpdate
from hrms.services.balance_calculator import LeavePolicy
from hrms.services.ledger import (
    LeaveLedger,
    apply_status_update,
    default_balance_record,
    prepare_new_request,
)

logger = logging.getLogger(__name__)

# Fields copied back onto the row after a status transition
_STATUS_FIELDS = (
    "status",
    "approver_id",
    "approver_name",
    "decision_at",
    "rejection_reason",
    "cancelled_at",
    "cancelled_by_id",
)


class SqlLeaveLedger(LeaveLedger):
    def __init__(self, db: Session, policy: Optional[LeavePolicy] = None):
        self.db = db
        self.policy = policy or LeavePolicy.from_settings()

    def _get_row(self, request_id: str) -> LeaveRequest:
        row = self.db.query(LeaveRequest).filter(LeaveRequest.id == request_id).first()
        if not row:
            raise NotFoundError("Leave request", request_id)
        return row

    def create_request(self, request: NewLeaveRequest) -> LeaveRequestRecord:
        record = prepare_new_request(request)
        row = LeaveRequest(**record.model_dump())
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info(
            "leave request stored: id=%s employee_id=%s type=%s days=%s",
            row.id, row.employee_id, row.leave_type.value, row.total_days,
        )
        return LeaveRequestRecord.model_validate(row)

    def get_request(self, request_id: str) -> LeaveRequestRecord:
        return LeaveRequestRecord.model_validate(self._get_row(request_id))

    def get_requests_by_employee(self, employee_id: str) -> List[LeaveRequestRecord]:
        rows = (
            self.db.query(LeaveRequest)
            .filter(LeaveRequest.employee_id == employee_id)
            .order_by(LeaveRequest.applied_at.desc())
            .all()
        )
        return [LeaveRequestRecord.model_validate(r) for r in rows]

    def get_all_requests(self) -> List[LeaveRequestRecord]:
        rows = self.db.query(LeaveRequest).order_by(LeaveRequest.applied_at.desc()).all()
        return [LeaveRequestRecord.model_validate(r) for r in rows]

    def update_request_status(self, request_id: str, update: StatusUpdate) -> LeaveRequestRecord:
        row = self._get_row(request_id)
        current = LeaveRequestRecord.model_validate(row)
        updated = apply_status_update(current, update)
        for name in _STATUS_FIELDS:
            setattr(row, name, getattr(updated, name))
        self.db.commit()
        self.db.refresh(row)
        return LeaveRequestRecord.model_validate(row)

    def delete_request(self, request_id: str) -> None:
        row = self._get_row(request_id)
        self.db.delete(row)
        self.db.commit()

    def _get_balance_row(self, employee_id: str, year: int) -> Optional[LeaveBalance]:
        return (
            self.db.query(LeaveBalance)
            .filter(LeaveBalance.employee_id == employee_id, LeaveBalance.year == year)
            .first()
        )

    def get_balance(self, employee_id: str, year: int) -> LeaveBalanceRecord:
        row = self._get_balance_row(employee_id, year)
        if row is None:
            record = default_balance_record(employee_id, year, self.policy)
            row = LeaveBalance(
                employee_id=employee_id,
                year=year,
                carried_over={},
                **{lt.value: getattr(record, lt.value) for lt in PAID_LEAVE_TYPES},
            )
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.info("leave balance materialized: employee_id=%s year=%s", employee_id, year)
        return LeaveBalanceRecord.model_validate(row)

    def save_balance(self, balance: LeaveBalanceRecord) -> LeaveBalanceRecord:
        row = self._get_balance_row(balance.employee_id, balance.year)
        if row is None:
            row = LeaveBalance(employee_id=balance.employee_id, year=balance.year)
            self.db.add(row)
        for lt in PAID_LEAVE_TYPES:
            setattr(row, lt.value, getattr(balance, lt.value))
        row.carried_over = {lt.value: days for lt, days in balance.carried_over.items()}
        self.db.commit()
        self.db.refresh(row)
        return LeaveBalanceRecord.model_validate(row)
