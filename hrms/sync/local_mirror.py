"""
Local mirror of the last known good ledger state.

One JSON file per slot (leave_requests, leave_balances, employees), each holding
a flat array of records. The mirror is itself a LeaveLedger so the sync layer can
replay any mutation locally while the API is unreachable.
"""
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from hrms.core.errors import NotFoundError
from hrms.core.logging import get_logger
from hrms.schemas.employee import EmployeeSummary
from hrms.schemas.leave import LeaveBalanceRecord, LeaveRequestRecord, NewLeaveRequest, StatusUpdate
from hrms.services.balance_calculator import LeavePolicy
from hrms.services.ledger import (
    LeaveLedger,
    apply_status_update,
    default_balance_record,
    newest_first,
    prepare_new_request,
)
from hrms.utils.json_serializer import to_json_safe

logger = get_logger(__name__)

REQUESTS_SLOT = "leave_requests"
BALANCES_SLOT = "leave_balances"
EMPLOYEES_SLOT = "employees"


class LocalMirror(LeaveLedger):
    def __init__(self, directory: Union[str, Path], policy: Optional[LeavePolicy] = None):
        self.directory = Path(directory)
        self.policy = policy or LeavePolicy.from_settings()

    # ------------------------------------------------------------------ slots

    def _slot_path(self, slot: str) -> Path:
        return self.directory / f"{slot}.json"

    def read_slot(self, slot: str) -> List[Dict[str, Any]]:
        path = self._slot_path(slot)
        if not path.exists():
            return []
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as exc:
            logger.warning("local mirror slot unreadable, treating as empty: slot=%s error=%s", slot, exc)
            return []
        return data if isinstance(data, list) else []

    def write_slot(self, slot: str, items: List[Any]) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._slot_path(slot)
        tmp = path.with_suffix(".json.tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(to_json_safe(items), fh, indent=2)
        os.replace(tmp, path)

    def clear_slot(self, slot: str) -> None:
        path = self._slot_path(slot)
        if path.exists():
            path.unlink()

    def _load_requests(self) -> List[LeaveRequestRecord]:
        return [LeaveRequestRecord.model_validate(item) for item in self.read_slot(REQUESTS_SLOT)]

    def _load_balances(self) -> List[LeaveBalanceRecord]:
        return [LeaveBalanceRecord.model_validate(item) for item in self.read_slot(BALANCES_SLOT)]

    # ------------------------------------------------------------------ write-through

    def replace_requests(self, records: List[LeaveRequestRecord]) -> None:
        self.write_slot(REQUESTS_SLOT, newest_first(records))

    def replace_employee_requests(self, employee_id: str, records: List[LeaveRequestRecord]) -> None:
        others = [r for r in self._load_requests() if r.employee_id != employee_id]
        self.replace_requests(others + list(records))

    def upsert_request(self, record: LeaveRequestRecord) -> None:
        others = [r for r in self._load_requests() if r.id != record.id]
        self.replace_requests(others + [record])

    def remove_request(self, request_id: str) -> None:
        self.replace_requests([r for r in self._load_requests() if r.id != request_id])

    def upsert_balance(self, balance: LeaveBalanceRecord) -> None:
        others = [
            b for b in self._load_balances()
            if (b.employee_id, b.year) != (balance.employee_id, balance.year)
        ]
        self.write_slot(BALANCES_SLOT, others + [balance])

    def store_employees(self, employees: List[EmployeeSummary]) -> None:
        self.write_slot(EMPLOYEES_SLOT, employees)

    def load_employees(self) -> List[EmployeeSummary]:
        return [EmployeeSummary.model_validate(item) for item in self.read_slot(EMPLOYEES_SLOT)]

    # ------------------------------------------------------------------ LeaveLedger

    def create_request(self, request: NewLeaveRequest) -> LeaveRequestRecord:
        record = prepare_new_request(request)
        self.upsert_request(record)
        return record

    def get_request(self, request_id: str) -> LeaveRequestRecord:
        for record in self._load_requests():
            if record.id == request_id:
                return record
        raise NotFoundError("Leave request", request_id)

    def get_requests_by_employee(self, employee_id: str) -> List[LeaveRequestRecord]:
        return newest_first([r for r in self._load_requests() if r.employee_id == employee_id])

    def get_all_requests(self) -> List[LeaveRequestRecord]:
        return newest_first(self._load_requests())

    def update_request_status(self, request_id: str, update: StatusUpdate) -> LeaveRequestRecord:
        updated = apply_status_update(self.get_request(request_id), update)
        self.upsert_request(updated)
        return updated

    def delete_request(self, request_id: str) -> None:
        self.get_request(request_id)
        self.remove_request(request_id)

    def get_balance(self, employee_id: str, year: int) -> LeaveBalanceRecord:
        for balance in self._load_balances():
            if balance.employee_id == employee_id and balance.year == year:
                return balance
        record = default_balance_record(employee_id, year, self.policy)
        self.upsert_balance(record)
        return record

    def save_balance(self, balance: LeaveBalanceRecord) -> LeaveBalanceRecord:
        self.upsert_balance(balance)
        return balance
