"""
Network-first leave ledger with a best-effort local fallback.

Every operation goes to the primary (HTTP) ledger first. Successful results are
written through to the local mirror; on a TransportError the same operation is
replayed against the mirror and the ledger is flagged stale until refresh().
There is no conflict resolution or retry queue: refresh() simply re-reads the
server and discards whatever the mirror diverged on.
"""
from dataclasses import dataclass
from typing import Callable, Generic, List, Optional, TypeVar

from hrms.core.errors import LeaveError, TransportError
from hrms.core.logging import get_logger
from hrms.schemas.leave import LeaveBalanceRecord, LeaveRequestRecord, NewLeaveRequest, StatusUpdate
from hrms.services.ledger import LeaveLedger
from hrms.sync.local_mirror import BALANCES_SLOT, LocalMirror

logger = get_logger(__name__)

T = TypeVar("T")

PRIMARY = "primary"
MIRROR = "mirror"


@dataclass
class LedgerResult(Generic[T]):
    value: Optional[T] = None
    error: Optional[LeaveError] = None
    source: str = PRIMARY

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def stale(self) -> bool:
        return self.source == MIRROR

    def or_else(self, fallback: Callable[[], T]) -> "LedgerResult[T]":
        """Recover a transport failure from fallback; domain errors pass through untouched."""
        if self.ok or not isinstance(self.error, TransportError):
            return self
        return attempt(fallback, source=MIRROR)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value


def attempt(call: Callable[[], T], source: str = PRIMARY) -> LedgerResult[T]:
    try:
        return LedgerResult(value=call(), source=source)
    except LeaveError as exc:
        return LedgerResult(error=exc, source=source)


class SyncedLeaveLedger(LeaveLedger):
    def __init__(self, primary: LeaveLedger, mirror: LocalMirror):
        self.primary = primary
        self.mirror = mirror
        self.stale = False
        self.last_result: Optional[LedgerResult] = None

    def _run(
        self,
        operation: str,
        primary_call: Callable[[], T],
        mirror_call: Callable[[], T],
        write_through: Optional[Callable[[T], None]] = None,
    ) -> T:
        result = attempt(primary_call)
        if result.ok and write_through is not None:
            # The primary result stands even when the mirror cannot be written.
            try:
                write_through(result.value)
            except OSError as exc:
                logger.warning(
                    "local mirror write-through failed: operation=%s error=%s", operation, exc,
                )
        elif isinstance(result.error, TransportError):
            logger.warning(
                "leave API unreachable, using local mirror: operation=%s cause=%s",
                operation, result.error.cause,
            )
        result = result.or_else(mirror_call)
        if result.stale:
            self.stale = True
        self.last_result = result
        return result.unwrap()

    def create_request(self, request: NewLeaveRequest) -> LeaveRequestRecord:
        return self._run(
            "create_request",
            lambda: self.primary.create_request(request),
            lambda: self.mirror.create_request(request),
            self.mirror.upsert_request,
        )

    def get_request(self, request_id: str) -> LeaveRequestRecord:
        return self._run(
            "get_request",
            lambda: self.primary.get_request(request_id),
            lambda: self.mirror.get_request(request_id),
            self.mirror.upsert_request,
        )

    def get_requests_by_employee(self, employee_id: str) -> List[LeaveRequestRecord]:
        return self._run(
            "get_requests_by_employee",
            lambda: self.primary.get_requests_by_employee(employee_id),
            lambda: self.mirror.get_requests_by_employee(employee_id),
            lambda records: self.mirror.replace_employee_requests(employee_id, records),
        )

    def get_all_requests(self) -> List[LeaveRequestRecord]:
        return self._run(
            "get_all_requests",
            self.primary.get_all_requests,
            self.mirror.get_all_requests,
            self.mirror.replace_requests,
        )

    def update_request_status(self, request_id: str, update: StatusUpdate) -> LeaveRequestRecord:
        return self._run(
            "update_request_status",
            lambda: self.primary.update_request_status(request_id, update),
            lambda: self.mirror.update_request_status(request_id, update),
            self.mirror.upsert_request,
        )

    def delete_request(self, request_id: str) -> None:
        self._run(
            "delete_request",
            lambda: self.primary.delete_request(request_id),
            lambda: self.mirror.delete_request(request_id),
            lambda _: self.mirror.remove_request(request_id),
        )

    def get_balance(self, employee_id: str, year: int) -> LeaveBalanceRecord:
        return self._run(
            "get_balance",
            lambda: self.primary.get_balance(employee_id, year),
            lambda: self.mirror.get_balance(employee_id, year),
            self.mirror.upsert_balance,
        )

    def save_balance(self, balance: LeaveBalanceRecord) -> LeaveBalanceRecord:
        return self._run(
            "save_balance",
            lambda: self.primary.save_balance(balance),
            lambda: self.mirror.save_balance(balance),
            self.mirror.upsert_balance,
        )

    def refresh(self, employee_id: Optional[str] = None) -> List[LeaveRequestRecord]:
        """
        Re-fetch from the API and overwrite the mirror with it.

        Raises TransportError when the API is still unreachable; the mirror and
        the stale flag are left as they were in that case. A refresh scoped to
        one employee leaves other employees' mirrored records untouched, so it
        does not clear the stale flag.
        """
        if employee_id:
            records = self.primary.get_requests_by_employee(employee_id)
            self.mirror.replace_employee_requests(employee_id, records)
        else:
            records = self.primary.get_all_requests()
            self.mirror.replace_requests(records)
            self.stale = False
        self.mirror.clear_slot(BALANCES_SLOT)
        logger.info("local mirror refreshed: employee_id=%s requests=%s", employee_id, len(records))
        return records
