"""
Approval queue - reviewer-facing listing and actions over leave requests.
"""
from dataclasses import dataclass
from typing import List, Optional

from hrms.core.errors import UnauthorizedError, ValidationError
from hrms.models.leave import LeaveStatus
from hrms.schemas.auth import SessionUser
from hrms.schemas.leave import LeaveRequestRecord
from hrms.services.ledger import newest_first
from hrms.services.leave_service import LeaveWorkflow
from hrms.services.leave_types import leave_type_label

ALL_STATUSES = "all"


@dataclass
class QueueRefresh:
    """Result of a queue action: the updated request plus the re-read listing."""

    updated: LeaveRequestRecord
    items: List[LeaveRequestRecord]


def _parse_status(status_filter: Optional[str]) -> Optional[LeaveStatus]:
    if status_filter is None:
        return None
    value = status_filter.strip().lower()
    if not value or value == ALL_STATUSES:
        return None
    try:
        return LeaveStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown status filter: {status_filter}")


def _matches(request: LeaveRequestRecord, needle: str) -> bool:
    haystack = (
        request.employee_name,
        request.employee_id,
        request.leave_type.value,
        leave_type_label(request.leave_type),
        request.reason,
    )
    return any(needle in (value or "").lower() for value in haystack)


class ApprovalQueue:
    def __init__(self, workflow: LeaveWorkflow):
        self.workflow = workflow

    @property
    def ledger(self):
        return self.workflow.ledger

    @property
    def authorization(self):
        return self.workflow.authorization

    def list_for_reviewer(
        self,
        session: SessionUser,
        status_filter: Optional[str] = LeaveStatus.PENDING.value,
        search_text: Optional[str] = None,
    ) -> List[LeaveRequestRecord]:
        """
        Requests visible to the caller, newest first.

        Reviewers see every employee's requests; anyone else only ever sees
        their own, whatever status filter they pass.
        """
        status = _parse_status(status_filter)
        actor = self.workflow.resolve_actor(session)

        if self.authorization.is_reviewer(actor.role):
            requests = self.ledger.get_all_requests()
        else:
            requests = self.ledger.get_requests_by_employee(actor.employee_id)

        if status is not None:
            requests = [r for r in requests if r.status == status]

        needle = (search_text or "").strip().lower()
        if needle:
            requests = [r for r in requests if _matches(r, needle)]

        return newest_first(requests)

    def list_for_employee(self, session: SessionUser, employee_id: str) -> List[LeaveRequestRecord]:
        actor = self.workflow.resolve_actor(session)
        if employee_id != actor.employee_id and not self.authorization.is_reviewer(actor.role):
            raise UnauthorizedError()
        return newest_first(self.ledger.get_requests_by_employee(employee_id))

    def approve(self, session: SessionUser, request_id: str,
                status_filter: Optional[str] = LeaveStatus.PENDING.value) -> QueueRefresh:
        updated = self.workflow.approve(session, request_id)
        return QueueRefresh(updated=updated, items=self.list_for_reviewer(session, status_filter))

    def reject(self, session: SessionUser, request_id: str, reason: Optional[str] = None,
               status_filter: Optional[str] = LeaveStatus.PENDING.value) -> QueueRefresh:
        updated = self.workflow.reject(session, request_id, reason)
        return QueueRefresh(updated=updated, items=self.list_for_reviewer(session, status_filter))

    def hold(self, session: SessionUser, request_id: str,
             status_filter: Optional[str] = LeaveStatus.PENDING.value) -> QueueRefresh:
        updated = self.workflow.hold(session, request_id)
        return QueueRefresh(updated=updated, items=self.list_for_reviewer(session, status_filter))
