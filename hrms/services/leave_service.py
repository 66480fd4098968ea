"""
Leave service - the leave request workflow.

Submission validation runs fail-fast in this order: required fields, date
order, employee identity, remaining balance (paid types only), then overlap
with the employee's active requests. Balance is never stored as a running
counter: every read derives it from the ledger's approved requests, so an
approval or a reversal shows up on the next read.
"""
import logging
from datetime import date
from typing import Any, List, Optional

from hrms.core.errors import (
    InsufficientBalanceError,
    InvalidTransitionError,
    LeaveOverlapError,
    UnauthorizedError,
    ValidationError,
)
from hrms.models.leave import ACTIVE_LEAVE_STATUSES, LeaveStatus, LeaveType, PAID_LEAVE_TYPES
from hrms.schemas.auth import SessionUser
from hrms.schemas.employee import Actor
from hrms.schemas.leave import (
    BalanceSnapshot,
    LeaveApplyRequest,
    LeaveRequestRecord,
    NewLeaveRequest,
    StatusUpdate,
)
from hrms.services.authorization import (
    APPROVE_LEAVE,
    CANCEL_OWN_LEAVE,
    CREATE_LEAVE,
    REJECT_LEAVE,
    AuthorizationProvider,
)
from hrms.services.balance_calculator import LeavePolicy, calculate_balance
from hrms.services.directory import EmployeeDirectory
from hrms.services.identity import IdentityResolver
from hrms.services.ledger import LeaveLedger, can_transition, require_fields
from hrms.services.leave_types import leave_type_label, normalize_leave_type
from hrms.services.sinks import AuditSink, LoggingSink, NotificationSink
from hrms.utils.datetime_utils import inclusive_days

logger = logging.getLogger(__name__)

APPLY_FIELDS = ("leave_type", "start_date", "end_date", "reason")


class LeaveWorkflow:
    """State machine for leave requests, on top of an injected ledger."""

    def __init__(
        self,
        ledger: LeaveLedger,
        directory: EmployeeDirectory,
        authorization: Optional[AuthorizationProvider] = None,
        notifier: Optional[NotificationSink] = None,
        auditor: Optional[AuditSink] = None,
        policy: Optional[LeavePolicy] = None,
        resolver: Optional[IdentityResolver] = None,
    ):
        self.ledger = ledger
        self.directory = directory
        self.authorization = authorization or AuthorizationProvider()
        self.notifier = notifier or LoggingSink()
        self.auditor = auditor or LoggingSink()
        self.policy = policy or LeavePolicy.from_settings()
        self.resolver = resolver or IdentityResolver(directory)

    # ------------------------------------------------------------------ helpers

    def resolve_actor(self, session: SessionUser) -> Actor:
        return self.resolver.resolve(session)

    def _notify(self, employee_id: str, title: str, message: str) -> None:
        try:
            self.notifier.notify(employee_id, title, message)
        except Exception:
            logger.error("Notification sink failed for employee_id=%s", employee_id, exc_info=True)

    def _audit(self, actor: Actor, action_label: str, before: Any = None, after: Any = None,
               entity_id: Optional[str] = None) -> None:
        try:
            self.auditor.record(actor.name, action_label, before, after, entity_id=entity_id)
        except Exception:
            logger.error("Audit sink failed for action=%s", action_label, exc_info=True)

    def _balance_from(self, employee_id: str, year: int, requests: List[LeaveRequestRecord]) -> BalanceSnapshot:
        stored = self.ledger.get_balance(employee_id, year)
        snapshot = calculate_balance(
            employee_id,
            year,
            requests,
            policy=self.policy,
            carried_over=stored.carried_over,
        )
        refreshed = snapshot.to_record()
        if refreshed != stored:
            self.ledger.save_balance(refreshed)
        return snapshot

    def _check_balance(self, snapshot: BalanceSnapshot, leave_type: LeaveType, days: int) -> None:
        if leave_type not in PAID_LEAVE_TYPES:
            return
        remaining = snapshot.remaining(leave_type) or 0
        if days > remaining:
            raise InsufficientBalanceError(leave_type.value, days, remaining)

    @staticmethod
    def _check_overlap(requests: List[LeaveRequestRecord], start_date: date, end_date: date) -> None:
        for existing in requests:
            if existing.status not in ACTIVE_LEAVE_STATUSES:
                continue
            if existing.end_date >= start_date and existing.start_date <= end_date:
                raise LeaveOverlapError(
                    f"Leave request overlaps with existing leave from "
                    f"{existing.start_date} to {existing.end_date}"
                )

    def _transition(
        self,
        actor: Actor,
        request: LeaveRequestRecord,
        target: LeaveStatus,
        rejection_reason: Optional[str] = None,
    ) -> LeaveRequestRecord:
        update = StatusUpdate(
            status=target,
            actor_id=actor.employee_id,
            actor_name=actor.name,
            rejection_reason=rejection_reason,
        )
        updated = self.ledger.update_request_status(request.id, update)
        logger.info(
            "leave status transition: leave_request_id=%s before=%s after=%s action=%s actor=%s",
            request.id, request.status.value, updated.status.value, target.value, actor.employee_id,
        )
        self._audit(actor, f"Leave Request {target.value}", request, updated, entity_id=request.id)
        return updated

    # ------------------------------------------------------------------ reads

    def get_balance(self, employee_id: str, year: int) -> BalanceSnapshot:
        """Balance derived fresh from the ledger; the stored record is refreshed as a side effect."""
        requests = self.ledger.get_requests_by_employee(employee_id)
        return self._balance_from(employee_id, year, requests)

    def get_balance_for(self, session: SessionUser, employee_id: Optional[str] = None,
                        year: Optional[int] = None) -> BalanceSnapshot:
        actor = self.resolve_actor(session)
        target = employee_id or actor.employee_id
        if target != actor.employee_id and not self.authorization.is_reviewer(actor.role):
            raise UnauthorizedError()
        return self.get_balance(target, year or date.today().year)

    # ------------------------------------------------------------------ transitions

    def submit(self, session: SessionUser, data: LeaveApplyRequest) -> LeaveRequestRecord:
        """
        Create a pending leave request for the acting employee.

        Raises:
            ValidationError: Missing fields, unknown leave type or end_date < start_date
            EmployeeNotLinkedError: The session does not map to an employee
            UnauthorizedError: The role may not create leave
            InsufficientBalanceError: Requested days exceed the remaining balance
            LeaveOverlapError: Dates overlap a pending/hold/approved request
        """
        require_fields(data, APPLY_FIELDS)
        leave_type = normalize_leave_type(data.leave_type)

        if data.end_date < data.start_date:
            raise ValidationError("end_date cannot be before start_date")

        actor = self.resolve_actor(session)
        self.authorization.require(actor.role, CREATE_LEAVE)

        total_days = inclusive_days(data.start_date, data.end_date)
        existing = self.ledger.get_requests_by_employee(actor.employee_id)
        if leave_type in PAID_LEAVE_TYPES:
            snapshot = self._balance_from(actor.employee_id, data.start_date.year, existing)
            self._check_balance(snapshot, leave_type, total_days)
        self._check_overlap(existing, data.start_date, data.end_date)

        record = self.ledger.create_request(
            NewLeaveRequest(
                employee_id=actor.employee_id,
                employee_name=actor.name,
                leave_type=leave_type,
                start_date=data.start_date,
                end_date=data.end_date,
                reason=data.reason,
                attachments=data.attachments,
            )
        )
        logger.info(
            "leave submitted: id=%s employee_id=%s type=%s days=%s",
            record.id, record.employee_id, record.leave_type.value, record.total_days,
        )
        self._audit(actor, "Create Leave Request", None, record, entity_id=record.id)
        self._notify(
            actor.employee_id,
            "Leave Request Submitted",
            f"Your {leave_type_label(leave_type)} request has been submitted for approval.",
        )
        return record

    def approve(self, session: SessionUser, request_id: str) -> LeaveRequestRecord:
        actor = self.resolve_actor(session)
        self.authorization.require(actor.role, APPROVE_LEAVE)
        request = self.ledger.get_request(request_id)
        if not can_transition(request.status, LeaveStatus.APPROVED):
            raise InvalidTransitionError(request.status.value, LeaveStatus.APPROVED.value)

        if request.leave_type in PAID_LEAVE_TYPES:
            # Pending requests hold no days, so the current balance is what this approval may consume
            snapshot = self.get_balance(request.employee_id, request.start_date.year)
            self._check_balance(snapshot, request.leave_type, request.total_days)

        updated = self._transition(actor, request, LeaveStatus.APPROVED)
        self.get_balance(updated.employee_id, updated.start_date.year)
        self._notify(
            updated.employee_id,
            "Leave Request Approved",
            f"Your leave request has been approved by {actor.name}.",
        )
        return updated

    def reject(self, session: SessionUser, request_id: str, reason: Optional[str] = None) -> LeaveRequestRecord:
        actor = self.resolve_actor(session)
        self.authorization.require(actor.role, REJECT_LEAVE)
        request = self.ledger.get_request(request_id)
        if not can_transition(request.status, LeaveStatus.REJECTED):
            raise InvalidTransitionError(request.status.value, LeaveStatus.REJECTED.value)

        updated = self._transition(actor, request, LeaveStatus.REJECTED, rejection_reason=reason)
        self._notify(
            updated.employee_id,
            "Leave Request Rejected",
            f"Your leave request has been rejected by {actor.name}. Reason: {updated.rejection_reason}",
        )
        return updated

    def hold(self, session: SessionUser, request_id: str) -> LeaveRequestRecord:
        actor = self.resolve_actor(session)
        self.authorization.require(actor.role, APPROVE_LEAVE)
        request = self.ledger.get_request(request_id)
        if not can_transition(request.status, LeaveStatus.HOLD):
            raise InvalidTransitionError(request.status.value, LeaveStatus.HOLD.value)

        updated = self._transition(actor, request, LeaveStatus.HOLD)
        self._notify(updated.employee_id, "Leave Request On Hold", "Your leave request has been put on hold.")
        return updated

    def cancel(self, session: SessionUser, request_id: str) -> LeaveRequestRecord:
        """
        Cancel a request: the owner may cancel while pending; a reviewer may
        reverse an approved request, which gives the days back.
        """
        actor = self.resolve_actor(session)
        request = self.ledger.get_request(request_id)
        if not can_transition(request.status, LeaveStatus.CANCELLED):
            raise InvalidTransitionError(request.status.value, LeaveStatus.CANCELLED.value)

        if request.status == LeaveStatus.APPROVED:
            self.authorization.require(actor.role, APPROVE_LEAVE)
        else:
            if request.employee_id != actor.employee_id:
                raise UnauthorizedError()
            self.authorization.require(actor.role, CANCEL_OWN_LEAVE)

        was_approved = request.status == LeaveStatus.APPROVED
        updated = self._transition(actor, request, LeaveStatus.CANCELLED)
        if was_approved:
            self.get_balance(updated.employee_id, updated.start_date.year)
        self._notify(updated.employee_id, "Leave Request Cancelled", "Your leave request has been cancelled.")
        return updated

    def withdraw(self, session: SessionUser, request_id: str) -> None:
        """Delete a request that is still pending; owner only."""
        actor = self.resolve_actor(session)
        request = self.ledger.get_request(request_id)
        if request.employee_id != actor.employee_id:
            raise UnauthorizedError()
        if request.status != LeaveStatus.PENDING:
            raise InvalidTransitionError()
        self.ledger.delete_request(request_id)
        logger.info("leave withdrawn: id=%s employee_id=%s", request_id, actor.employee_id)
        self._audit(actor, "Delete Leave Request", request, None, entity_id=request_id)
