"""
Document-store endpoints for leave requests and balances

These are the raw ledger operations used by remote clients (HttpLeaveLedger).
Business rules live in the workflow; here record invariants and ownership are
enforced, together with the rules a client must not be able to bypass:
only pending requests can be deleted, decisions are stamped with the caller,
and carry-over is set by reviewers only.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hrms.core.deps import authorization, get_current_actor, get_db, require_reviewer
from hrms.core.errors import InvalidTransitionError, UnauthorizedError
from hrms.models.leave import LeaveStatus
from hrms.schemas.employee import Actor
from hrms.schemas.leave import LeaveBalanceRecord, LeaveRequestRecord, NewLeaveRequest, StatusUpdate
from hrms.services.authorization import APPROVE_LEAVE, CANCEL_OWN_LEAVE, CREATE_LEAVE
from hrms.services.sql_ledger import SqlLeaveLedger

logger = logging.getLogger(__name__)

router = APIRouter()


def _require_self_or_reviewer(actor: Actor, employee_id: str) -> None:
    if employee_id != actor.employee_id and not authorization.is_reviewer(actor.role):
        raise UnauthorizedError()


@router.get("/leaves", response_model=List[LeaveRequestRecord])
async def get_all_requests(
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_reviewer),
):
    return SqlLeaveLedger(db).get_all_requests()


@router.get("/leaves/employee/{employee_id}", response_model=List[LeaveRequestRecord])
async def get_requests_by_employee(
    employee_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    _require_self_or_reviewer(actor, employee_id)
    return SqlLeaveLedger(db).get_requests_by_employee(employee_id)


@router.get("/leaves/{leave_id}", response_model=LeaveRequestRecord)
async def get_request(
    leave_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    record = SqlLeaveLedger(db).get_request(leave_id)
    _require_self_or_reviewer(actor, record.employee_id)
    return record


@router.post("/leaves", response_model=LeaveRequestRecord, status_code=status.HTTP_201_CREATED)
async def create_request(
    request: NewLeaveRequest,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    authorization.require(actor.role, CREATE_LEAVE)
    if request.employee_id:
        _require_self_or_reviewer(actor, request.employee_id)
    return SqlLeaveLedger(db).create_request(request)


@router.patch("/leaves/{leave_id}/status", response_model=LeaveRequestRecord)
async def update_request_status(
    leave_id: str,
    update: StatusUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Move a request to a new status; the decision is recorded against the caller."""
    ledger = SqlLeaveLedger(db)
    record = ledger.get_request(leave_id)
    if update.status == LeaveStatus.CANCELLED and record.status == LeaveStatus.PENDING:
        if record.employee_id != actor.employee_id:
            raise UnauthorizedError()
        authorization.require(actor.role, CANCEL_OWN_LEAVE)
    else:
        authorization.require(actor.role, APPROVE_LEAVE)
    stamped = update.model_copy(update={"actor_id": actor.employee_id, "actor_name": actor.name})
    return ledger.update_request_status(leave_id, stamped)


@router.delete("/leaves/{leave_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_request(
    leave_id: str,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    ledger = SqlLeaveLedger(db)
    record = ledger.get_request(leave_id)
    _require_self_or_reviewer(actor, record.employee_id)
    if record.status != LeaveStatus.PENDING:
        raise InvalidTransitionError(record.status.value, "deleted")
    ledger.delete_request(leave_id)


@router.get("/balances/{employee_id}/{year}", response_model=LeaveBalanceRecord)
async def get_balance(
    employee_id: str,
    year: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    _require_self_or_reviewer(actor, employee_id)
    return SqlLeaveLedger(db).get_balance(employee_id, year)


@router.put("/balances/{employee_id}/{year}", response_model=LeaveBalanceRecord)
async def save_balance(
    employee_id: str,
    year: int,
    balance: LeaveBalanceRecord,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """
    Store a balance snapshot.

    Remaining days are recomputed from approved requests on every read, so only
    carried_over is authoritative; a non-reviewer's snapshot keeps the stored value.
    """
    _require_self_or_reviewer(actor, employee_id)
    ledger = SqlLeaveLedger(db)
    changes = {"employee_id": employee_id, "year": year}
    if not authorization.is_reviewer(actor.role):
        stored = ledger.get_balance(employee_id, year)
        if balance.carried_over != stored.carried_over:
            logger.warning(
                "carried_over change ignored for non-reviewer: employee_id=%s year=%s actor=%s",
                employee_id, year, actor.employee_id,
            )
        changes["carried_over"] = stored.carried_over
    return ledger.save_balance(balance.model_copy(update=changes))
