"""
Leave endpoints
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, status

from hrms.core.deps import get_queue, get_session, get_workflow
from hrms.schemas.auth import SessionUser
from hrms.schemas.leave import (
    BalanceSnapshot,
    LeaveApplyRequest,
    LeaveListResponse,
    LeaveRequestRecord,
    RejectActionRequest,
)
from hrms.services.approval_queue import ApprovalQueue
from hrms.services.leave_service import LeaveWorkflow

router = APIRouter()


@router.get("/balance/me", response_model=BalanceSnapshot)
async def balance_me(
    year: Optional[int] = Query(None, description="Calendar year (defaults to the current year)"),
    session: SessionUser = Depends(get_session),
    workflow: LeaveWorkflow = Depends(get_workflow),
):
    """
    Current user's leave balance for the year.
    Derived from approved requests on every read: entitlement, carried_over, used, remaining.
    """
    return workflow.get_balance_for(session, year=year)


@router.get("/balance/{employee_id}", response_model=BalanceSnapshot)
async def balance_for_employee(
    employee_id: str,
    year: Optional[int] = Query(None, description="Calendar year (defaults to the current year)"),
    session: SessionUser = Depends(get_session),
    workflow: LeaveWorkflow = Depends(get_workflow),
):
    """Balance of any employee (HR/ADMIN/EMPLOYER), or of the caller themselves."""
    return workflow.get_balance_for(session, employee_id=employee_id, year=year)


@router.post("/apply", response_model=LeaveRequestRecord, status_code=status.HTTP_201_CREATED)
async def apply_leave_endpoint(
    leave_data: LeaveApplyRequest,
    session: SessionUser = Depends(get_session),
    workflow: LeaveWorkflow = Depends(get_workflow),
):
    """
    Apply for leave (creates PENDING request)

    Any authenticated user linked to an employee record can apply for themselves.

    Validations (in order):
    - Required fields: leave_type, start_date, end_date, reason
    - Date order (start_date <= end_date)
    - Employee record linked to the session
    - Remaining balance for paid leave types
    - No overlap with a pending/hold/approved request
    """
    return workflow.submit(session, leave_data)


@router.get("/my", response_model=LeaveListResponse)
async def list_my_leaves(
    status_filter: Optional[str] = Query("all", alias="status", description="pending|approved|rejected|cancelled|hold|all"),
    session: SessionUser = Depends(get_session),
    queue: ApprovalQueue = Depends(get_queue),
):
    """Caller's own leave requests, newest first"""
    actor = queue.workflow.resolve_actor(session)
    items = queue.list_for_employee(session, actor.employee_id)
    if status_filter and status_filter != "all":
        items = [item for item in items if item.status.value == status_filter.lower()]
    return LeaveListResponse(items=items, total=len(items))


@router.get("/queue", response_model=LeaveListResponse)
async def approval_queue(
    status_filter: Optional[str] = Query("pending", alias="status", description="Status filter, 'all' for every status"),
    search: Optional[str] = Query(None, description="Matches employee name, leave type and reason"),
    session: SessionUser = Depends(get_session),
    queue: ApprovalQueue = Depends(get_queue),
):
    """
    Approval queue.

    HR/ADMIN/EMPLOYER see every request; other roles only their own.
    """
    items = queue.list_for_reviewer(session, status_filter, search)
    return LeaveListResponse(items=items, total=len(items))


@router.get("/employee/{employee_id}", response_model=LeaveListResponse)
async def list_employee_leaves(
    employee_id: str,
    session: SessionUser = Depends(get_session),
    queue: ApprovalQueue = Depends(get_queue),
):
    items = queue.list_for_employee(session, employee_id)
    return LeaveListResponse(items=items, total=len(items))


@router.post("/{leave_id}/approve", response_model=LeaveRequestRecord)
async def approve_leave_endpoint(
    leave_id: str,
    session: SessionUser = Depends(get_session),
    queue: ApprovalQueue = Depends(get_queue),
):
    """
    Approve a PENDING or HOLD leave request (HR/ADMIN/EMPLOYER)

    The balance is re-checked first, so approval never drives it negative.
    """
    return queue.approve(session, leave_id).updated


@router.post("/{leave_id}/reject", response_model=LeaveRequestRecord)
async def reject_leave_endpoint(
    leave_id: str,
    body: Optional[RejectActionRequest] = None,
    session: SessionUser = Depends(get_session),
    queue: ApprovalQueue = Depends(get_queue),
):
    """Reject a PENDING or HOLD leave request; reason defaults to "No reason provided"."""
    reason = body.reason if body else None
    return queue.reject(session, leave_id, reason).updated


@router.post("/{leave_id}/hold", response_model=LeaveRequestRecord)
async def hold_leave_endpoint(
    leave_id: str,
    session: SessionUser = Depends(get_session),
    queue: ApprovalQueue = Depends(get_queue),
):
    return queue.hold(session, leave_id).updated


@router.post("/{leave_id}/cancel", response_model=LeaveRequestRecord)
async def cancel_leave_endpoint(
    leave_id: str,
    session: SessionUser = Depends(get_session),
    workflow: LeaveWorkflow = Depends(get_workflow),
):
    """
    Cancel a leave request.

    - Owner: while PENDING
    - HR/ADMIN/EMPLOYER: an APPROVED request (reversal; the days return to the balance)
    """
    return workflow.cancel(session, leave_id)


@router.delete("/{leave_id}", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_leave_endpoint(
    leave_id: str,
    session: SessionUser = Depends(get_session),
    workflow: LeaveWorkflow = Depends(get_workflow),
):
    """Withdraw (delete) a PENDING request; owner only."""
    workflow.withdraw(session, leave_id)
