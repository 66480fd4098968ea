"""
Dependencies and guards for FastAPI endpoints
"""
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from hrms.core.errors import UnauthorizedError
from hrms.core.security import decode_token
from hrms.db.session import get_db
from hrms.schemas.auth import SessionUser
from hrms.schemas.employee import Actor
from hrms.services.approval_queue import ApprovalQueue
from hrms.services.audit_service import AuditService
from hrms.services.authorization import AuthorizationProvider
from hrms.services.directory import SqlEmployeeDirectory
from hrms.services.leave_service import LeaveWorkflow
from hrms.services.notification_service import NotificationService
from hrms.services.sql_ledger import SqlLeaveLedger

security = HTTPBearer()

authorization = AuthorizationProvider()


def get_session(credentials: HTTPAuthorizationCredentials = Depends(security)) -> SessionUser:
    """
    Decode the bearer JWT issued by the identity provider into a session.

    Claims: sub (user id), email, role, optional employee_id and name.
    """
    try:
        payload = decode_token(credentials.credentials)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    sub_value = payload.get("sub")
    if sub_value is None and not payload.get("email"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return SessionUser(
        user_id=str(sub_value) if sub_value is not None else None,
        email=payload.get("email"),
        name=payload.get("name"),
        role=payload.get("role"),
        employee_id=payload.get("employee_id"),
    )


def get_workflow(db: Session = Depends(get_db)) -> LeaveWorkflow:
    directory = SqlEmployeeDirectory(db)
    return LeaveWorkflow(
        ledger=SqlLeaveLedger(db),
        directory=directory,
        authorization=authorization,
        notifier=NotificationService(db),
        auditor=AuditService(db),
    )


def get_queue(workflow: LeaveWorkflow = Depends(get_workflow)) -> ApprovalQueue:
    return ApprovalQueue(workflow)


def get_current_actor(
    session: SessionUser = Depends(get_session),
    workflow: LeaveWorkflow = Depends(get_workflow),
) -> Actor:
    """Resolved employee identity of the caller (404 when not linked)"""
    return workflow.resolve_actor(session)


def require_reviewer(actor: Actor = Depends(get_current_actor)) -> Actor:
    """
    Guard for reviewer-only routes

    Usage:
        @router.get("/all")
        async def all_leaves(actor: Actor = Depends(require_reviewer)):
            ...
    """
    if not authorization.is_reviewer(actor.role):
        raise UnauthorizedError()
    return actor
