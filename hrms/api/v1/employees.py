"""
Employee directory endpoints (read-only)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hrms.core.deps import get_db, get_session
from hrms.core.errors import NotFoundError
from hrms.schemas.auth import SessionUser
from hrms.schemas.employee import EmployeeListResponse, EmployeeSummary
from hrms.services.directory import SqlEmployeeDirectory

router = APIRouter()


@router.get("", response_model=EmployeeListResponse)
async def list_employees_endpoint(
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_session),
):
    """Directory listing used for identity resolution and display names"""
    items = SqlEmployeeDirectory(db).list_all()
    return EmployeeListResponse(items=items, total=len(items))


@router.get("/{employee_id}", response_model=EmployeeSummary)
async def get_employee_endpoint(
    employee_id: str,
    db: Session = Depends(get_db),
    session: SessionUser = Depends(get_session),
):
    employee = SqlEmployeeDirectory(db).resolve_by_id(employee_id)
    if employee is None:
        raise NotFoundError("Employee", employee_id)
    return employee
