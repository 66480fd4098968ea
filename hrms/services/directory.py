"""
Employee directory - identity lookups and display names
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from hrms.models.employee import Employee
from hrms.schemas.employee import EmployeeSummary


class EmployeeDirectory(ABC):
    @abstractmethod
    def resolve_by_email(self, email: str) -> Optional[str]:
        """Employee id for a case-insensitive email match, if any."""
        raise NotImplementedError

    @abstractmethod
    def resolve_by_id(self, employee_id: str) -> Optional[EmployeeSummary]:
        raise NotImplementedError

    @abstractmethod
    def list_all(self) -> List[EmployeeSummary]:
        raise NotImplementedError


class SqlEmployeeDirectory(EmployeeDirectory):
    def __init__(self, db: Session):
        self.db = db

    def resolve_by_email(self, email: str) -> Optional[str]:
        if not email or not email.strip():
            return None
        employee = (
            self.db.query(Employee)
            .filter(func.lower(Employee.email) == email.strip().lower())
            .first()
        )
        return employee.id if employee else None

    def resolve_by_id(self, employee_id: str) -> Optional[EmployeeSummary]:
        if not employee_id:
            return None
        employee = self.db.query(Employee).filter(Employee.id == employee_id).first()
        return EmployeeSummary.model_validate(employee) if employee else None

    def list_all(self) -> List[EmployeeSummary]:
        employees = self.db.query(Employee).order_by(Employee.name.asc()).all()
        return [EmployeeSummary.model_validate(e) for e in employees]
