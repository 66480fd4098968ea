"""
Employee schemas
"""
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class EmployeeSummary(BaseModel):
    """Directory entry used for identity resolution and display names"""
    id: str
    name: str
    email: str
    role: str
    active: bool = True

    model_config = ConfigDict(from_attributes=True)


class EmployeeListResponse(BaseModel):
    items: List[EmployeeSummary]
    total: int


class Actor(BaseModel):
    """The acting user after identity resolution"""
    employee_id: str
    name: str
    role: str
    resolved_by: Optional[str] = None
