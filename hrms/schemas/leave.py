"""
Leave schemas
"""
from datetime import date, datetime
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from hrms.models.leave import LeaveStatus, LeaveType, PAID_LEAVE_TYPES
from hrms.utils.datetime_utils import ensure_utc


class LeaveRequestRecord(BaseModel):
    """Stored leave request, as kept by every ledger (SQL, HTTP, local mirror)"""
    id: str
    employee_id: str
    employee_name: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    total_days: int
    reason: str
    status: LeaveStatus
    applied_at: datetime
    approver_id: Optional[str] = None
    approver_name: Optional[str] = None
    decision_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    cancelled_at: Optional[datetime] = None
    cancelled_by_id: Optional[str] = None
    attachments: List[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("attachments", mode="before")
    @classmethod
    def _none_attachments(cls, v):
        return v or []

    @field_validator("applied_at", "decision_at", "cancelled_at", mode="after")
    @classmethod
    def _utc_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands back naive datetimes; keep every record comparable
        return ensure_utc(v)


class NewLeaveRequest(BaseModel):
    """Ledger input for createRequest; required fields are checked by the ledger itself"""
    id: Optional[str] = None
    employee_id: Optional[str] = None
    employee_name: Optional[str] = None
    leave_type: Optional[LeaveType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None
    applied_at: Optional[datetime] = None
    attachments: List[str] = Field(default_factory=list)


class StatusUpdate(BaseModel):
    """Metadata for updateRequestStatus"""
    status: LeaveStatus
    actor_id: Optional[str] = None
    actor_name: Optional[str] = None
    rejection_reason: Optional[str] = None


class LeaveApplyRequest(BaseModel):
    """Schema for applying leave; leave_type accepts any UI label ("Annual Leave", "casual", ...)"""
    leave_type: Optional[str] = Field(None, description="Leave type label")
    start_date: Optional[date] = Field(None, description="First day of leave")
    end_date: Optional[date] = Field(None, description="Last day of leave (inclusive)")
    reason: Optional[str] = Field(None, description="Reason for leave")
    attachments: List[str] = Field(default_factory=list, description="Opaque file references")


class RejectActionRequest(BaseModel):
    reason: Optional[str] = Field(None, description="Rejection reason")


class LeaveListResponse(BaseModel):
    items: List[LeaveRequestRecord]
    total: int


class LeaveBalanceRecord(BaseModel):
    """Persisted balance: remaining days per paid type for one employee and year"""
    employee_id: str
    year: int
    annual: int = 0
    casual: int = 0
    sick: int = 0
    maternity: int = 0
    paternity: int = 0
    carried_over: Dict[LeaveType, int] = Field(default_factory=dict)

    model_config = ConfigDict(from_attributes=True)

    @field_validator("carried_over", mode="before")
    @classmethod
    def _none_carried_over(cls, v):
        return v or {}


class BalanceItemOut(BaseModel):
    leave_type: LeaveType
    entitlement: Optional[int] = Field(None, description="Policy default; None when unbounded")
    carried_over: int = 0
    used: int = 0
    remaining: Optional[int] = Field(None, description="Remaining days (floored at 0); None when unbounded")


class BalanceSnapshot(BaseModel):
    """Balance derived from the approved requests of one employee and year"""
    employee_id: str
    year: int
    items: List[BalanceItemOut]

    def item(self, leave_type: LeaveType) -> BalanceItemOut:
        for item in self.items:
            if item.leave_type == leave_type:
                return item
        raise KeyError(leave_type)

    def remaining(self, leave_type: LeaveType) -> Optional[int]:
        return self.item(leave_type).remaining

    def to_record(self) -> LeaveBalanceRecord:
        values = {lt.value: self.item(lt).remaining or 0 for lt in PAID_LEAVE_TYPES}
        carried = {item.leave_type: item.carried_over for item in self.items if item.carried_over}
        return LeaveBalanceRecord(employee_id=self.employee_id, year=self.year, carried_over=carried, **values)
