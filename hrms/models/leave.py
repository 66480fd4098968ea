"""
Leave models
"""
from sqlalchemy import (
    Column,
    Integer,
    Date,
    DateTime,
    ForeignKey,
    String,
    Text,
    JSON,
    Enum as SQLEnum,
    UniqueConstraint,
    Index,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import enum
from hrms.db.base import Base


class LeaveType(str, enum.Enum):
    ANNUAL = "annual"
    CASUAL = "casual"
    SICK = "sick"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    UNPAID = "unpaid"


class LeaveStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    HOLD = "hold"


# Leave types drawing from a capped balance pool (unpaid is always available)
PAID_LEAVE_TYPES = (
    LeaveType.ANNUAL,
    LeaveType.CASUAL,
    LeaveType.SICK,
    LeaveType.MATERNITY,
    LeaveType.PATERNITY,
)

# Statuses that block a new request for the same dates
ACTIVE_LEAVE_STATUSES = frozenset({
    LeaveStatus.PENDING,
    LeaveStatus.HOLD,
    LeaveStatus.APPROVED,
})


class LeaveRequest(Base):
    __tablename__ = "leave_requests"

    id = Column(String(36), primary_key=True, index=True)
    employee_id = Column(String(64), ForeignKey("employees.id"), nullable=False, index=True)
    employee_name = Column(String, nullable=False)
    leave_type = Column(SQLEnum(LeaveType), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    total_days = Column(Integer, nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(SQLEnum(LeaveStatus), nullable=False, default=LeaveStatus.PENDING)
    applied_at = Column(DateTime(timezone=True), nullable=False)
    approver_id = Column(String(64), nullable=True)
    approver_name = Column(String, nullable=True)
    decision_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_by_id = Column(String(64), nullable=True)
    attachments = Column(JSON, nullable=False, default=list)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
        nullable=False,
    )

    employee = relationship("Employee", foreign_keys=[employee_id], back_populates="leave_requests")

    __table_args__ = (
        Index("ix_leave_requests_employee_status", "employee_id", "status"),
        Index("ix_leave_requests_employee_dates", "employee_id", "start_date", "end_date"),
        CheckConstraint("start_date <= end_date", name="check_start_date_le_end_date"),
    )


class LeaveBalance(Base):
    """
    Leave balance: one row per (employee_id, year).
    Per-type columns hold remaining days; carried_over maps leave type -> extra days.
    """
    __tablename__ = "leave_balances"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String(64), ForeignKey("employees.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False, index=True)
    annual = Column(Integer, nullable=False, default=0)
    casual = Column(Integer, nullable=False, default=0)
    sick = Column(Integer, nullable=False, default=0)
    maternity = Column(Integer, nullable=False, default=0)
    paternity = Column(Integer, nullable=False, default=0)
    carried_over = Column(JSON, nullable=False, default=dict)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.current_timestamp(),
        onupdate=func.current_timestamp(),
        nullable=False,
    )

    employee = relationship("Employee", backref="leave_balances")

    __table_args__ = (
        UniqueConstraint("employee_id", "year", name="uq_leave_balances_employee_year"),
    )
