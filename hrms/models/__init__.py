"""
Database models
"""
from hrms.models.employee import Employee, Role
from hrms.models.audit_log import AuditLog
from hrms.models.notification import Notification
from hrms.models.leave import (
    LeaveRequest,
    LeaveBalance,
    LeaveType,
    LeaveStatus,
    PAID_LEAVE_TYPES,
    ACTIVE_LEAVE_STATUSES,
)

__all__ = [
    "Employee",
    "Role",
    "AuditLog",
    "Notification",
    "LeaveRequest",
    "LeaveBalance",
    "LeaveType",
    "LeaveStatus",
    "PAID_LEAVE_TYPES",
    "ACTIVE_LEAVE_STATUSES",
]
