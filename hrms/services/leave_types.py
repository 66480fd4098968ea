"""
Leave type normalization

Different entry points label the same pool differently ("Personal Leave" on the
employee page, "casual" in the balance record). Every label is folded to one
canonical LeaveType before it reaches the ledger or the balance calculator.
"""
import re
from typing import Dict, Union

from hrms.core.errors import ValidationError
from hrms.models.leave import LeaveType

_ALIASES: Dict[str, LeaveType] = {
    "annual": LeaveType.ANNUAL,
    "annual leave": LeaveType.ANNUAL,
    "vacation": LeaveType.ANNUAL,
    "earned": LeaveType.ANNUAL,
    "casual": LeaveType.CASUAL,
    "casual leave": LeaveType.CASUAL,
    "personal": LeaveType.CASUAL,
    "casual personal": LeaveType.CASUAL,
    "personal leave": LeaveType.CASUAL,
    "sick": LeaveType.SICK,
    "sick leave": LeaveType.SICK,
    "medical": LeaveType.SICK,
    "maternity": LeaveType.MATERNITY,
    "maternity leave": LeaveType.MATERNITY,
    "paternity": LeaveType.PATERNITY,
    "paternity leave": LeaveType.PATERNITY,
    "unpaid": LeaveType.UNPAID,
    "unpaid leave": LeaveType.UNPAID,
    "lwp": LeaveType.UNPAID,
    "leave without pay": LeaveType.UNPAID,
}

LABELS: Dict[LeaveType, str] = {
    LeaveType.ANNUAL: "Annual Leave",
    LeaveType.CASUAL: "Casual Leave",
    LeaveType.SICK: "Sick Leave",
    LeaveType.MATERNITY: "Maternity Leave",
    LeaveType.PATERNITY: "Paternity Leave",
    LeaveType.UNPAID: "Unpaid Leave",
}


def normalize_leave_type(label: Union[str, LeaveType, None]) -> LeaveType:
    """
    Map a leave type label to its canonical token.

    Raises:
        ValidationError: If the label is empty or unknown
    """
    if isinstance(label, LeaveType):
        return label
    if label is None or not str(label).strip():
        raise ValidationError("Missing required field: leave_type")
    key = re.sub(r"[\s_\-/]+", " ", str(label).strip().lower())
    leave_type = _ALIASES.get(key)
    if leave_type is None:
        raise ValidationError(f"Unknown leave type: {label}")
    return leave_type


def leave_type_label(leave_type: LeaveType) -> str:
    return LABELS[leave_type]
