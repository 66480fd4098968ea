"""
Leave policy schemas
"""
from typing import Dict, Optional
from pydantic import BaseModel

from hrms.models.leave import LeaveType


class LeavePolicyOut(BaseModel):
    """Per-type yearly entitlement; None means unbounded"""
    entitlements: Dict[LeaveType, Optional[int]]
