"""
Leave policy endpoint (public summary of yearly entitlements)
"""
from fastapi import APIRouter

from hrms.schemas.policy import LeavePolicyOut
from hrms.services.balance_calculator import LeavePolicy

router = APIRouter()


@router.get("/leave", response_model=LeavePolicyOut)
async def get_leave_policy():
    """
    Yearly entitlement per leave type, from settings.
    Unpaid leave is unbounded and reported as null.
    """
    return LeavePolicyOut(entitlements=LeavePolicy.from_settings().entitlements)
