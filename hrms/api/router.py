"""
Main API router
"""
from fastapi import APIRouter

from hrms.api.v1 import (
    health,
    version,
    employees,
    leaves,
    ledger,
    notifications,
    policy,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(leaves.router, prefix="/leaves", tags=["leaves"])
api_router.include_router(ledger.router, prefix="/ledger", tags=["ledger"])
api_router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
api_router.include_router(policy.router, prefix="/policy", tags=["policy"])
