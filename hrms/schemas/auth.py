"""
Session schemas
"""
from typing import Optional
from pydantic import BaseModel, Field


class SessionUser(BaseModel):
    """Claims carried by the bearer token"""
    user_id: Optional[str] = Field(None, description="Subject (sub) of the token")
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = Field(None, description="Role claim; the directory role is used when absent")
    employee_id: Optional[str] = Field(None, description="Explicit employee link, when the session has one")
