"""
Notification schemas
"""
from datetime import datetime
from typing import List
from pydantic import BaseModel, ConfigDict


class NotificationOut(BaseModel):
    id: int
    employee_id: str
    title: str
    message: str
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationListResponse(BaseModel):
    items: List[NotificationOut]
    unread: int
