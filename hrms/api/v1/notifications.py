"""
Notification endpoints for the current employee
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hrms.core.deps import get_current_actor, get_db
from hrms.schemas.employee import Actor
from hrms.schemas.notification import NotificationListResponse, NotificationOut
from hrms.services.notification_service import NotificationService

router = APIRouter()


@router.get("/me", response_model=NotificationListResponse)
async def my_notifications(
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    items = NotificationService(db).list_for_employee(actor.employee_id)
    return NotificationListResponse(
        items=[NotificationOut.model_validate(n) for n in items],
        unread=sum(1 for n in items if not n.read),
    )


@router.post("/{notification_id}/read", response_model=NotificationOut)
async def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    """Mark one of the caller's notifications as read"""
    return NotificationService(db).mark_read(actor.employee_id, notification_id)
