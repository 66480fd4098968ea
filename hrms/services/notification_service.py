"""
Notification service (fire-and-forget delivery to the notifications table)
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrms.core.errors import NotFoundError
from hrms.models.notification import Notification
from hrms.utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def notify(self, employee_id: str, title: str, message: str) -> Optional[Notification]:
        """Store a notification for an employee. Failures are logged and ignored."""
        try:
            notification = Notification(
                employee_id=employee_id,
                title=title,
                message=message,
                read=False,
                created_at=now_utc(),
            )
            self.db.add(notification)
            self.db.commit()
            self.db.refresh(notification)
            return notification
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Failed to deliver notification to employee_id=%s", employee_id, exc_info=True)
            return None

    def list_for_employee(self, employee_id: str) -> List[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.employee_id == employee_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .all()
        )

    def mark_read(self, employee_id: str, notification_id: int) -> Notification:
        notification = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.employee_id == employee_id)
            .first()
        )
        if not notification:
            raise NotFoundError("Notification", str(notification_id))
        notification.read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification
