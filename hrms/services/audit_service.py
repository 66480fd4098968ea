"""
Audit logging service (append-only)
"""
import logging
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hrms.models.audit_log import AuditLog
from hrms.utils.datetime_utils import now_utc
from hrms.utils.json_serializer import sanitize_for_json

logger = logging.getLogger(__name__)


class AuditService:
    """Audit sink backed by the audit_logs table. Failures are logged, never raised."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        actor_name: str,
        action_label: str,
        before: Optional[Any] = None,
        after: Optional[Any] = None,
        entity_id: Optional[str] = None,
        entity_type: str = "leave_requests",
    ) -> Optional[AuditLog]:
        """
        Append an audit entry

        Args:
            actor_name: Display name of the user performing the action
            action_label: Human readable action (e.g. "Create Leave Request")
            before: State before the action (optional)
            after: State after the action (optional)
            entity_id: ID of the affected entity (optional)
            entity_type: Type of entity

        Returns:
            Created AuditLog, or None if it could not be written
        """
        try:
            audit_log = AuditLog(
                actor_name=actor_name or "System",
                action=action_label,
                entity_type=entity_type,
                entity_id=entity_id,
                before_json=sanitize_for_json(before),
                after_json=sanitize_for_json(after),
                created_at=now_utc(),
            )
            self.db.add(audit_log)
            self.db.commit()
            self.db.refresh(audit_log)
            return audit_log
        except SQLAlchemyError:
            self.db.rollback()
            logger.error("Failed to write audit entry: action=%s", action_label, exc_info=True)
            return None
