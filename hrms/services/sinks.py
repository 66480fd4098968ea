"""
Side-channel sinks consumed by the leave workflow.

Neither sink may block a transition: implementations log their own failures.
"""
import logging
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)


class NotificationSink(Protocol):
    def notify(self, employee_id: str, title: str, message: str) -> Any:
        ...


class AuditSink(Protocol):
    def record(
        self,
        actor_name: str,
        action_label: str,
        before: Optional[Any] = None,
        after: Optional[Any] = None,
        entity_id: Optional[str] = None,
    ) -> Any:
        ...


class LoggingSink:
    """Notification + audit sink that only writes to the log (client-side wiring)."""

    def notify(self, employee_id: str, title: str, message: str) -> None:
        logger.info("notification: employee_id=%s title=%s message=%s", employee_id, title, message)

    def record(
        self,
        actor_name: str,
        action_label: str,
        before: Optional[Any] = None,
        after: Optional[Any] = None,
        entity_id: Optional[str] = None,
    ) -> None:
        logger.info("audit: actor=%s action=%s entity_id=%s", actor_name, action_label, entity_id)
