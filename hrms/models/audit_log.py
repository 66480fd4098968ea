"""
Audit log model
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON
from hrms.db.base import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True)
    actor_name = Column(String, nullable=False)
    action = Column(String, nullable=False)  # e.g. "Create Leave Request", "Leave Request approved"
    entity_type = Column(String, nullable=False, default="leave_requests")
    entity_id = Column(String, nullable=True)
    before_json = Column(JSON, nullable=True)
    after_json = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
