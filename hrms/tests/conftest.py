"""
Pytest configuration and fixtures
"""
import os

os.environ.setdefault("APP_ENV", "local")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-hrms-leave-tests")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from hrms.main import app
from hrms.db.base import Base
from hrms.core.deps import get_db
from hrms.services.audit_service import AuditService
from hrms.services.directory import SqlEmployeeDirectory
from hrms.services.leave_service import LeaveWorkflow
from hrms.services.notification_service import NotificationService
from hrms.services.sql_ledger import SqlLeaveLedger

# Import all models to ensure they're registered with Base.metadata
from hrms.models import (
    AuditLog,
    Employee,
    LeaveBalance,
    LeaveRequest,
    Notification,
    Role,
)  # noqa


# Use in-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# Enable foreign keys for SQLite
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Test client fixture with database override"""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add_employee(db, employee_id, name, email, role):
    employee = Employee(id=employee_id, name=name, email=email, role=role.value, active=True)
    db.add(employee)
    db.commit()
    db.refresh(employee)
    return employee


@pytest.fixture
def employee(db):
    return _add_employee(db, "EMP001", "Asha Verma", "asha.verma@example.com", Role.EMPLOYEE)


@pytest.fixture
def other_employee(db):
    return _add_employee(db, "EMP002", "Rahul Mehta", "rahul.mehta@example.com", Role.EMPLOYEE)


@pytest.fixture
def manager(db):
    return _add_employee(db, "MGR001", "Meera Iyer", "meera.iyer@example.com", Role.MANAGER)


@pytest.fixture
def hr_user(db):
    return _add_employee(db, "HR001", "HR Admin", "hr@example.com", Role.HR)


@pytest.fixture
def workflow(db):
    return LeaveWorkflow(
        ledger=SqlLeaveLedger(db),
        directory=SqlEmployeeDirectory(db),
        notifier=NotificationService(db),
        auditor=AuditService(db),
    )
