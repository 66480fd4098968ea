"""
Database initialization script
Creates the schema and seeds a minimal demo directory

Usage: python -m hrms.db.init_db
"""
import logging

from sqlalchemy.orm import Session

from hrms.core.logging import setup_logging
from hrms.db.session import SessionLocal, init_schema
from hrms.models.employee import Employee, Role

logger = logging.getLogger(__name__)

DEMO_EMPLOYEES = (
    ("EMP001", "Asha Verma", "asha.verma@example.com", Role.EMPLOYEE),
    ("EMP002", "Rahul Mehta", "rahul.mehta@example.com", Role.MANAGER),
    ("HR001", "Default HR Admin", "hr@example.com", Role.HR),
    ("ADM001", "System Administrator", "admin@example.com", Role.ADMIN),
)


def init_db(db: Session) -> int:
    """
    Seed the demo directory if no HR user exists yet.

    This is a helper and is NOT run on startup.

    Returns:
        Number of employees created
    """
    existing_hr = db.query(Employee).filter(Employee.role == Role.HR.value).first()
    if existing_hr:
        logger.info("HR user already exists, skipping initialization")
        return 0

    created = 0
    for employee_id, name, email, role in DEMO_EMPLOYEES:
        if db.query(Employee).filter(Employee.id == employee_id).first():
            continue
        db.add(Employee(id=employee_id, name=name, email=email, role=role.value, active=True))
        created += 1
    db.commit()
    logger.info("Demo directory seeded: %s employee(s)", created)
    return created


def main() -> None:
    setup_logging()
    init_schema()
    db = SessionLocal()
    try:
        init_db(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
