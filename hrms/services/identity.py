"""
Identity resolution - map the acting session to a stable employee identity.

Strategies are tried in order; the first one that yields an employee wins.
Unresolved always comes last and refuses the operation: a session that
cannot be linked to a directory entry never borrows someone else's record.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Sequence

from hrms.core.errors import EmployeeNotLinkedError
from hrms.schemas.auth import SessionUser
from hrms.schemas.employee import Actor, EmployeeSummary
from hrms.services.directory import EmployeeDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    employee: EmployeeSummary
    strategy: str


class ResolverStrategy(ABC):
    name = "base"

    @abstractmethod
    def resolve(self, session: SessionUser, directory: EmployeeDirectory) -> Optional[Resolution]:
        raise NotImplementedError


class ByExplicitId(ResolverStrategy):
    """The session already carries an employee id."""

    name = "explicit_id"

    def resolve(self, session: SessionUser, directory: EmployeeDirectory) -> Optional[Resolution]:
        if not session.employee_id:
            return None
        employee = directory.resolve_by_id(session.employee_id)
        return Resolution(employee, self.name) if employee else None


class ByEmail(ResolverStrategy):
    """Exact, case-insensitive email match against the directory."""

    name = "email"

    def resolve(self, session: SessionUser, directory: EmployeeDirectory) -> Optional[Resolution]:
        if not session.email:
            return None
        employee_id = directory.resolve_by_email(session.email)
        if not employee_id:
            return None
        employee = directory.resolve_by_id(employee_id)
        return Resolution(employee, self.name) if employee else None


class ByDirectoryId(ResolverStrategy):
    """The session's user id is itself a directory primary key."""

    name = "directory_id"

    def resolve(self, session: SessionUser, directory: EmployeeDirectory) -> Optional[Resolution]:
        if not session.user_id:
            return None
        employee = directory.resolve_by_id(session.user_id)
        return Resolution(employee, self.name) if employee else None


class Unresolved(ResolverStrategy):
    name = "unresolved"

    def resolve(self, session: SessionUser, directory: EmployeeDirectory) -> Optional[Resolution]:
        logger.warning(
            "employee record not linked: user_id=%s email=%s", session.user_id, session.email
        )
        raise EmployeeNotLinkedError()


DEFAULT_STRATEGIES: Sequence[ResolverStrategy] = (
    ByExplicitId(),
    ByEmail(),
    ByDirectoryId(),
    Unresolved(),
)


class IdentityResolver:
    def __init__(self, directory: EmployeeDirectory, strategies: Sequence[ResolverStrategy] = DEFAULT_STRATEGIES):
        self.directory = directory
        self.strategies = strategies

    def resolve(self, session: SessionUser) -> Actor:
        """
        Resolve the session to an Actor.

        Raises:
            EmployeeNotLinkedError: If no strategy links the session to an employee
        """
        for strategy in self.strategies:
            resolution = strategy.resolve(session, self.directory)
            if resolution is not None:
                logger.debug(
                    "session resolved: employee_id=%s strategy=%s",
                    resolution.employee.id, resolution.strategy,
                )
                return Actor(
                    employee_id=resolution.employee.id,
                    name=resolution.employee.name,
                    role=session.role or resolution.employee.role,
                    resolved_by=resolution.strategy,
                )
        raise EmployeeNotLinkedError()
