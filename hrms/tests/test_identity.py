"""
Tests for session -> employee identity resolution
"""
import pytest

from hrms.core.errors import EmployeeNotLinkedError
from hrms.schemas.auth import SessionUser
from hrms.services.directory import SqlEmployeeDirectory
from hrms.services.identity import ByEmail, IdentityResolver, Unresolved


@pytest.fixture
def resolver(db):
    return IdentityResolver(SqlEmployeeDirectory(db))


def test_explicit_employee_id_wins(resolver, employee, other_employee):
    actor = resolver.resolve(SessionUser(user_id="idp|x", email=other_employee.email, employee_id=employee.id))

    assert actor.employee_id == employee.id
    assert actor.resolved_by == "explicit_id"


def test_email_match_is_case_insensitive(resolver, employee):
    actor = resolver.resolve(SessionUser(user_id="idp|x", email="  ASHA.Verma@Example.com "))

    assert actor.employee_id == employee.id
    assert actor.name == "Asha Verma"
    assert actor.resolved_by == "email"


def test_user_id_as_directory_key(resolver, employee):
    actor = resolver.resolve(SessionUser(user_id=employee.id, email="someone.else@example.com"))

    assert actor.employee_id == employee.id
    assert actor.resolved_by == "directory_id"


def test_unknown_explicit_id_falls_through_to_email(resolver, employee):
    actor = resolver.resolve(SessionUser(user_id="idp|x", email=employee.email, employee_id="GHOST"))

    assert actor.employee_id == employee.id
    assert actor.resolved_by == "email"


def test_unlinked_session_is_refused(resolver, employee):
    with pytest.raises(EmployeeNotLinkedError):
        resolver.resolve(SessionUser(user_id="idp|nobody", email="nobody@example.com"))


def test_role_claim_overrides_directory_role(resolver, employee):
    assert resolver.resolve(SessionUser(email=employee.email)).role == "employee"
    assert resolver.resolve(SessionUser(email=employee.email, role="hr")).role == "hr"


def test_custom_strategy_order(db, employee):
    resolver = IdentityResolver(SqlEmployeeDirectory(db), strategies=(ByEmail(), Unresolved()))

    with pytest.raises(EmployeeNotLinkedError):
        resolver.resolve(SessionUser(user_id=employee.id))
