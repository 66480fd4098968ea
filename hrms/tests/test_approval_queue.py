"""
Tests for the approval queue: reviewer listing, employee scoping and refresh after actions
"""
from datetime import date

import pytest

from hrms.core.errors import UnauthorizedError, ValidationError
from hrms.models.leave import LeaveStatus
from hrms.schemas.leave import LeaveApplyRequest
from hrms.services.approval_queue import ApprovalQueue
from hrms.tests.factories import session_for


@pytest.fixture
def queue(workflow):
    return ApprovalQueue(workflow)


@pytest.fixture
def requests(workflow, employee, other_employee):
    asha = workflow.submit(
        session_for(employee),
        LeaveApplyRequest(leave_type="Annual Leave", start_date=date(2025, 10, 15),
                          end_date=date(2025, 10, 19), reason="Diwali"),
    )
    rahul = workflow.submit(
        session_for(other_employee),
        LeaveApplyRequest(leave_type="Sick Leave", start_date=date(2025, 11, 3),
                          end_date=date(2025, 11, 4), reason="Fever"),
    )
    return asha, rahul


def test_reviewer_sees_all_pending(queue, hr_user, requests):
    items = queue.list_for_reviewer(session_for(hr_user))

    assert {r.id for r in items} == {r.id for r in requests}
    assert all(r.status == LeaveStatus.PENDING for r in items)


def test_queue_is_newest_first(queue, hr_user, requests):
    items = queue.list_for_reviewer(session_for(hr_user))

    assert items == sorted(items, key=lambda r: r.applied_at, reverse=True)


def test_non_reviewer_only_sees_own_requests(queue, employee, requests):
    for status_filter in ("pending", "all", None, "approved"):
        items = queue.list_for_reviewer(session_for(employee), status_filter)
        assert all(r.employee_id == employee.id for r in items)

    assert [r.id for r in queue.list_for_reviewer(session_for(employee), "all")] == [requests[0].id]


def test_search_matches_name_type_and_reason(queue, hr_user, requests):
    asha, rahul = requests

    assert [r.id for r in queue.list_for_reviewer(session_for(hr_user), search_text="asha")] == [asha.id]
    assert [r.id for r in queue.list_for_reviewer(session_for(hr_user), search_text="SICK")] == [rahul.id]
    assert [r.id for r in queue.list_for_reviewer(session_for(hr_user), search_text="diwali")] == [asha.id]
    assert queue.list_for_reviewer(session_for(hr_user), search_text="sabbatical") == []


def test_unknown_status_filter_rejected(queue, hr_user, requests):
    with pytest.raises(ValidationError):
        queue.list_for_reviewer(session_for(hr_user), "archived")


def test_approve_refreshes_queue(queue, hr_user, requests):
    asha, rahul = requests
    refresh = queue.approve(session_for(hr_user), asha.id)

    assert refresh.updated.status == LeaveStatus.APPROVED
    assert [r.id for r in refresh.items] == [rahul.id]


def test_reject_and_hold_refresh_queue(queue, hr_user, requests):
    asha, rahul = requests

    rejected = queue.reject(session_for(hr_user), asha.id, "Team offsite")
    assert rejected.updated.rejection_reason == "Team offsite"
    assert [r.id for r in rejected.items] == [rahul.id]

    held = queue.hold(session_for(hr_user), rahul.id)
    assert held.updated.status == LeaveStatus.HOLD
    assert held.items == []
    assert [r.id for r in queue.list_for_reviewer(session_for(hr_user), "hold")] == [rahul.id]


def test_list_for_employee_scoping(queue, employee, other_employee, hr_user, requests):
    asha, _ = requests

    assert [r.id for r in queue.list_for_employee(session_for(employee), employee.id)] == [asha.id]
    assert [r.id for r in queue.list_for_employee(session_for(hr_user), employee.id)] == [asha.id]
    with pytest.raises(UnauthorizedError):
        queue.list_for_employee(session_for(other_employee), employee.id)
