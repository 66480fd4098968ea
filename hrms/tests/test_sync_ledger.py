"""
Tests for the client sync layer: HTTP error mapping, local mirror and fallback
"""
import json
from datetime import date

import httpx
import pytest

from hrms.core.errors import (
    InsufficientBalanceError,
    InvalidTransitionError,
    LeaveOverlapError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from hrms.models.leave import LeaveStatus, LeaveType
from hrms.schemas.auth import SessionUser
from hrms.schemas.employee import EmployeeSummary
from hrms.schemas.leave import LeaveApplyRequest, NewLeaveRequest, StatusUpdate
from hrms.services.leave_service import LeaveWorkflow
from hrms.sync.directory import HttpEmployeeDirectory
from hrms.sync.http_ledger import HttpLeaveLedger
from hrms.sync.local_mirror import BALANCES_SLOT, REQUESTS_SLOT, LocalMirror
from hrms.sync.synced_ledger import MIRROR, PRIMARY, LedgerResult, SyncedLeaveLedger, attempt
from hrms.tests.factories import make_record

BASE_URL = "http://api.test/api/v1"


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler), base_url=BASE_URL)


def _offline(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def _new(**overrides):
    data = dict(
        employee_id="EMP001",
        employee_name="Asha Verma",
        leave_type=LeaveType.ANNUAL,
        start_date=date(2025, 10, 15),
        end_date=date(2025, 10, 19),
        reason="Diwali",
    )
    data.update(overrides)
    return NewLeaveRequest(**data)


@pytest.fixture
def mirror(tmp_path):
    return LocalMirror(tmp_path / "mirror")


# HttpLeaveLedger error mapping


def test_network_error_is_transport_error():
    ledger = HttpLeaveLedger(_client(_offline))

    with pytest.raises(TransportError):
        ledger.get_all_requests()


def test_server_error_is_transport_error():
    ledger = HttpLeaveLedger(_client(lambda request: httpx.Response(502, text="Bad gateway")))

    with pytest.raises(TransportError):
        ledger.get_request("abc")


@pytest.mark.parametrize(
    "status_code,body,expected",
    [
        (400, {"detail": "Missing required fields: reason"}, ValidationError),
        (400, {"detail": "x", "leave_type": "annual", "requested": 10, "remaining": 6}, InsufficientBalanceError),
        (404, {"detail": "Leave request abc not found"}, NotFoundError),
        (409, {"detail": "overlap", "error_type": "overlap"}, LeaveOverlapError),
        (409, {"detail": "finalized", "error_type": "invalid_transition"}, InvalidTransitionError),
    ],
)
def test_client_errors_decode_to_domain_errors(status_code, body, expected):
    ledger = HttpLeaveLedger(_client(lambda request: httpx.Response(status_code, json=body)))

    with pytest.raises(expected):
        ledger.get_request("abc")


def test_insufficient_balance_keeps_remaining():
    body = {"detail": "x", "leave_type": "annual", "requested": 10, "remaining": 6}
    ledger = HttpLeaveLedger(_client(lambda request: httpx.Response(400, json=body)))

    with pytest.raises(InsufficientBalanceError) as exc_info:
        ledger.create_request(_new())
    assert exc_info.value.remaining == 6


def test_requests_hit_document_store_routes():
    seen = []
    record = make_record(id="abc")

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        if request.method == "PATCH":
            assert json.loads(request.content)["status"] == "cancelled"
        return httpx.Response(200, json=record.model_dump(mode="json"))

    ledger = HttpLeaveLedger(_client(handler))
    ledger.get_request("abc")
    ledger.update_request_status("abc", StatusUpdate(status=LeaveStatus.CANCELLED))

    assert seen == [
        ("GET", "/api/v1/ledger/leaves/abc"),
        ("PATCH", "/api/v1/ledger/leaves/abc/status"),
    ]


# LocalMirror


def test_mirror_slots_are_flat_json_arrays(mirror):
    created = mirror.create_request(_new())

    stored = json.loads((mirror.directory / f"{REQUESTS_SLOT}.json").read_text())
    assert isinstance(stored, list)
    assert stored[0]["id"] == created.id
    assert stored[0]["leave_type"] == "annual"
    assert stored[0]["total_days"] == 5


def test_mirror_enforces_ledger_rules(mirror):
    created = mirror.create_request(_new())
    mirror.update_request_status(created.id, StatusUpdate(status=LeaveStatus.REJECTED))

    with pytest.raises(InvalidTransitionError):
        mirror.update_request_status(created.id, StatusUpdate(status=LeaveStatus.APPROVED))
    with pytest.raises(NotFoundError):
        mirror.get_request("missing")
    with pytest.raises(ValidationError):
        mirror.create_request(_new(reason=None))


def test_mirror_default_balance(mirror):
    balance = mirror.get_balance("EMP001", 2025)

    assert balance.annual == 20
    assert json.loads((mirror.directory / f"{BALANCES_SLOT}.json").read_text())[0]["year"] == 2025


def test_corrupt_slot_reads_as_empty(mirror):
    mirror.directory.mkdir(parents=True)
    (mirror.directory / f"{REQUESTS_SLOT}.json").write_text("{not json")

    assert mirror.get_all_requests() == []


# LedgerResult


def test_or_else_recovers_transport_failures_only():
    failed = LedgerResult(error=TransportError("down"))
    recovered = failed.or_else(lambda: "local")

    assert recovered.value == "local"
    assert recovered.source == MIRROR
    assert recovered.stale

    domain = LedgerResult(error=InvalidTransitionError("rejected", "approved"))
    assert domain.or_else(lambda: "local") is domain


def test_attempt_captures_domain_errors():
    def boom():
        raise NotFoundError("Leave request", "x")

    result = attempt(boom)
    assert not result.ok
    assert result.source == PRIMARY
    with pytest.raises(NotFoundError):
        result.unwrap()


# SyncedLeaveLedger


def test_successful_reads_are_written_through(mirror):
    records = [make_record(id="r1"), make_record(id="r2", employee_id="EMP002")]
    primary = HttpLeaveLedger(_client(lambda request: httpx.Response(200, json=[r.model_dump(mode="json") for r in records])))
    synced = SyncedLeaveLedger(primary, mirror)

    assert [r.id for r in synced.get_all_requests()] == ["r1", "r2"]
    assert not synced.stale
    assert {r.id for r in mirror.get_all_requests()} == {"r1", "r2"}


def test_offline_reads_fall_back_to_mirror(mirror):
    mirror.replace_requests([make_record(id="cached")])
    synced = SyncedLeaveLedger(HttpLeaveLedger(_client(_offline)), mirror)

    assert [r.id for r in synced.get_all_requests()] == ["cached"]
    assert synced.stale
    assert synced.last_result.source == MIRROR


def test_offline_mutations_apply_locally(mirror):
    synced = SyncedLeaveLedger(HttpLeaveLedger(_client(_offline)), mirror)

    created = synced.create_request(_new())
    cancelled = synced.update_request_status(created.id, StatusUpdate(status=LeaveStatus.CANCELLED, actor_id="EMP001"))

    assert cancelled.status == LeaveStatus.CANCELLED
    assert mirror.get_request(created.id).status == LeaveStatus.CANCELLED
    assert synced.stale


def test_domain_errors_never_fall_back(mirror):
    mirror.replace_requests([make_record(id="abc", status=LeaveStatus.PENDING)])
    conflict = {"detail": "Leave request already finalized", "error_type": "invalid_transition"}
    synced = SyncedLeaveLedger(
        HttpLeaveLedger(_client(lambda request: httpx.Response(409, json=conflict))), mirror
    )

    with pytest.raises(InvalidTransitionError):
        synced.update_request_status("abc", StatusUpdate(status=LeaveStatus.APPROVED))
    assert not synced.stale
    assert mirror.get_request("abc").status == LeaveStatus.PENDING


def test_refresh_discards_divergence(mirror):
    online = {"up": False}
    server_records = [make_record(id="server")]

    def handler(request: httpx.Request) -> httpx.Response:
        if not online["up"]:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, json=[r.model_dump(mode="json") for r in server_records])

    synced = SyncedLeaveLedger(HttpLeaveLedger(_client(handler)), mirror)
    synced.create_request(_new())
    assert synced.stale

    with pytest.raises(TransportError):
        synced.refresh()
    assert synced.stale

    online["up"] = True
    refreshed = synced.refresh()

    assert [r.id for r in refreshed] == ["server"]
    assert [r.id for r in mirror.get_all_requests()] == ["server"]
    assert not synced.stale


def test_scoped_refresh_keeps_stale_flag(mirror):
    online = {"up": False}
    server_records = [make_record(id="server", employee_id="EMP002")]

    def handler(request: httpx.Request) -> httpx.Response:
        if not online["up"]:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=[r.model_dump(mode="json") for r in server_records])

    synced = SyncedLeaveLedger(HttpLeaveLedger(_client(handler)), mirror)
    offline_record = synced.create_request(_new())
    assert synced.stale

    online["up"] = True
    synced.refresh(employee_id="EMP002")

    assert synced.stale
    assert {r.id for r in mirror.get_all_requests()} == {offline_record.id, "server"}

    synced.refresh()
    assert not synced.stale
    assert [r.id for r in mirror.get_all_requests()] == ["server"]


def test_mirror_write_failure_keeps_server_result(tmp_path):
    blocked = tmp_path / "blocked"
    blocked.write_text("not a directory")
    record = make_record(id="abc")
    primary = HttpLeaveLedger(_client(lambda request: httpx.Response(201, json=record.model_dump(mode="json"))))
    synced = SyncedLeaveLedger(primary, LocalMirror(blocked))

    created = synced.create_request(_new())

    assert created.id == "abc"
    assert not synced.stale
    assert synced.last_result.source == PRIMARY


def test_offline_workflow_keeps_working(mirror):
    """Submitting while the API is down lands in the mirror and flags the ledger stale."""
    mirror.store_employees([
        EmployeeSummary(id="EMP001", name="Asha Verma", email="asha.verma@example.com", role="employee"),
    ])
    client = _client(_offline)
    synced = SyncedLeaveLedger(HttpLeaveLedger(client), mirror)
    workflow = LeaveWorkflow(ledger=synced, directory=HttpEmployeeDirectory(client, mirror))

    record = workflow.submit(
        SessionUser(email="asha.verma@example.com"),
        LeaveApplyRequest(leave_type="Annual Leave", start_date=date(2025, 10, 15),
                          end_date=date(2025, 10, 19), reason="Diwali"),
    )

    assert record.status == LeaveStatus.PENDING
    assert synced.stale
    assert [r.id for r in mirror.get_requests_by_employee("EMP001")] == [record.id]


def test_http_directory_caches_employees(mirror):
    employees = [{"id": "EMP001", "name": "Asha Verma", "email": "asha.verma@example.com", "role": "employee", "active": True}]
    online = HttpEmployeeDirectory(_client(lambda request: httpx.Response(200, json={"items": employees, "total": 1})), mirror)

    assert online.resolve_by_email("Asha.Verma@example.com") == "EMP001"

    offline = HttpEmployeeDirectory(_client(_offline), mirror)
    assert offline.resolve_by_id("EMP001").name == "Asha Verma"


def test_http_directory_without_mirror_propagates():
    with pytest.raises(TransportError):
        HttpEmployeeDirectory(_client(_offline)).list_all()
