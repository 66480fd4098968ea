"""
Leave ledger backed by the document-store routes of the HRMS API.

Transport failures (network errors, timeouts, 5xx) surface as TransportError so
the sync layer can fall back to the local mirror. 4xx responses are decoded back
into the domain error the server raised and are never treated as transport
failures.
"""
from typing import Any, List, Optional

import httpx

from hrms.core.config import Settings, settings as default_settings
from hrms.core.errors import (
    EmployeeNotLinkedError,
    InsufficientBalanceError,
    InvalidTransitionError,
    LeaveError,
    LeaveOverlapError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from hrms.core.logging import get_logger
from hrms.schemas.leave import LeaveBalanceRecord, LeaveRequestRecord, NewLeaveRequest, StatusUpdate
from hrms.services.ledger import LeaveLedger

logger = get_logger(__name__)


def build_client(settings: Optional[Settings] = None, token: Optional[str] = None) -> httpx.Client:
    """httpx client pointed at API_BASE_URL with the configured timeout and bearer token"""
    settings = settings or default_settings
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return httpx.Client(
        base_url=settings.API_BASE_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
        headers=headers,
    )


def _body(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def decode_error(response: httpx.Response) -> LeaveError:
    """Map a non-2xx API response to the matching domain error."""
    code = response.status_code
    if code >= 500:
        return TransportError(f"HTTP {code} from {response.request.url}")

    body = _body(response)
    detail = body.get("detail") or response.text or None
    if not isinstance(detail, str):
        detail = str(detail)
    error_type = body.get("error_type")

    if code == 400 and "remaining" in body:
        return InsufficientBalanceError(
            body.get("leave_type") or "leave",
            int(body.get("requested") or 0),
            int(body.get("remaining") or 0),
        )
    if code in (401, 403):
        return UnauthorizedError()
    if code == 404:
        if error_type == "employee_not_linked":
            return EmployeeNotLinkedError()
        error = NotFoundError()
        error.detail = detail or error.detail
        return error
    if code == 409:
        if error_type == "overlap":
            return LeaveOverlapError(detail)
        error = InvalidTransitionError()
        error.detail = detail or error.detail
        return error
    return ValidationError(detail)


class HttpLeaveLedger(LeaveLedger):
    def __init__(self, client: httpx.Client):
        self.client = client

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self.client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("leave API request failed: %s %s: %s", method, url, exc)
            raise TransportError(str(exc)) from exc
        if response.is_success:
            return response
        error = decode_error(response)
        if isinstance(error, TransportError):
            logger.warning("leave API error: %s %s -> %s", method, url, response.status_code)
        raise error

    def _requests(self, url: str) -> List[LeaveRequestRecord]:
        response = self._send("GET", url)
        return [LeaveRequestRecord.model_validate(item) for item in response.json()]

    def create_request(self, request: NewLeaveRequest) -> LeaveRequestRecord:
        response = self._send("POST", "/ledger/leaves", json=request.model_dump(mode="json"))
        return LeaveRequestRecord.model_validate(response.json())

    def get_request(self, request_id: str) -> LeaveRequestRecord:
        response = self._send("GET", f"/ledger/leaves/{request_id}")
        return LeaveRequestRecord.model_validate(response.json())

    def get_requests_by_employee(self, employee_id: str) -> List[LeaveRequestRecord]:
        return self._requests(f"/ledger/leaves/employee/{employee_id}")

    def get_all_requests(self) -> List[LeaveRequestRecord]:
        return self._requests("/ledger/leaves")

    def update_request_status(self, request_id: str, update: StatusUpdate) -> LeaveRequestRecord:
        response = self._send(
            "PATCH", f"/ledger/leaves/{request_id}/status", json=update.model_dump(mode="json")
        )
        return LeaveRequestRecord.model_validate(response.json())

    def delete_request(self, request_id: str) -> None:
        self._send("DELETE", f"/ledger/leaves/{request_id}")

    def get_balance(self, employee_id: str, year: int) -> LeaveBalanceRecord:
        response = self._send("GET", f"/ledger/balances/{employee_id}/{year}")
        return LeaveBalanceRecord.model_validate(response.json())

    def save_balance(self, balance: LeaveBalanceRecord) -> LeaveBalanceRecord:
        response = self._send(
            "PUT",
            f"/ledger/balances/{balance.employee_id}/{balance.year}",
            json=balance.model_dump(mode="json"),
        )
        return LeaveBalanceRecord.model_validate(response.json())
