"""
Central error handling for HRMS leave service

Domain errors subclass HTTPException so services can raise them directly and
the API renders them through the same JSON envelope as any other HTTP error.
"""
import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LeaveError(HTTPException):
    """Base class for leave domain errors"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Leave request error"

    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class ValidationError(LeaveError):
    """Malformed or missing input to a creation/update call"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid leave request"


class LeaveOverlapError(ValidationError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Leave request overlaps with an existing leave"


class InvalidTransitionError(LeaveError):
    """A status transition attempted from a state that does not permit it"""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "Leave request already finalized"

    def __init__(self, current: Optional[str] = None, target: Optional[str] = None) -> None:
        self.current = current
        self.target = target
        if current and target:
            detail = f"Leave request already finalized: cannot move from {current} to {target}"
        else:
            detail = None
        super().__init__(detail)


class InsufficientBalanceError(LeaveError):
    """Requested days exceed the remaining entitlement"""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, leave_type: str, requested: int, remaining: int) -> None:
        self.leave_type = leave_type
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Insufficient {leave_type} leave balance: requested {requested} day(s), "
            f"remaining {remaining} day(s), short by {requested - remaining}"
        )


class NotFoundError(LeaveError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"

    def __init__(self, entity: str = "Record", entity_id: Optional[str] = None) -> None:
        if entity_id is not None:
            detail = f"{entity} {entity_id} not found"
        else:
            detail = f"{entity} not found"
        super().__init__(detail)


class EmployeeNotLinkedError(NotFoundError):
    """The acting user could not be resolved to an employee record"""

    def __init__(self) -> None:
        LeaveError.__init__(self, "Employee record not linked to this account")


class UnauthorizedError(LeaveError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Permission denied"

    def __init__(self) -> None:
        super().__init__(self.default_detail)


class TransportError(LeaveError):
    """Network/API failure while talking to the leave ledger API"""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Leave service unreachable, please retry"

    def __init__(self, cause: Optional[str] = None) -> None:
        self.cause = cause
        super().__init__(self.default_detail)


def error_payload(exc: HTTPException, path: str) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "error": True,
        "status_code": exc.status_code,
        "detail": exc.detail,
        "path": path,
    }
    if isinstance(exc, InsufficientBalanceError):
        payload["leave_type"] = exc.leave_type
        payload["requested"] = exc.requested
        payload["remaining"] = exc.remaining
    if isinstance(exc, LeaveOverlapError):
        payload["error_type"] = "overlap"
    elif isinstance(exc, InvalidTransitionError):
        payload["error_type"] = "invalid_transition"
    elif isinstance(exc, EmployeeNotLinkedError):
        payload["error_type"] = "employee_not_linked"
    return payload


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException (and domain errors) with consistent JSON response format

    Args:
        request: FastAPI request object
        exc: HTTPException instance

    Returns:
        JSONResponse with error details
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(exc, str(request.url.path)),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError with consistent JSON response format

    Does not leak internal validation details in production.
    """
    from hrms.core.config import settings

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "error": True,
                "status_code": 422,
                "detail": "Validation error: Invalid request data",
                "path": str(request.url.path)
            }
        )

    # ctx may hold exception instances that are not JSON serializable
    errors = []
    for e in exc.errors():
        err = dict(e)
        if "ctx" in err and isinstance(err["ctx"], dict):
            err["ctx"] = {
                k: (str(v) if not isinstance(v, (str, int, float, bool, type(None))) else v)
                for k, v in err["ctx"].items()
            }
        errors.append(err)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": True,
            "status_code": 422,
            "detail": "Validation error",
            "errors": errors,
            "path": str(request.url.path)
        }
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions with consistent JSON response format

    Does not leak internal error details in production.
    """
    from hrms.core.config import settings

    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    if settings.APP_ENV == "prod":
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": True,
                "status_code": 500,
                "detail": "Internal server error",
                "path": str(request.url.path)
            }
        )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "status_code": 500,
            "detail": str(exc),
            "path": str(request.url.path),
            "traceback": traceback.format_exc() if settings.APP_ENV == "local" else None
        }
    )
