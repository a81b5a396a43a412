from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import DBAPIError

if TYPE_CHECKING:
    from leavedesk.models.request import LeaveRequest

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int
    context: dict[str, Any] | None = None


class AppError(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.context = context
        super().__init__(self.message)


# ---------------------------------------------------------------------------
# Validation errors (400)
# ---------------------------------------------------------------------------


class LeaveValidationError(AppError):
    """Malformed input. Nothing was read or written."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST, context=context)


class MissingFieldError(LeaveValidationError):
    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}", context={"fields": fields})


class InvalidRangeError(LeaveValidationError):
    """A date range that cannot be counted."""


class InvalidDateError(InvalidRangeError):
    def __init__(self, value: object, message: str | None = None) -> None:
        self.value = value
        super().__init__(
            message or f"Invalid date {value!r}, expected YYYY-MM-DD",
            context={"value": str(value)},
        )


class PastDateError(InvalidDateError):
    def __init__(self, value: object) -> None:
        super().__init__(value, f"Leave cannot start in the past ({value})")


class DateOrderError(InvalidRangeError):
    def __init__(self, start: object, end: object) -> None:
        self.start = start
        self.end = end
        super().__init__(
            f"Start date {start} is after end date {end}",
            context={"start_date": str(start), "end_date": str(end)},
        )


class NoBusinessDaysError(LeaveValidationError):
    def __init__(self, start: object, end: object) -> None:
        super().__init__(
            f"Range {start} to {end} contains no working days",
            context={"start_date": str(start), "end_date": str(end)},
        )


class InvalidLeaveTypeError(LeaveValidationError):
    def __init__(self, value: object, allowed: list[str]) -> None:
        super().__init__(f"Unknown leave type {value!r}", context={"allowed": allowed})


class NoChangesError(LeaveValidationError):
    def __init__(self) -> None:
        super().__init__("No changes detected; provide start_date, end_date, leave_type or reason")


# ---------------------------------------------------------------------------
# Not found (404) and ownership (403)
# ---------------------------------------------------------------------------


class NotFoundError(AppError):
    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND, context=context)


class EmployeeNotFoundError(NotFoundError):
    def __init__(self, employee_id: uuid.UUID) -> None:
        self.employee_id = employee_id
        super().__init__("Employee not found", context={"employee_id": str(employee_id)})


class RequestNotFoundError(NotFoundError):
    def __init__(self, request_id: uuid.UUID) -> None:
        self.request_id = request_id
        super().__init__("Leave request not found", context={"request_id": str(request_id)})


class ResolverNotFoundError(NotFoundError):
    def __init__(self, resolver_id: uuid.UUID) -> None:
        self.resolver_id = resolver_id
        super().__init__("Resolver not found", context={"resolver_id": str(resolver_id)})


class OwnershipMismatchError(AppError):
    def __init__(self, request_id: uuid.UUID, employee_id: uuid.UUID) -> None:
        super().__init__(
            "Leave request belongs to another employee",
            status_code=status.HTTP_403_FORBIDDEN,
            context={"request_id": str(request_id), "employee_id": str(employee_id)},
        )


# ---------------------------------------------------------------------------
# Business-rule conflicts (409)
# ---------------------------------------------------------------------------


class ConflictError(AppError):
    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT, context=context)


class InsufficientBalanceError(ConflictError):
    """Requested days exceed what the balance can cover.

    ``released`` counts days a pending edit gives back on top of ``current``.
    """

    def __init__(self, current: int, requested: int, released: int = 0) -> None:
        self.current = current
        self.requested = requested
        self.released = released
        self.resulting = current + released - requested
        context: dict[str, Any] = {"current_balance": current, "requested_days": requested}
        if released:
            context["released_days"] = released
        context["resulting_balance"] = self.resulting
        super().__init__(
            f"Insufficient leave balance: requested {requested} days, {current + released} available",
            context=context,
        )


class OverlapConflictError(ConflictError):
    def __init__(self, conflict: LeaveRequest) -> None:
        self.conflict = conflict
        super().__init__(
            "Leave request conflicts with an existing pending or approved request",
            context={
                "conflicting_request": {
                    "id": str(conflict.id),
                    "start_date": conflict.start_date.isoformat(),
                    "end_date": conflict.end_date.isoformat(),
                    "status": str(conflict.status),
                },
            },
        )


class InvalidTransitionError(ConflictError):
    def __init__(self, current_status: str, action: str) -> None:
        self.current_status = current_status
        self.action = action
        super().__init__(
            f"Cannot {action} a leave request in status {current_status}",
            context={"current_status": current_status, "action": action},
        )


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
            context=exc.context,
        ).model_dump(),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


async def _persistence_exception_handler(request: Request, exc: DBAPIError) -> JSONResponse:
    logger.exception("Persistence failure on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ErrorResponse(
            error="PersistenceError",
            detail="The operation could not be completed and nothing was saved; retry it",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(DBAPIError, _persistence_exception_handler)  # type: ignore[arg-type]
