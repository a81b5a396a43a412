# ruff: noqa: TC001, TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from leavedesk.models.enums import LeaveStatus, LeaveType, ResolutionDecision

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


def _as_text(value: Any) -> Any:
    """Hand bare numbers over as text so the date parser rejects them."""
    if isinstance(value, bool | int | float):
        return str(value)
    return value


class SubmitLeavePayload(BaseModel):
    """Request body for submitting a new leave request.

    Every field is optional and dates stay strings here. Presence, the
    ``YYYY-MM-DD`` format and the leave type are checked by the service, which
    raises the specific 400 errors for each.
    """

    employee_id: uuid.UUID | None = None
    start_date: str | None = None
    end_date: str | None = None
    leave_type: str | None = None
    reason: str | None = Field(default=None, max_length=1000)

    @field_validator("start_date", "end_date", "leave_type", mode="before")
    @classmethod
    def keep_as_text(cls, value: Any) -> Any:
        return _as_text(value)


class ResolvePayload(BaseModel):
    """Request body for approving or rejecting a pending request."""

    decision: ResolutionDecision
    resolver_id: uuid.UUID
    comments: str | None = Field(default=None, max_length=1000)


class CancelPayload(BaseModel):
    """Request body for cancelling a request."""

    employee_id: uuid.UUID | None = None
    reason: str | None = Field(default=None, max_length=1000)


class ModifyPayload(BaseModel):
    """Partial update of a pending request. Dates and type are validated by the service."""

    employee_id: uuid.UUID | None = None
    start_date: str | None = None
    end_date: str | None = None
    leave_type: str | None = None
    reason: str | None = Field(default=None, max_length=1000)

    @field_validator("start_date", "end_date", "leave_type", mode="before")
    @classmethod
    def keep_as_text(cls, value: Any) -> Any:
        return _as_text(value)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LeaveRequestResponse(BaseModel):
    """Response schema for a single leave request."""

    id: uuid.UUID
    employee_id: uuid.UUID
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: str | None
    status: LeaveStatus
    days_requested: int
    applied_on: datetime
    modified_on: datetime | None
    approved_by: uuid.UUID | None
    resolved_on: datetime | None
    comments: str | None
    cancelled: bool


class LeaveRequestListResponse(BaseModel):
    """Paginated list of leave requests."""

    items: list[LeaveRequestResponse]
    total: int
