# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

# ---------------------------------------------------------------------------
# Balance response schemas
# ---------------------------------------------------------------------------


class BalanceResponse(BaseModel):
    """Leave balance summary for one employee, in days."""

    employee_id: uuid.UUID
    total: int
    taken: int
    pending: int
    remaining: int
    updated_at: datetime | None


# ---------------------------------------------------------------------------
# Audit trail schemas
# ---------------------------------------------------------------------------


class AuditEntryResponse(BaseModel):
    """A single balance audit entry."""

    id: uuid.UUID
    employee_id: uuid.UUID
    leave_request_id: uuid.UUID | None
    previous_balance: int
    delta: int
    new_balance: int
    reason: str
    created_at: datetime


class AuditEntryListResponse(BaseModel):
    """Paginated balance audit entries."""

    items: list[AuditEntryResponse]
    total: int


class ReconciliationResponse(BaseModel):
    """Comparison of the cached balance against the audit trail."""

    employee_id: uuid.UUID
    cached_balance: int
    audit_balance: int
    last_recorded_balance: int | None
    entry_count: int
    consistent: bool


# ---------------------------------------------------------------------------
# Adjustment request schema
# ---------------------------------------------------------------------------


class CreateAdjustmentRequest(BaseModel):
    """Request body for an administrative balance correction."""

    delta_days: int = Field(description="Signed integer: positive to add, negative to deduct")
    reason: str = Field(min_length=1, max_length=200)

    @field_validator("delta_days")
    @classmethod
    def _non_zero(cls, value: int) -> int:
        if value == 0:
            msg = "delta_days must not be zero"
            raise ValueError(msg)
        return value
