# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from leavedesk.models.base import UUIDBase, timestamp_field
from leavedesk.models.enums import LeaveStatus, LeaveType
from leavedesk.services.business_days import count_business_days

CANCELLATION_MARKER = "Cancelled by employee"


class LeaveRequest(UUIDBase, table=True):
    """An employee's leave request and its approval workflow state.

    ``days_requested`` is derived from the date range and is only ever written
    by :meth:`schedule`, so it cannot drift from ``start_date``/``end_date``.
    """

    __tablename__ = "leave_request"
    __table_args__ = (
        sa.Index("ix_leave_request_employee_dates", "employee_id", "start_date", "end_date"),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_date_order"),
        sa.CheckConstraint("days_requested >= 0", name="ck_leave_request_days_non_negative"),
        sa.CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="ck_leave_request_status",
        ),
    )

    employee_id: uuid.UUID = Field(index=True)
    start_date: date
    end_date: date
    leave_type: str = Field(max_length=20)
    reason: str | None = None
    status: str = Field(
        default=LeaveStatus.PENDING, max_length=20, index=True, sa_column_kwargs={"server_default": "pending"}
    )
    days_requested: int = 0
    applied_on: datetime = timestamp_field()
    modified_on: datetime | None = timestamp_field(nullable=True)
    approved_by: uuid.UUID | None = None
    resolved_on: datetime | None = timestamp_field(nullable=True)
    comments: str | None = None

    @classmethod
    def for_range(
        cls,
        employee_id: uuid.UUID,
        start_date: date,
        end_date: date,
        leave_type: LeaveType,
        reason: str | None = None,
    ) -> LeaveRequest:
        """Build a pending request with ``days_requested`` derived from the range."""
        request = cls(
            employee_id=employee_id,
            start_date=start_date,
            end_date=end_date,
            leave_type=leave_type.value,
            reason=reason,
            status=LeaveStatus.PENDING.value,
        )
        request.schedule(start_date, end_date)
        return request

    def schedule(self, start_date: date, end_date: date) -> None:
        """Move the request to a new range and recompute its business-day count."""
        days = count_business_days(start_date, end_date)
        self.start_date = start_date
        self.end_date = end_date
        self.days_requested = days

    @property
    def is_cancelled(self) -> bool:
        return self.status == LeaveStatus.REJECTED and (self.comments or "").startswith(CANCELLATION_MARKER)
