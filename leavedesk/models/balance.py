# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from leavedesk.models.base import timestamp_field


class EmployeeBalance(SQLModel, table=True):
    """Remaining leave days for one employee, mutated only by the ledger."""

    __tablename__ = "employee_leave_balance"
    __table_args__ = (sa.CheckConstraint("remaining_days >= 0", name="ck_balance_non_negative"),)

    employee_id: uuid.UUID = Field(primary_key=True, sa_type=sa.Uuid)
    remaining_days: int = Field(default=0, sa_column_kwargs={"server_default": "0"})
    updated_at: datetime = timestamp_field(onupdate=True)
    version: int = Field(default=1, sa_column_kwargs={"server_default": "1"})
