# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from leavedesk.models.base import CreatedAtMixin, UUIDBase


class BalanceAuditEntry(UUIDBase, CreatedAtMixin, table=True):
    """Append-only record of a single change to an employee's balance."""

    __tablename__ = "balance_audit_entry"
    __table_args__ = (
        sa.Index("ix_balance_audit_employee_created", "employee_id", "created_at"),
        sa.CheckConstraint("previous_balance + delta = new_balance", name="ck_balance_audit_arithmetic"),
    )

    employee_id: uuid.UUID = Field(index=True)
    # Insertion order; breaks ties between entries written in the same instant.
    seq: int | None = Field(
        default=None,
        sa_column=sa.Column(sa.BigInteger, sa.Identity(), nullable=False, unique=True),
    )
    leave_request_id: uuid.UUID | None = Field(
        default=None,
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("leave_request.id"), nullable=True, index=True),
    )
    previous_balance: int
    delta: int
    new_balance: int
    reason: str = Field(max_length=255)
