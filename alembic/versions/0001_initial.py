"""Initial schema: leave requests, balances and the balance audit trail.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18 09:00:00.000000+00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "leave_request",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("leave_type", sa.String(length=20), nullable=False),
        sa.Column("reason", sa.String(), nullable=True),
        sa.Column("status", sa.String(length=20), server_default="pending", nullable=False),
        sa.Column("days_requested", sa.Integer(), nullable=False),
        sa.Column("applied_on", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("modified_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("approved_by", sa.Uuid(), nullable=True),
        sa.Column("resolved_on", sa.DateTime(timezone=True), nullable=True),
        sa.Column("comments", sa.String(), nullable=True),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_request_date_order"),
        sa.CheckConstraint("days_requested >= 0", name="ck_leave_request_days_non_negative"),
        sa.CheckConstraint("status IN ('pending', 'approved', 'rejected')", name="ck_leave_request_status"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_leave_request_employee_id", "leave_request", ["employee_id"])
    op.create_index("ix_leave_request_status", "leave_request", ["status"])
    op.create_index(
        "ix_leave_request_employee_dates",
        "leave_request",
        ["employee_id", "start_date", "end_date"],
    )

    op.create_table(
        "employee_leave_balance",
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("remaining_days", sa.Integer(), server_default="0", nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.CheckConstraint("remaining_days >= 0", name="ck_balance_non_negative"),
        sa.PrimaryKeyConstraint("employee_id"),
    )

    op.create_table(
        "balance_audit_entry",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("employee_id", sa.Uuid(), nullable=False),
        sa.Column("leave_request_id", sa.Uuid(), nullable=True),
        sa.Column("previous_balance", sa.Integer(), nullable=False),
        sa.Column("delta", sa.Integer(), nullable=False),
        sa.Column("new_balance", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(length=255), nullable=False),
        sa.Column("seq", sa.BigInteger(), sa.Identity(), nullable=False),
        sa.CheckConstraint("previous_balance + delta = new_balance", name="ck_balance_audit_arithmetic"),
        sa.ForeignKeyConstraint(["leave_request_id"], ["leave_request.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("seq"),
    )
    op.create_index("ix_balance_audit_entry_employee_id", "balance_audit_entry", ["employee_id"])
    op.create_index("ix_balance_audit_entry_leave_request_id", "balance_audit_entry", ["leave_request_id"])
    op.create_index(
        "ix_balance_audit_employee_created",
        "balance_audit_entry",
        ["employee_id", "created_at"],
    )


def downgrade() -> None:
    op.drop_index("ix_balance_audit_employee_created", table_name="balance_audit_entry")
    op.drop_index("ix_balance_audit_entry_leave_request_id", table_name="balance_audit_entry")
    op.drop_index("ix_balance_audit_entry_employee_id", table_name="balance_audit_entry")
    op.drop_table("balance_audit_entry")
    op.drop_table("employee_leave_balance")
    op.drop_index("ix_leave_request_employee_dates", table_name="leave_request")
    op.drop_index("ix_leave_request_status", table_name="leave_request")
    op.drop_index("ix_leave_request_employee_id", table_name="leave_request")
    op.drop_table("leave_request")
