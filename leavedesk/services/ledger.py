# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import case, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlmodel import col

from leavedesk.exceptions import EmployeeNotFoundError, InsufficientBalanceError
from leavedesk.models.balance import EmployeeBalance
from leavedesk.models.enums import BalanceChangeReason, LeaveStatus
from leavedesk.models.ledger import BalanceAuditEntry
from leavedesk.models.request import LeaveRequest
from leavedesk.schemas.balance import (
    AuditEntryListResponse,
    AuditEntryResponse,
    BalanceResponse,
    ReconciliationResponse,
)
from leavedesk.services.employee import get_employee_service

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from leavedesk.schemas.balance import CreateAdjustmentRequest

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_audit_entry_response(entry: BalanceAuditEntry) -> AuditEntryResponse:
    """Map an audit entry model to its response schema."""
    return AuditEntryResponse(
        id=entry.id,
        employee_id=entry.employee_id,
        leave_request_id=entry.leave_request_id,
        previous_balance=entry.previous_balance,
        delta=entry.delta,
        new_balance=entry.new_balance,
        reason=entry.reason,
        created_at=entry.created_at,
    )


async def _require_employee(employee_id: uuid.UUID) -> int:
    """Return the employee's yearly entitlement. Raises 404 if unknown."""
    employee = await get_employee_service().get_employee(employee_id)
    if employee is None:
        raise EmployeeNotFoundError(employee_id)
    return employee.leave_entitlement_days


async def _select_balance_for_update(session: AsyncSession, employee_id: uuid.UUID) -> EmployeeBalance | None:
    result = await session.execute(
        select(EmployeeBalance)
        .where(col(EmployeeBalance.employee_id) == employee_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _open_balance(session: AsyncSession, employee_id: uuid.UUID) -> None:
    """Create the balance row from the employee's entitlement if nobody has yet.

    Concurrent openers race on the primary key; only the one whose insert
    lands writes the opening audit entry.
    """
    entitlement = await _require_employee(employee_id)
    result = await session.execute(
        pg_insert(EmployeeBalance)
        .values(employee_id=employee_id, remaining_days=entitlement, version=1)
        .on_conflict_do_nothing(index_elements=["employee_id"])
        .returning(col(EmployeeBalance.employee_id))
    )
    if result.scalar_one_or_none() is None:
        return

    session.add(
        BalanceAuditEntry(
            employee_id=employee_id,
            previous_balance=0,
            delta=entitlement,
            new_balance=entitlement,
            reason=BalanceChangeReason.OPENING_BALANCE.value,
        )
    )
    logger.info("Opened leave balance for employee %s with %d days", employee_id, entitlement)


async def lock_balance(session: AsyncSession, employee_id: uuid.UUID) -> EmployeeBalance:
    """Return the employee's balance row holding an exclusive lock until commit.

    Opens the balance on first use. Every mutation of ``remaining_days`` must
    go through a row obtained here.
    """
    balance = await _select_balance_for_update(session, employee_id)
    if balance is None:
        await _open_balance(session, employee_id)
        balance = await _select_balance_for_update(session, employee_id)
    if balance is None:
        raise EmployeeNotFoundError(employee_id)
    return balance


async def _apply_change(
    session: AsyncSession,
    balance: EmployeeBalance,
    delta: int,
    request_id: uuid.UUID | None,
    reason: str,
) -> BalanceAuditEntry:
    """Move a locked balance by ``delta`` and append the matching audit entry."""
    previous = balance.remaining_days
    entry = BalanceAuditEntry(
        employee_id=balance.employee_id,
        leave_request_id=request_id,
        previous_balance=previous,
        delta=delta,
        new_balance=previous + delta,
        reason=reason,
    )
    session.add(entry)

    balance.remaining_days = previous + delta
    balance.version += 1

    await session.flush()
    return entry


def _require_positive(days: int) -> None:
    if days <= 0:
        msg = f"days must be positive, got {days}"
        raise ValueError(msg)


# ---------------------------------------------------------------------------
# Debit / credit
# ---------------------------------------------------------------------------


async def debit(
    session: AsyncSession,
    employee_id: uuid.UUID,
    days: int,
    request_id: uuid.UUID | None,
) -> int:
    """Consume ``days`` from the employee's balance and return the new balance.

    Runs inside the caller's transaction and does not commit. The row lock is
    held until the caller commits or rolls back.
    """
    _require_positive(days)
    balance = await lock_balance(session, employee_id)

    current = balance.remaining_days
    if current - days < 0:
        raise InsufficientBalanceError(current=current, requested=days)

    entry = await _apply_change(session, balance, -days, request_id, BalanceChangeReason.LEAVE_APPROVED.value)
    logger.info("Debited %d days from employee %s: %d -> %d", days, employee_id, current, entry.new_balance)
    return entry.new_balance


async def credit(
    session: AsyncSession,
    employee_id: uuid.UUID,
    days: int,
    request_id: uuid.UUID | None,
    reason: str,
) -> int:
    """Return ``days`` to the employee's balance and return the new balance.

    No upper bound is enforced. Does not commit.
    """
    _require_positive(days)
    balance = await lock_balance(session, employee_id)

    current = balance.remaining_days
    entry = await _apply_change(session, balance, days, request_id, reason)
    logger.info("Credited %d days to employee %s: %d -> %d (%s)", days, employee_id, current, entry.new_balance, reason)
    return entry.new_balance


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------


async def _sum_days_by_status(session: AsyncSession, employee_id: uuid.UUID) -> tuple[int, int]:
    """Return (approved_days, pending_days) for the employee."""
    result = await session.execute(
        select(
            func.coalesce(
                func.sum(
                    case(
                        (col(LeaveRequest.status) == LeaveStatus.APPROVED.value, col(LeaveRequest.days_requested)),
                        else_=0,
                    )
                ),
                0,
            ).label("taken"),
            func.coalesce(
                func.sum(
                    case(
                        (col(LeaveRequest.status) == LeaveStatus.PENDING.value, col(LeaveRequest.days_requested)),
                        else_=0,
                    )
                ),
                0,
            ).label("pending"),
        ).where(col(LeaveRequest.employee_id) == employee_id)
    )
    row = result.one()
    return int(row.taken), int(row.pending)


async def get_balance(session: AsyncSession, employee_id: uuid.UUID) -> BalanceResponse:
    """Return total, taken, pending and remaining days for an employee.

    ``total`` is everything ever granted, i.e. remaining plus taken.
    """
    entitlement = await _require_employee(employee_id)

    result = await session.execute(
        select(EmployeeBalance)
        .where(col(EmployeeBalance.employee_id) == employee_id)
        .execution_options(populate_existing=True)
    )
    balance = result.scalar_one_or_none()

    if balance is not None:
        remaining = balance.remaining_days
        updated_at = balance.updated_at
    else:
        remaining = entitlement
        updated_at = None

    taken, pending = await _sum_days_by_status(session, employee_id)
    return BalanceResponse(
        employee_id=employee_id,
        total=remaining + taken,
        taken=taken,
        pending=pending,
        remaining=remaining,
        updated_at=updated_at,
    )


async def list_audit_entries(
    session: AsyncSession,
    employee_id: uuid.UUID,
    offset: int = 0,
    limit: int = 50,
) -> AuditEntryListResponse:
    """Get paginated audit entries for an employee, newest first."""
    await _require_employee(employee_id)
    base_filter = col(BalanceAuditEntry.employee_id) == employee_id

    count_result = await session.execute(select(func.count()).select_from(BalanceAuditEntry).where(base_filter))
    total = count_result.scalar_one()

    entries_result = await session.execute(
        select(BalanceAuditEntry)
        .where(base_filter)
        .order_by(col(BalanceAuditEntry.created_at).desc(), col(BalanceAuditEntry.seq).desc())
        .offset(offset)
        .limit(limit)
    )
    entries = list(entries_result.scalars().all())

    return AuditEntryListResponse(
        items=[_build_audit_entry_response(e) for e in entries],
        total=total,
    )


# ---------------------------------------------------------------------------
# Write path: admin adjustments
# ---------------------------------------------------------------------------


async def adjust_balance(
    session: AsyncSession,
    employee_id: uuid.UUID,
    payload: CreateAdjustmentRequest,
) -> AuditEntryResponse:
    """Apply an administrative correction to an employee's balance.

    Deductions follow the same negative-balance rule as approvals.
    """
    balance = await lock_balance(session, employee_id)

    current = balance.remaining_days
    if current + payload.delta_days < 0:
        raise InsufficientBalanceError(current=current, requested=-payload.delta_days)

    entry = await _apply_change(
        session,
        balance,
        payload.delta_days,
        None,
        f"{BalanceChangeReason.ADJUSTMENT.value}: {payload.reason}",
    )
    await session.commit()
    await session.refresh(entry)

    logger.info("Adjusted balance of employee %s by %+d days: %s", employee_id, payload.delta_days, payload.reason)
    return _build_audit_entry_response(entry)


# ---------------------------------------------------------------------------
# Reconciliation
# ---------------------------------------------------------------------------


async def reconcile_balance(session: AsyncSession, employee_id: uuid.UUID) -> ReconciliationResponse:
    """Compare the cached balance against the sum of its audit trail.

    An employee the ledger has never touched has no trail and is reported as
    consistent.
    """
    result = await session.execute(
        select(EmployeeBalance)
        .where(col(EmployeeBalance.employee_id) == employee_id)
        .execution_options(populate_existing=True)
    )
    balance = result.scalar_one_or_none()
    if balance is None:
        await _require_employee(employee_id)

    totals = await session.execute(
        select(
            func.coalesce(func.sum(col(BalanceAuditEntry.delta)), 0),
            func.count(),
        ).where(col(BalanceAuditEntry.employee_id) == employee_id)
    )
    audit_balance, entry_count = totals.one()

    last_result = await session.execute(
        select(col(BalanceAuditEntry.new_balance))
        .where(col(BalanceAuditEntry.employee_id) == employee_id)
        .order_by(col(BalanceAuditEntry.created_at).desc(), col(BalanceAuditEntry.seq).desc())
        .limit(1)
    )
    last_recorded = last_result.scalar_one_or_none()

    cached = balance.remaining_days if balance is not None else int(audit_balance)
    consistent = cached == int(audit_balance) and (last_recorded is None or last_recorded == cached)

    return ReconciliationResponse(
        employee_id=employee_id,
        cached_balance=cached,
        audit_balance=int(audit_balance),
        last_recorded_balance=last_recorded,
        entry_count=int(entry_count),
        consistent=consistent,
    )


async def reconcile_all(session: AsyncSession) -> list[ReconciliationResponse]:
    """Reconcile every opened balance and return the inconsistent ones."""
    result = await session.execute(select(col(EmployeeBalance.employee_id)).order_by(col(EmployeeBalance.employee_id)))
    employee_ids = list(result.scalars().all())

    mismatches: list[ReconciliationResponse] = []
    for employee_id in employee_ids:
        report = await reconcile_balance(session, employee_id)
        if not report.consistent:
            logger.warning(
                "Balance mismatch for employee %s: cached=%d audit=%d last=%s",
                employee_id,
                report.cached_balance,
                report.audit_balance,
                report.last_recorded_balance,
            )
            mismatches.append(report)
    return mismatches
