# ruff: noqa: TC003
from __future__ import annotations

import logging
import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlmodel import col

from leavedesk.exceptions import (
    EmployeeNotFoundError,
    InsufficientBalanceError,
    InvalidLeaveTypeError,
    InvalidTransitionError,
    LeaveValidationError,
    MissingFieldError,
    NoBusinessDaysError,
    NoChangesError,
    OverlapConflictError,
    OwnershipMismatchError,
    PastDateError,
    RequestNotFoundError,
    ResolverNotFoundError,
)
from leavedesk.models.enums import BalanceChangeReason, LeaveAction, LeaveStatus, LeaveType, ResolutionDecision
from leavedesk.models.request import CANCELLATION_MARKER, LeaveRequest
from leavedesk.schemas.request import LeaveRequestListResponse, LeaveRequestResponse
from leavedesk.services import ledger
from leavedesk.services.business_days import count_business_days, parse_date
from leavedesk.services.employee import get_employee_service
from leavedesk.services.overlap import find_conflicts

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

# Allowed source statuses and resulting status for every action. Submission
# is the only way into PENDING and is not listed.
TRANSITIONS: dict[LeaveAction, tuple[frozenset[LeaveStatus], LeaveStatus]] = {
    LeaveAction.APPROVE: (frozenset({LeaveStatus.PENDING}), LeaveStatus.APPROVED),
    LeaveAction.REJECT: (frozenset({LeaveStatus.PENDING}), LeaveStatus.REJECTED),
    LeaveAction.CANCEL: (frozenset({LeaveStatus.PENDING, LeaveStatus.APPROVED}), LeaveStatus.REJECTED),
    LeaveAction.MODIFY: (frozenset({LeaveStatus.PENDING}), LeaveStatus.PENDING),
}


def next_status(current: str, action: LeaveAction) -> LeaveStatus:
    """Return the status ``action`` leads to from ``current``.

    Raises InvalidTransitionError when ``current`` is not an allowed source.
    """
    sources, target = TRANSITIONS[action]
    if LeaveStatus(current) not in sources:
        raise InvalidTransitionError(current_status=str(current), action=action.value)
    return target


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_request_response(request: LeaveRequest) -> LeaveRequestResponse:
    """Map a leave request model to its response schema."""
    return LeaveRequestResponse(
        id=request.id,
        employee_id=request.employee_id,
        start_date=request.start_date,
        end_date=request.end_date,
        leave_type=LeaveType(request.leave_type),
        reason=request.reason,
        status=LeaveStatus(request.status),
        days_requested=request.days_requested,
        applied_on=request.applied_on,
        modified_on=request.modified_on,
        approved_by=request.approved_by,
        resolved_on=request.resolved_on,
        comments=request.comments,
        cancelled=request.is_cancelled,
    )


async def _get_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch a request by ID. Raises 404 if not found."""
    result = await session.execute(select(LeaveRequest).where(col(LeaveRequest.id) == request_id))
    request = result.scalar_one_or_none()
    if request is None:
        raise RequestNotFoundError(request_id)
    return request


async def _lock_request_or_404(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequest:
    """Fetch a request with a FOR UPDATE lock so its status guard and write are atomic."""
    result = await session.execute(
        select(LeaveRequest)
        .where(col(LeaveRequest.id) == request_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    request = result.scalar_one_or_none()
    if request is None:
        raise RequestNotFoundError(request_id)
    return request


def _coerce_leave_type(value: LeaveType | str) -> LeaveType:
    try:
        return LeaveType(value)
    except ValueError:
        raise InvalidLeaveTypeError(value, [t.value for t in LeaveType]) from None


def _validated_range(start: date | str, end: date | str, today: date) -> tuple[date, date, int]:
    """Parse and check a requested range, returning it with its business-day count."""
    start_date = parse_date(start)
    end_date = parse_date(end)
    days = count_business_days(start_date, end_date)
    if start_date < today:
        raise PastDateError(start_date)
    if days == 0:
        raise NoBusinessDaysError(start_date, end_date)
    return start_date, end_date, days


def _check_ownership(request: LeaveRequest, requesting_employee_id: uuid.UUID | None) -> None:
    if requesting_employee_id is not None and requesting_employee_id != request.employee_id:
        raise OwnershipMismatchError(request.id, requesting_employee_id)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def submit_leave_request(
    session: AsyncSession,
    *,
    employee_id: uuid.UUID | None,
    start_date: date | str | None,
    end_date: date | str | None,
    leave_type: LeaveType | str | None,
    reason: str | None = None,
    today: date | None = None,
) -> LeaveRequestResponse:
    """Submit a leave request in PENDING status. The balance is not debited.

    Flow:
    1. Validate required fields, dates and leave type
    2. Compute business days (weekends excluded)
    3. Verify the employee exists
    4. Lock the employee's balance row, serializing submissions per employee
    5. Check requested days against the remaining balance
    6. Check for overlapping pending or approved requests
    7. Persist and commit
    """
    missing = [
        name
        for name, value in (
            ("employee_id", employee_id),
            ("start_date", start_date),
            ("end_date", end_date),
            ("leave_type", leave_type),
        )
        if value is None or value == ""
    ]
    if missing:
        raise MissingFieldError(missing)

    # 1-2. Validate input.
    start, end, days = _validated_range(start_date, end_date, today or date.today())
    kind = _coerce_leave_type(leave_type)

    # 3. Employee must exist.
    if await get_employee_service().get_employee(employee_id) is None:
        raise EmployeeNotFoundError(employee_id)

    # 4-5. Balance headroom, read under the employee lock but not debited.
    balance = await ledger.lock_balance(session, employee_id)
    if days > balance.remaining_days:
        raise InsufficientBalanceError(current=balance.remaining_days, requested=days)

    # 6. Overlap.
    conflicts = await find_conflicts(session, employee_id, start, end)
    if conflicts:
        raise OverlapConflictError(conflicts[0])

    # 7. Persist.
    leave_request = LeaveRequest.for_range(employee_id, start, end, kind, reason)
    session.add(leave_request)
    await session.flush()
    await session.commit()
    await session.refresh(leave_request)

    logger.info(
        "Leave request %s submitted for employee %s: %s to %s (%d days)",
        leave_request.id,
        employee_id,
        start,
        end,
        leave_request.days_requested,
    )
    return _build_request_response(leave_request)


async def resolve_leave_request(
    session: AsyncSession,
    request_id: uuid.UUID,
    decision: ResolutionDecision | str,
    resolver_id: uuid.UUID,
    comments: str | None = None,
) -> LeaveRequestResponse:
    """Approve or reject a pending request.

    Approval debits the balance in the same transaction that flips the status,
    with the request row locked first and the balance row second.
    """
    try:
        outcome = ResolutionDecision(decision)
    except ValueError:
        raise LeaveValidationError(
            f"Unknown decision {decision!r}",
            context={"allowed": [d.value for d in ResolutionDecision]},
        ) from None
    action = LeaveAction.APPROVE if outcome is ResolutionDecision.APPROVED else LeaveAction.REJECT

    leave_request = await _lock_request_or_404(session, request_id)
    new_status = next_status(leave_request.status, action)

    resolver = await get_employee_service().get_employee(resolver_id)
    if resolver is None:
        raise ResolverNotFoundError(resolver_id)

    if action is LeaveAction.APPROVE and leave_request.days_requested > 0:
        await ledger.debit(session, leave_request.employee_id, leave_request.days_requested, leave_request.id)

    leave_request.status = new_status.value
    leave_request.approved_by = resolver_id
    leave_request.resolved_on = datetime.now(UTC)
    leave_request.comments = comments

    await session.flush()
    await session.commit()
    await session.refresh(leave_request)

    logger.info("Leave request %s %s by %s", leave_request.id, new_status.value, resolver_id)
    return _build_request_response(leave_request)


async def cancel_leave_request(
    session: AsyncSession,
    request_id: uuid.UUID,
    requesting_employee_id: uuid.UUID | None = None,
    reason: str | None = None,
) -> LeaveRequestResponse:
    """Cancel a pending or approved request.

    The request moves to REJECTED with a cancellation note. Days consumed by an
    approved request are credited back in the same transaction.
    """
    leave_request = await _lock_request_or_404(session, request_id)
    _check_ownership(leave_request, requesting_employee_id)

    previous_status = LeaveStatus(leave_request.status)
    new_status = next_status(leave_request.status, LeaveAction.CANCEL)

    if previous_status is LeaveStatus.APPROVED and leave_request.days_requested > 0:
        await ledger.credit(
            session,
            leave_request.employee_id,
            leave_request.days_requested,
            leave_request.id,
            BalanceChangeReason.LEAVE_CANCELLED.value,
        )

    leave_request.status = new_status.value
    leave_request.approved_by = leave_request.employee_id
    leave_request.resolved_on = datetime.now(UTC)
    leave_request.comments = f"{CANCELLATION_MARKER}: {reason}" if reason else CANCELLATION_MARKER

    await session.flush()
    await session.commit()
    await session.refresh(leave_request)

    logger.info("Leave request %s cancelled (was %s)", leave_request.id, previous_status.value)
    return _build_request_response(leave_request)


async def modify_leave_request(
    session: AsyncSession,
    request_id: uuid.UUID,
    requesting_employee_id: uuid.UUID | None = None,
    *,
    start_date: date | str | None = None,
    end_date: date | str | None = None,
    leave_type: LeaveType | str | None = None,
    reason: str | None = None,
    today: date | None = None,
) -> LeaveRequestResponse:
    """Edit a pending request in place.

    Values equal to the current ones are not changes. When the dates move,
    the business-day count is recomputed, overlaps are checked against every
    other active request, and the new length must fit within the remaining
    balance plus the days this request already asked for.
    """
    leave_request = await _lock_request_or_404(session, request_id)
    next_status(leave_request.status, LeaveAction.MODIFY)
    _check_ownership(leave_request, requesting_employee_id)

    new_start = parse_date(start_date) if start_date is not None else leave_request.start_date
    new_end = parse_date(end_date) if end_date is not None else leave_request.end_date
    dates_changed = new_start != leave_request.start_date or new_end != leave_request.end_date

    new_type = _coerce_leave_type(leave_type) if leave_type is not None else None
    type_changed = new_type is not None and new_type.value != leave_request.leave_type
    reason_changed = reason is not None and reason != "" and reason != leave_request.reason

    if not (dates_changed or type_changed or reason_changed):
        raise NoChangesError

    if dates_changed:
        new_start, new_end, new_days = _validated_range(new_start, new_end, today or date.today())

        balance = await ledger.lock_balance(session, leave_request.employee_id)
        conflicts = await find_conflicts(
            session, leave_request.employee_id, new_start, new_end, exclude_id=leave_request.id
        )
        if conflicts:
            raise OverlapConflictError(conflicts[0])

        # A pending request was never debited, so its old days are headroom.
        headroom = balance.remaining_days + leave_request.days_requested
        if new_days > headroom:
            raise InsufficientBalanceError(
                current=balance.remaining_days, requested=new_days, released=leave_request.days_requested
            )

        leave_request.schedule(new_start, new_end)

    if type_changed and new_type is not None:
        leave_request.leave_type = new_type.value
    if reason_changed:
        leave_request.reason = reason
    leave_request.modified_on = datetime.now(UTC)

    await session.flush()
    await session.commit()
    await session.refresh(leave_request)

    logger.info(
        "Leave request %s modified: %s to %s (%d days)",
        leave_request.id,
        leave_request.start_date,
        leave_request.end_date,
        leave_request.days_requested,
    )
    return _build_request_response(leave_request)


async def get_leave_request(session: AsyncSession, request_id: uuid.UUID) -> LeaveRequestResponse:
    """Get a single request by ID."""
    leave_request = await _get_request_or_404(session, request_id)
    return _build_request_response(leave_request)


async def list_leave_requests(
    session: AsyncSession,
    employee_id: uuid.UUID | None = None,
    status_filter: LeaveStatus | None = None,
    offset: int = 0,
    limit: int = 50,
) -> LeaveRequestListResponse:
    """List requests with optional filters, newest application first."""
    base_filters = []
    if employee_id is not None:
        base_filters.append(col(LeaveRequest.employee_id) == employee_id)
    if status_filter is not None:
        base_filters.append(col(LeaveRequest.status) == status_filter.value)

    count_result = await session.execute(select(func.count()).select_from(LeaveRequest).where(*base_filters))
    total = count_result.scalar_one()

    result = await session.execute(
        select(LeaveRequest)
        .where(*base_filters)
        .order_by(col(LeaveRequest.applied_on).desc())
        .offset(offset)
        .limit(limit)
    )
    requests = list(result.scalars().all())

    return LeaveRequestListResponse(
        items=[_build_request_response(r) for r in requests],
        total=total,
    )
