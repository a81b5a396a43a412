# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from leavedesk.models.enums import LeaveStatus
from leavedesk.models.request import LeaveRequest

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

ACTIVE_STATUSES = (LeaveStatus.PENDING.value, LeaveStatus.APPROVED.value)


async def find_conflicts(
    session: AsyncSession,
    employee_id: uuid.UUID,
    start_date: date,
    end_date: date,
    exclude_id: uuid.UUID | None = None,
) -> list[LeaveRequest]:
    """Return the employee's pending or approved requests that overlap the range.

    Ranges are closed intervals, so a request ending on the candidate's start
    day conflicts. Results are ordered by start date, then application time,
    then id; the first element is the representative conflict.
    """
    query = select(LeaveRequest).where(
        col(LeaveRequest.employee_id) == employee_id,
        col(LeaveRequest.status).in_(ACTIVE_STATUSES),
        col(LeaveRequest.start_date) <= end_date,
        col(LeaveRequest.end_date) >= start_date,
    )
    if exclude_id is not None:
        query = query.where(col(LeaveRequest.id) != exclude_id)
    query = query.order_by(
        col(LeaveRequest.start_date),
        col(LeaveRequest.applied_on),
        col(LeaveRequest.id),
    )

    result = await session.execute(query)
    return list(result.scalars().all())
