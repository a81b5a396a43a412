# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from leavedesk.db import SessionDep
from leavedesk.models.enums import LeaveStatus
from leavedesk.schemas.request import (
    CancelPayload,
    LeaveRequestListResponse,
    LeaveRequestResponse,
    ModifyPayload,
    ResolvePayload,
    SubmitLeavePayload,
)
from leavedesk.services import leave_request as leave_service

leaves_router = APIRouter(prefix="/leaves", tags=["leaves"])


@leaves_router.post("", response_model=LeaveRequestResponse, status_code=status.HTTP_201_CREATED)
async def submit_leave_request(
    payload: SubmitLeavePayload,
    session: SessionDep,
) -> LeaveRequestResponse:
    """Submit a new leave request."""
    return await leave_service.submit_leave_request(
        session,
        employee_id=payload.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        leave_type=payload.leave_type,
        reason=payload.reason,
    )


@leaves_router.get("", response_model=LeaveRequestListResponse)
async def list_leave_requests(
    session: SessionDep,
    employee_id: uuid.UUID | None = Query(default=None),
    status_filter: LeaveStatus | None = Query(default=None, alias="status"),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> LeaveRequestListResponse:
    """List leave requests; ``status=pending`` gives the approval queue."""
    return await leave_service.list_leave_requests(session, employee_id, status_filter, offset, limit)


@leaves_router.get("/{request_id}", response_model=LeaveRequestResponse)
async def get_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
) -> LeaveRequestResponse:
    """Get a single leave request."""
    return await leave_service.get_leave_request(session, request_id)


@leaves_router.post("/{request_id}/resolve", response_model=LeaveRequestResponse)
async def resolve_leave_request(
    request_id: uuid.UUID,
    payload: ResolvePayload,
    session: SessionDep,
) -> LeaveRequestResponse:
    """Approve or reject a pending leave request."""
    return await leave_service.resolve_leave_request(
        session, request_id, payload.decision, payload.resolver_id, payload.comments
    )


@leaves_router.post("/{request_id}/cancel", response_model=LeaveRequestResponse)
async def cancel_leave_request(
    request_id: uuid.UUID,
    session: SessionDep,
    payload: CancelPayload | None = None,
) -> LeaveRequestResponse:
    """Cancel a pending or approved leave request."""
    payload = payload or CancelPayload()
    return await leave_service.cancel_leave_request(session, request_id, payload.employee_id, payload.reason)


@leaves_router.patch("/{request_id}", response_model=LeaveRequestResponse)
async def modify_leave_request(
    request_id: uuid.UUID,
    payload: ModifyPayload,
    session: SessionDep,
) -> LeaveRequestResponse:
    """Change the dates, type or reason of a pending leave request."""
    return await leave_service.modify_leave_request(
        session,
        request_id,
        payload.employee_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        leave_type=payload.leave_type,
        reason=payload.reason,
    )
