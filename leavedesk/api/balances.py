# ruff: noqa: B008, TC001, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from leavedesk.db import SessionDep
from leavedesk.schemas.balance import (
    AuditEntryListResponse,
    AuditEntryResponse,
    BalanceResponse,
    CreateAdjustmentRequest,
    ReconciliationResponse,
)
from leavedesk.services import ledger as ledger_service

balance_router = APIRouter(
    prefix="/employees/{employee_id}/balance",
    tags=["balances"],
)


@balance_router.get("", response_model=BalanceResponse)
async def get_balance(
    employee_id: uuid.UUID,
    session: SessionDep,
) -> BalanceResponse:
    """Get total, taken, pending and remaining leave days for an employee."""
    return await ledger_service.get_balance(session, employee_id)


@balance_router.get("/audit", response_model=AuditEntryListResponse)
async def list_audit_entries(
    employee_id: uuid.UUID,
    session: SessionDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
) -> AuditEntryListResponse:
    """Get the paginated balance audit trail for an employee."""
    return await ledger_service.list_audit_entries(session, employee_id, offset, limit)


@balance_router.get("/reconciliation", response_model=ReconciliationResponse)
async def reconcile_balance(
    employee_id: uuid.UUID,
    session: SessionDep,
) -> ReconciliationResponse:
    """Compare the cached balance with its audit trail."""
    return await ledger_service.reconcile_balance(session, employee_id)


@balance_router.post("/adjustments", response_model=AuditEntryResponse, status_code=status.HTTP_201_CREATED)
async def create_adjustment(
    employee_id: uuid.UUID,
    payload: CreateAdjustmentRequest,
    session: SessionDep,
) -> AuditEntryResponse:
    """Create an administrative balance adjustment."""
    return await ledger_service.adjust_balance(session, employee_id, payload)
