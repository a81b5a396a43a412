# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from leavedesk.exceptions import EmployeeNotFoundError
from leavedesk.schemas.employee import EmployeeListResponse, EmployeeResponse, UpsertEmployeeRequest
from leavedesk.services.employee import EmployeeInfo, get_employee_service

employees_router = APIRouter(prefix="/employees", tags=["employees"])


def _build_employee_response(employee: EmployeeInfo) -> EmployeeResponse:
    return EmployeeResponse(
        id=employee.id,
        name=employee.name,
        email=employee.email,
        department=employee.department,
        leave_entitlement_days=employee.leave_entitlement_days,
    )


@employees_router.put("/{employee_id}", response_model=EmployeeResponse)
async def upsert_employee(
    employee_id: uuid.UUID,
    payload: UpsertEmployeeRequest,
) -> EmployeeResponse:
    """Create or update an employee in the stub service."""
    svc = get_employee_service()
    fields = payload.model_dump(exclude_none=True)
    employee = EmployeeInfo(id=employee_id, **fields)
    svc.seed(employee)  # ty: ignore[unresolved-attribute]
    return _build_employee_response(employee)


@employees_router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: uuid.UUID) -> EmployeeResponse:
    """Get employee info from the stub service."""
    employee = await get_employee_service().get_employee(employee_id)
    if employee is None:
        raise EmployeeNotFoundError(employee_id)
    return _build_employee_response(employee)


@employees_router.get("", response_model=EmployeeListResponse)
async def list_employees() -> EmployeeListResponse:
    """List all employees from the stub service."""
    employees = await get_employee_service().list_employees()
    items = [_build_employee_response(e) for e in employees]
    return EmployeeListResponse(items=items, total=len(items))
