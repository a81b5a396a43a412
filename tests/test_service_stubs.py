"""Tests for the Employee service stub."""

from __future__ import annotations

import uuid

from leavedesk.config import get_settings
from leavedesk.services.employee import (
    EmployeeInfo,
    EmployeeService,
    InMemoryEmployeeService,
    get_employee_service,
    set_employee_service,
)


def _make_employee(name: str = "Jane", entitlement: int | None = None) -> EmployeeInfo:
    fields = {
        "id": uuid.uuid4(),
        "name": name,
        "email": f"{name.lower()}@example.com",
        "department": "Engineering",
    }
    if entitlement is not None:
        fields["leave_entitlement_days"] = entitlement
    return EmployeeInfo(**fields)


async def test_employee_service_get_not_found() -> None:
    svc = InMemoryEmployeeService()
    result = await svc.get_employee(uuid.uuid4())
    assert result is None


async def test_employee_service_seed_and_get() -> None:
    svc = InMemoryEmployeeService()
    emp = _make_employee(entitlement=12)
    svc.seed(emp)
    result = await svc.get_employee(emp.id)
    assert result is not None
    assert result.id == emp.id
    assert result.leave_entitlement_days == 12


async def test_employee_service_list_empty() -> None:
    svc = InMemoryEmployeeService()
    result = await svc.list_employees()
    assert result == []


async def test_employee_service_list_sorted_by_name() -> None:
    svc = InMemoryEmployeeService()
    svc.seed(_make_employee("Zoe"))
    svc.seed(_make_employee("Adam"))
    result = await svc.list_employees()
    assert [e.name for e in result] == ["Adam", "Zoe"]


async def test_employee_service_seed_overwrites() -> None:
    svc = InMemoryEmployeeService()
    emp = _make_employee("Jane", entitlement=10)
    svc.seed(emp)
    svc.seed(emp.model_copy(update={"leave_entitlement_days": 15}))
    result = await svc.get_employee(emp.id)
    assert result is not None
    assert result.leave_entitlement_days == 15
    assert len(await svc.list_employees()) == 1


def test_default_entitlement_from_settings() -> None:
    emp = _make_employee()
    assert emp.leave_entitlement_days == get_settings().default_entitlement_days


def test_in_memory_service_satisfies_protocol() -> None:
    assert isinstance(InMemoryEmployeeService(), EmployeeService)


def test_set_and_get_employee_service() -> None:
    original = get_employee_service()
    replacement = InMemoryEmployeeService()
    set_employee_service(replacement)
    try:
        assert get_employee_service() is replacement
    finally:
        set_employee_service(original)
