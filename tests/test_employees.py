"""Integration tests for the employee registry API (upsert, get, list)."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest

from leavedesk.services.employee import InMemoryEmployeeService, set_employee_service

if TYPE_CHECKING:
    from collections.abc import Iterator

    from httpx import AsyncClient

EMPLOYEE_ID = uuid.uuid4()
EMPLOYEES_URL = "/employees"


@pytest.fixture(autouse=True)
def _reset_employee_service() -> Iterator[None]:
    set_employee_service(InMemoryEmployeeService())
    yield
    set_employee_service(InMemoryEmployeeService())


def _employee_payload(
    name: str = "John Doe",
    email: str = "john@example.com",
    department: str = "Engineering",
    leave_entitlement_days: int | None = None,
) -> dict:
    payload: dict = {"name": name, "email": email, "department": department}
    if leave_entitlement_days is not None:
        payload["leave_entitlement_days"] = leave_entitlement_days
    return payload


# ---------------------------------------------------------------------------
# Upsert
# ---------------------------------------------------------------------------


async def test_upsert_creates_employee(async_client: AsyncClient) -> None:
    resp = await async_client.put(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}", json=_employee_payload(leave_entitlement_days=25))
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == str(EMPLOYEE_ID)
    assert data["name"] == "John Doe"
    assert data["leave_entitlement_days"] == 25


async def test_upsert_defaults_entitlement(async_client: AsyncClient) -> None:
    resp = await async_client.put(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}", json=_employee_payload())
    assert resp.status_code == 200
    assert resp.json()["leave_entitlement_days"] == 20


async def test_upsert_updates_existing(async_client: AsyncClient) -> None:
    await async_client.put(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}", json=_employee_payload())
    resp = await async_client.put(
        f"{EMPLOYEES_URL}/{EMPLOYEE_ID}", json=_employee_payload(department="Marketing")
    )
    assert resp.status_code == 200
    assert resp.json()["department"] == "Marketing"

    listing = await async_client.get(EMPLOYEES_URL)
    assert listing.json()["total"] == 1


async def test_upsert_invalid_email(async_client: AsyncClient) -> None:
    resp = await async_client.put(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}", json=_employee_payload(email="not-an-email"))
    assert resp.status_code == 422
    assert resp.json()["error"] == "ValidationError"


# ---------------------------------------------------------------------------
# Get / list
# ---------------------------------------------------------------------------


async def test_get_employee(async_client: AsyncClient) -> None:
    await async_client.put(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}", json=_employee_payload())
    resp = await async_client.get(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}")
    assert resp.status_code == 200
    assert resp.json()["email"] == "john@example.com"


async def test_get_employee_not_found(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"{EMPLOYEES_URL}/{uuid.uuid4()}")
    assert resp.status_code == 404
    assert resp.json()["error"] == "EmployeeNotFoundError"


async def test_list_employees_sorted(async_client: AsyncClient) -> None:
    await async_client.put(f"{EMPLOYEES_URL}/{uuid.uuid4()}", json=_employee_payload(name="Zed", email="z@example.com"))
    await async_client.put(f"{EMPLOYEES_URL}/{uuid.uuid4()}", json=_employee_payload(name="Amy", email="a@example.com"))

    resp = await async_client.get(EMPLOYEES_URL)
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert [e["name"] for e in data["items"]] == ["Amy", "Zed"]


async def test_registered_employee_has_balance(async_client: AsyncClient) -> None:
    """An employee registered over HTTP is visible to the ledger."""
    await async_client.put(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}", json=_employee_payload(leave_entitlement_days=8))
    resp = await async_client.get(f"{EMPLOYEES_URL}/{EMPLOYEE_ID}/balance")
    assert resp.status_code == 200
    assert resp.json()["remaining"] == 8
