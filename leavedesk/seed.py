"""Seed script for development data.

Run with:  python -m leavedesk.seed
"""

from __future__ import annotations

import asyncio
import sys
from datetime import date, timedelta

import httpx

BASE_URL = "http://localhost:8000"

# Well-known employee UUIDs
MANAGER_ID = "00000000-0000-0000-0000-000000000001"
ALICE_ID = "00000000-0000-0000-0000-000000000002"
BOB_ID = "00000000-0000-0000-0000-000000000003"
CAROL_ID = "00000000-0000-0000-0000-000000000004"

EMPLOYEES = [
    {
        "id": MANAGER_ID,
        "name": "Morgan Lee",
        "email": "morgan.lee@example.com",
        "department": "Engineering",
        "leave_entitlement_days": 25,
    },
    {
        "id": ALICE_ID,
        "name": "Alice Johnson",
        "email": "alice.johnson@example.com",
        "department": "Engineering",
        "leave_entitlement_days": 20,
    },
    {
        "id": BOB_ID,
        "name": "Bob Smith",
        "email": "bob.smith@example.com",
        "department": "Marketing",
        "leave_entitlement_days": 18,
    },
    {
        "id": CAROL_ID,
        "name": "Carol Williams",
        "email": "carol.williams@example.com",
        "department": "Human Resources",
        "leave_entitlement_days": 5,
    },
]


def _next_monday(weeks_ahead: int = 1) -> date:
    today = date.today()
    return today + timedelta(days=(7 - today.weekday()) + 7 * (weeks_ahead - 1))


async def _safe_post(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    """POST with 409-conflict tolerance so the script can be rerun."""
    resp = await client.post(url, json=json)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    if resp.status_code == 409:
        print(f"  [SKIP] {label} ({resp.json().get('detail')})")
        return None
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def _safe_put(client: httpx.AsyncClient, url: str, json: dict, label: str) -> dict | None:
    """PUT (upsert), naturally idempotent."""
    resp = await client.put(url, json=json)
    if resp.status_code in (200, 201):
        print(f"  [OK] {label}")
        return resp.json()
    print(f"  [ERROR] {label}: {resp.status_code} {resp.text[:200]}")
    return None


async def seed_employees(client: httpx.AsyncClient) -> None:
    """Seed employees via PUT (upsert)."""
    print("\n--- Seeding employees ---")
    for emp in EMPLOYEES:
        body = {k: v for k, v in emp.items() if k != "id"}
        await _safe_put(client, f"{BASE_URL}/employees/{emp['id']}", body, str(emp["name"]))


async def seed_requests(client: httpx.AsyncClient) -> None:
    """Seed leave requests covering pending, approved and cancelled states."""
    print("\n--- Seeding leave requests ---")
    monday = _next_monday(weeks_ahead=2)

    # Alice: full week of annual leave, stays pending.
    await _safe_post(
        client,
        f"{BASE_URL}/leaves",
        {
            "employee_id": ALICE_ID,
            "start_date": monday.isoformat(),
            "end_date": (monday + timedelta(days=4)).isoformat(),
            "leave_type": "annual",
            "reason": "Family vacation",
        },
        "Alice 5-day annual leave (pending)",
    )

    # Bob: two sick days, approved by the manager.
    bob = await _safe_post(
        client,
        f"{BASE_URL}/leaves",
        {
            "employee_id": BOB_ID,
            "start_date": (monday + timedelta(days=7)).isoformat(),
            "end_date": (monday + timedelta(days=8)).isoformat(),
            "leave_type": "sick",
            "reason": "Surgery recovery",
        },
        "Bob 2-day sick leave",
    )
    if bob:
        await _safe_post(
            client,
            f"{BASE_URL}/leaves/{bob['id']}/resolve",
            {"decision": "approved", "resolver_id": MANAGER_ID, "comments": "Get well soon"},
            "Approve Bob's sick leave",
        )

    # Carol: personal day, approved and then cancelled.
    carol = await _safe_post(
        client,
        f"{BASE_URL}/leaves",
        {
            "employee_id": CAROL_ID,
            "start_date": (monday + timedelta(days=2)).isoformat(),
            "end_date": (monday + timedelta(days=2)).isoformat(),
            "leave_type": "personal",
        },
        "Carol 1-day personal leave",
    )
    if carol:
        await _safe_post(
            client,
            f"{BASE_URL}/leaves/{carol['id']}/resolve",
            {"decision": "approved", "resolver_id": MANAGER_ID},
            "Approve Carol's personal day",
        )
        await _safe_post(
            client,
            f"{BASE_URL}/leaves/{carol['id']}/cancel",
            {"employee_id": CAROL_ID, "reason": "Plans changed"},
            "Cancel Carol's personal day",
        )


async def main() -> None:
    print("=" * 60)
    print("  LeaveDesk - Development Seed Script")
    print("=" * 60)

    async with httpx.AsyncClient(timeout=30.0) as client:
        try:
            resp = await client.get(f"{BASE_URL}/health")
            if resp.status_code != 200:
                print(f"API health check failed: {resp.status_code}")
                sys.exit(1)
            print("\n[OK] API is healthy")
        except httpx.ConnectError:
            print("ERROR: Cannot connect to API at", BASE_URL)
            sys.exit(1)

        await seed_employees(client)
        await seed_requests(client)

    print("\n" + "=" * 60)
    print("  Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
