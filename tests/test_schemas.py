"""Unit tests for request, balance and employee API schemas."""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from leavedesk.models.enums import LeaveType, ResolutionDecision
from leavedesk.schemas.balance import CreateAdjustmentRequest
from leavedesk.schemas.employee import UpsertEmployeeRequest
from leavedesk.schemas.request import CancelPayload, ModifyPayload, ResolvePayload, SubmitLeavePayload

# ---------------------------------------------------------------------------
# SubmitLeavePayload
# ---------------------------------------------------------------------------


def test_submit_payload_valid() -> None:
    p = SubmitLeavePayload(
        employee_id=uuid.uuid4(),
        start_date="2025-01-06",
        end_date="2025-01-10",
        leave_type="annual",
    )
    assert p.leave_type == LeaveType.ANNUAL
    assert p.reason is None


def test_submit_payload_keeps_dates_as_text() -> None:
    p = SubmitLeavePayload.model_validate(
        {
            "employee_id": str(uuid.uuid4()),
            "start_date": "2025-01-06",
            "end_date": "2025-01-10",
            "leave_type": "sick",
        }
    )
    assert p.start_date == "2025-01-06"


def test_submit_payload_defers_leave_type_check() -> None:
    p = SubmitLeavePayload.model_validate({"leave_type": "sabbatical"})
    assert p.leave_type == "sabbatical"


def test_submit_payload_missing_fields_default_to_none() -> None:
    p = SubmitLeavePayload.model_validate({"leave_type": "annual"})
    assert p.employee_id is None
    assert p.start_date is None
    assert p.end_date is None


def test_submit_payload_numbers_become_text() -> None:
    """A bare timestamp is not read as a date."""
    p = SubmitLeavePayload.model_validate({"start_date": 1900000000, "end_date": 2031})
    assert p.start_date == "1900000000"
    assert p.end_date == "2031"


def test_submit_payload_bad_employee_id() -> None:
    with pytest.raises(ValidationError):
        SubmitLeavePayload.model_validate({"employee_id": "not-a-uuid"})


# ---------------------------------------------------------------------------
# ResolvePayload / CancelPayload / ModifyPayload
# ---------------------------------------------------------------------------


def test_resolve_payload_valid() -> None:
    p = ResolvePayload(decision="rejected", resolver_id=uuid.uuid4(), comments="Busy period")
    assert p.decision == ResolutionDecision.REJECTED


def test_resolve_payload_unknown_decision() -> None:
    with pytest.raises(ValidationError):
        ResolvePayload(decision="maybe", resolver_id=uuid.uuid4())


def test_cancel_payload_all_optional() -> None:
    p = CancelPayload()
    assert p.employee_id is None
    assert p.reason is None


def test_modify_payload_partial() -> None:
    p = ModifyPayload(end_date="2025-01-08")
    assert p.start_date is None
    assert p.leave_type is None
    assert p.end_date == "2025-01-08"


# ---------------------------------------------------------------------------
# CreateAdjustmentRequest
# ---------------------------------------------------------------------------


def test_adjustment_positive() -> None:
    p = CreateAdjustmentRequest(delta_days=3, reason="Carried over from last year")
    assert p.delta_days == 3


def test_adjustment_negative() -> None:
    p = CreateAdjustmentRequest(delta_days=-2, reason="Correction")
    assert p.delta_days == -2


def test_adjustment_zero_rejected() -> None:
    with pytest.raises(ValidationError):
        CreateAdjustmentRequest(delta_days=0, reason="Nothing")


def test_adjustment_requires_reason() -> None:
    with pytest.raises(ValidationError):
        CreateAdjustmentRequest(delta_days=1, reason="")


# ---------------------------------------------------------------------------
# UpsertEmployeeRequest
# ---------------------------------------------------------------------------


def test_upsert_employee_valid() -> None:
    p = UpsertEmployeeRequest(name="Alice", email="alice@example.com", department="Engineering")
    assert p.leave_entitlement_days is None


def test_upsert_employee_bad_email() -> None:
    with pytest.raises(ValidationError):
        UpsertEmployeeRequest(name="Alice", email="alice.example.com", department="Engineering")


def test_upsert_employee_entitlement_bounds() -> None:
    with pytest.raises(ValidationError):
        UpsertEmployeeRequest(name="Alice", email="a@example.com", department="Eng", leave_entitlement_days=-1)
