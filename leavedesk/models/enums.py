from __future__ import annotations

import enum


class LeaveType(enum.StrEnum):
    """Kind of leave being requested."""

    ANNUAL = "annual"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    EMERGENCY = "emergency"
    UNPAID = "unpaid"


class LeaveStatus(enum.StrEnum):
    """State machine for leave requests."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveAction(enum.StrEnum):
    """Operations that move a leave request between states."""

    APPROVE = "approve"
    REJECT = "reject"
    CANCEL = "cancel"
    MODIFY = "modify"


class ResolutionDecision(enum.StrEnum):
    """Outcome chosen by the resolver of a pending request."""

    APPROVED = "approved"
    REJECTED = "rejected"


class BalanceChangeReason(enum.StrEnum):
    """Reason recorded on a balance audit entry."""

    OPENING_BALANCE = "opening balance"
    LEAVE_APPROVED = "leave approved"
    LEAVE_CANCELLED = "leave cancelled"
    ADJUSTMENT = "adjustment"
