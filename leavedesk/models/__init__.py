from sqlmodel import SQLModel

from leavedesk.models.balance import EmployeeBalance
from leavedesk.models.base import CreatedAtMixin, UUIDBase
from leavedesk.models.enums import (
    BalanceChangeReason,
    LeaveAction,
    LeaveStatus,
    LeaveType,
    ResolutionDecision,
)
from leavedesk.models.ledger import BalanceAuditEntry
from leavedesk.models.request import LeaveRequest

__all__ = [
    "BalanceAuditEntry",
    "BalanceChangeReason",
    "CreatedAtMixin",
    "EmployeeBalance",
    "LeaveAction",
    "LeaveRequest",
    "LeaveStatus",
    "LeaveType",
    "ResolutionDecision",
    "SQLModel",
    "UUIDBase",
]
