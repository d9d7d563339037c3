"""Leave Pydantic v2 schemas — application form and the leaves page view."""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from portal.common.constants import Decision, LeaveType, LeaveViewMode, UserRole
from portal.common.notices import Notice
from portal.common.payload import iso_midnight


def inclusive_day_count(start: date, end: date) -> int:
    """Days from *start* to *end*, both counted: same day → 1."""
    return (end - start).days + 1


# ═════════════════════════════════════════════════════════════════════
# Requests
# ═════════════════════════════════════════════════════════════════════


class LeaveApplicationForm(BaseModel):
    leave_type: Optional[LeaveType] = None
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1, max_length=2000)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "LeaveApplicationForm":
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        return self

    @property
    def total_days(self) -> int:
        return inclusive_day_count(self.start_date, self.end_date)

    def to_payload(self) -> dict:
        return {
            "leaveType": self.leave_type.value,
            "startDate": iso_midnight(self.start_date),
            "endDate": iso_midnight(self.end_date),
            "totalDays": self.total_days,
            "reason": self.reason,
        }


class LeaveDecisionRequest(BaseModel):
    status: Decision


# ═════════════════════════════════════════════════════════════════════
# View
# ═════════════════════════════════════════════════════════════════════


class LeaveRow(BaseModel):
    id: str
    employee_name: Optional[str] = None
    employee_initial: Optional[str] = None
    employee_designation: Optional[str] = None
    employee_department: Optional[str] = None
    leave_type: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    total_days: Optional[float] = None
    reason: Optional[str] = None
    status: str
    status_color: str
    can_approve: bool = False


class LeaveBalanceOut(BaseModel):
    paid: float = 0
    unpaid: float = 0
    balances: dict[str, float] = {}


class LeaveTypeOption(BaseModel):
    value: LeaveType
    label: str
    disabled: bool = False


class LeaveFormDefaults(BaseModel):
    leave_type: LeaveType
    options: list[LeaveTypeOption]
    hint: Optional[str] = None


class EmployeeOption(BaseModel):
    value: str
    label: str


class EmployeeSelector(BaseModel):
    """HR/admin dropdown: own or all leaves first, then one entry per employee."""

    default_value: str
    default_label: str
    selected: Optional[str] = None
    options: list[EmployeeOption] = []
    hint: str


class LeavesView(BaseModel):
    role: UserRole
    mode: Optional[LeaveViewMode] = None
    selector: Optional[EmployeeSelector] = None
    can_apply: bool = False
    show_balance: bool = False
    show_employee_column: bool = False
    show_actions: bool = False
    balance: Optional[LeaveBalanceOut] = None
    policy: list[str] = []
    form: Optional[LeaveFormDefaults] = None
    leaves: list[LeaveRow] = []
    empty_message: str
    notices: list[Notice] = []
