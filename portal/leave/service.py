"""Leaves page — role-dependent leave lists, balance, application and approvals."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from portal.auth.schemas import SessionContext
from portal.common.constants import (
    DEFAULT_STATUS_COLOR,
    LEAVE_STATUS_COLORS,
    PAID_LEAVE_POLICY,
    Decision,
    LeaveStatus,
    LeaveType,
    LeaveViewMode,
    UserRole,
)
from portal.common.exceptions import UpstreamError
from portal.common.notices import ActionResult, NoticeLog, failure_message
from portal.common.payload import as_list, dig, format_row_date, ref_id, to_float
from portal.leave.schemas import (
    EmployeeOption,
    EmployeeSelector,
    LeaveApplicationForm,
    LeaveBalanceOut,
    LeaveFormDefaults,
    LeaveRow,
    LeavesView,
    LeaveTypeOption,
)

logger = logging.getLogger(__name__)

_APPROVABLE = {LeaveStatus.pending.value, LeaveStatus.manager_approved.value}


def default_leave_type(balance: Optional[dict]) -> LeaveType:
    """Paid leave only when the balance is known and has PL left, else unpaid."""
    if to_float(dig(balance, "balances", "PL")) > 0:
        return LeaveType.paid
    return LeaveType.unpaid


def build_form_defaults(balance: Optional[dict]) -> LeaveFormDefaults:
    leave_type = default_leave_type(balance)
    paid = dig(balance, "balances", "PL")
    if leave_type == LeaveType.paid:
        options = [
            LeaveTypeOption(value=LeaveType.paid, label=f"Paid Leave (PL) - {to_float(paid):g} available"),
            LeaveTypeOption(value=LeaveType.unpaid, label="Unpaid Leave (UL)"),
        ]
    else:
        options = [LeaveTypeOption(value=LeaveType.unpaid, label="Unpaid Leave (UL)")]
        if balance is not None and paid is not None and to_float(paid) == 0:
            options.append(
                LeaveTypeOption(value=LeaveType.paid, label="Paid Leave (PL) - Not available", disabled=True)
            )
    hint = "Loading leave balance..." if balance is None else None
    return LeaveFormDefaults(leave_type=leave_type, options=options, hint=hint)


def employee_option_label(employee: dict) -> str:
    name = dig(employee, "personalInfo", "fullName") or employee.get("employeeId") or "Unknown"
    emp_id = employee.get("employeeId") or employee.get("_id")
    label = f"{name} ({emp_id})"
    designation = dig(employee, "companyDetails", "designation")
    if designation:
        label += f" ({designation})"
    department = dig(employee, "companyDetails", "department")
    if department:
        label += f" - {department}"
    return label


class LeavesPage:
    """State of the leaves page for one user.

    employee: own leaves only. manager: own leaves or the team approval
    queue. hr: own leaves or one selected employee. admin: all leaves or one
    selected employee. Approval flags mirror the backend's rules; the backend
    still decides.
    """

    def __init__(
        self,
        session: SessionContext,
        *,
        mode: Optional[LeaveViewMode] = None,
        selected_employee_id: Optional[str] = None,
    ) -> None:
        self.api = session.api
        self.user = session.user
        self.notices = NoticeLog(logger)
        self.mode: Optional[LeaveViewMode] = None
        if self.role == UserRole.manager:
            self.mode = mode if mode == LeaveViewMode.team_leaves else LeaveViewMode.my_leaves
        self.selected_employee_id = (
            selected_employee_id or None
            if self.role in (UserRole.hr, UserRole.admin)
            else None
        )

        self.leaves: list[dict] = []
        self.balance: Optional[dict] = None
        self.employees: list[dict] = []

    # ── Derived flags ────────────────────────────────────────────────

    @property
    def role(self) -> UserRole:
        return self.user.role

    @property
    def viewing_own_leaves(self) -> bool:
        """HR looking at their own leaves rather than an employee's."""
        return self.role == UserRole.hr and self.selected_employee_id is None

    @property
    def can_apply(self) -> bool:
        return (
            self.role == UserRole.employee
            or (self.role == UserRole.manager and self.mode == LeaveViewMode.my_leaves)
            or self.viewing_own_leaves
        )

    @property
    def loads_balance(self) -> bool:
        return self.role in (UserRole.employee, UserRole.manager) or self.viewing_own_leaves

    @property
    def show_actions(self) -> bool:
        return (
            (self.role == UserRole.manager and self.mode == LeaveViewMode.team_leaves)
            or (self.role == UserRole.hr and self.selected_employee_id is not None)
            or self.role == UserRole.admin
        )

    @property
    def show_employee_column(self) -> bool:
        return self.show_actions

    # ── Fetching ─────────────────────────────────────────────────────

    def _leave_params(self) -> Optional[dict[str, str]]:
        """Query params for ``GET /api/leaves``; None means there is nothing to fetch."""
        if self.role == UserRole.manager:
            return {"viewTeam": "true"} if self.mode == LeaveViewMode.team_leaves else {}
        if self.role == UserRole.hr:
            if self.selected_employee_id:
                return {"employeeId": self.selected_employee_id}
            if self.user.employee_id:
                return {"employeeId": self.user.employee_id}
            return None
        if self.role == UserRole.admin and self.selected_employee_id:
            return {"employeeId": self.selected_employee_id}
        return {}

    async def load(self) -> None:
        tasks = [self.fetch_leaves()]
        if self.role in (UserRole.hr, UserRole.admin):
            tasks.append(self.fetch_employees())
        if self.loads_balance:
            tasks.append(self.fetch_balance())
        await asyncio.gather(*tasks)

    async def fetch_leaves(self) -> None:
        params = self._leave_params()
        if params is None:
            self.leaves = []
            return
        try:
            data = await self.api.get("/api/leaves", params=params or None)
        except UpstreamError:
            self.notices.error("Failed to load leave applications")
            return
        self.leaves = data if isinstance(data, list) else []
        logger.debug(
            "fetched %d leaves for %s (mode=%s, employee=%s)",
            len(self.leaves), self.role.value, self.mode, self.selected_employee_id,
        )

    async def fetch_balance(self) -> None:
        try:
            self.balance = await self.api.get("/api/leaves/balance")
        except UpstreamError as exc:
            logger.error("Error fetching leave balance: %s", exc.detail)

    async def fetch_employees(self) -> None:
        try:
            data = await self.api.get("/api/employees")
        except UpstreamError as exc:
            logger.error("Error fetching employees for selector: %s", exc.detail)
            self.employees = []
            return
        self.employees = data if isinstance(data, list) else []

    # ── Actions ──────────────────────────────────────────────────────

    async def apply(self, form: LeaveApplicationForm) -> ActionResult:
        if not self.can_apply:
            self.notices.error("Leave applications can only be made from your own leaves view")
            return ActionResult.rejected(403)

        if form.leave_type is None:
            form = form.model_copy(update={"leave_type": default_leave_type(self.balance)})

        try:
            await self.api.post("/api/leaves", json=form.to_payload())
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to submit leave application"))
            available = dig(exc.payload, "availableBalance")
            if available is not None:
                requested = dig(exc.payload, "requestedDays")
                self.notices.error(
                    f"Available: {available} paid leave(s). Requested: {requested} day(s).",
                    duration_ms=5000,
                )
            return ActionResult.from_upstream(exc)

        self.notices.success("Leave application submitted successfully!")
        if self.role == UserRole.manager:
            self.mode = LeaveViewMode.my_leaves
        await asyncio.gather(self.fetch_leaves(), self.fetch_balance())
        return ActionResult.done()

    async def decide(self, leave_id: str, decision: Decision) -> ActionResult:
        try:
            await self.api.put(f"/api/leaves/{leave_id}/approve", json={"status": decision.value})
        except UpstreamError as exc:
            self.notices.error("Failed to update leave status")
            return ActionResult.from_upstream(exc)

        self.notices.success("Leave approved" if decision == Decision.approved else "Leave rejected")
        await self.fetch_leaves()
        return ActionResult.done()

    # ── View ─────────────────────────────────────────────────────────

    def _row(self, leave: dict) -> LeaveRow:
        status = leave.get("status") or LeaveStatus.pending.value
        row = LeaveRow(
            id=ref_id(leave.get("_id")) or "",
            leave_type=leave.get("leaveType"),
            start_date=format_row_date(leave.get("startDate")),
            end_date=format_row_date(leave.get("endDate")),
            total_days=leave.get("totalDays"),
            reason=leave.get("reason"),
            status=status,
            status_color=LEAVE_STATUS_COLORS.get(status, DEFAULT_STATUS_COLOR),
            can_approve=self.show_actions and status in _APPROVABLE,
        )
        if self.show_employee_column:
            employee: Any = leave.get("employeeId")
            name = dig(employee, "personalInfo", "fullName")
            initial_source = name or dig(employee, "employeeId") or "E"
            row.employee_name = name or "Unknown"
            row.employee_initial = str(initial_source)[0].upper()
            row.employee_designation = dig(employee, "companyDetails", "designation")
            row.employee_department = dig(employee, "companyDetails", "department")
        return row

    def _selector(self) -> Optional[EmployeeSelector]:
        if self.role not in (UserRole.hr, UserRole.admin):
            return None
        if self.role == UserRole.admin:
            default_value, default_label = "all-employees", "All Employees Leaves"
        else:
            default_value, default_label = "my-leaves", "My Leaves (Apply & View)"

        if self.selected_employee_id:
            hint = "Viewing employee leaves: You can approve/reject leaves"
        elif self.role == UserRole.admin:
            hint = "Viewing all employees' leaves: All leaves from employees, managers, and HR"
        else:
            hint = "Your leaves: You can apply and view your own leaves"

        return EmployeeSelector(
            default_value=default_value,
            default_label=default_label,
            selected=self.selected_employee_id,
            options=[
                EmployeeOption(value=ref_id(emp.get("_id")) or "", label=employee_option_label(emp))
                for emp in as_list(self.employees)
            ],
            hint=hint,
        )

    def _empty_message(self) -> str:
        if self.role == UserRole.manager and self.mode == LeaveViewMode.team_leaves:
            return "No team leave applications pending approval"
        if self.role in (UserRole.hr, UserRole.admin) and self.selected_employee_id:
            return "No leave applications found for this employee"
        return "No leave applications found"

    def to_view(self) -> LeavesView:
        balance = None
        if self.balance is not None:
            balances = {k: to_float(v) for k, v in (dig(self.balance, "balances") or {}).items()}
            balance = LeaveBalanceOut(
                paid=balances.get("PL", 0),
                unpaid=balances.get("UL", 0),
                balances=balances,
            )
        show_balance = self.can_apply and balance is not None
        return LeavesView(
            role=self.role,
            mode=self.mode,
            selector=self._selector(),
            can_apply=self.can_apply,
            show_balance=show_balance,
            show_employee_column=self.show_employee_column,
            show_actions=self.show_actions,
            balance=balance if show_balance else None,
            policy=PAID_LEAVE_POLICY if show_balance else [],
            form=build_form_defaults(self.balance) if self.can_apply else None,
            leaves=[self._row(leave) for leave in self.leaves],
            empty_message=self._empty_message(),
            notices=self.notices.drain(),
        )
