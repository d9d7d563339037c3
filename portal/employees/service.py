"""Employees page — directory with filters and statistics, profile approvals."""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from typing import Optional

from portal.auth.schemas import SessionContext
from portal.common.constants import (
    EMPLOYMENT_STATUS_COLORS,
    Decision,
    EmployeesTab,
    EmploymentStatus,
    ProfileStatus,
    UserRole,
)
from portal.common.exceptions import UpstreamError
from portal.common.notices import ActionResult, NoticeLog, failure_message
from portal.common.payload import as_list, dig, format_row_date, ref_id
from portal.employees.schemas import (
    EmployeeFilters,
    EmployeeRow,
    EmployeesView,
    EmployeeStats,
    HRProfileRow,
    ProfileDecisionRequest,
)
from portal.upstream import ApiClient

logger = logging.getLogger(__name__)

HR_PROFILE_REVIEWERS = (UserRole.manager, UserRole.admin)
PROFILE_APPROVERS = (UserRole.hr, UserRole.admin)


# ── Derivations ─────────────────────────────────────────────────────

def employment_status(employee: dict) -> Optional[str]:
    return dig(employee, "companyDetails", "employmentStatus")


def employee_stats(employees: list[dict]) -> EmployeeStats:
    active = sum(1 for e in employees if employment_status(e) == EmploymentStatus.active.value)
    departments = Counter(
        dig(e, "companyDetails", "department") or "Unassigned" for e in employees
    )
    return EmployeeStats(
        total=len(employees),
        active=active,
        inactive=len(employees) - active,
        departments=dict(departments),
    )


def unique_departments(employees: list[dict]) -> list[str]:
    """Departments in first-seen order, missing ones skipped."""
    seen: dict[str, None] = {}
    for employee in employees:
        department = dig(employee, "companyDetails", "department")
        if department:
            seen.setdefault(department, None)
    return list(seen)


def employee_row(employee: dict) -> EmployeeRow:
    status = employment_status(employee) or EmploymentStatus.active.value
    full_name = dig(employee, "personalInfo", "fullName")
    record_id = ref_id(employee.get("_id")) or ""
    return EmployeeRow(
        id=record_id,
        employee_id=employee.get("employeeId"),
        full_name=full_name or "N/A",
        initial=full_name[0] if full_name else "E",
        email=dig(employee, "personalInfo", "email") or "N/A",
        department=dig(employee, "companyDetails", "department") or "N/A",
        designation=dig(employee, "companyDetails", "designation") or "N/A",
        status=status,
        status_color=EMPLOYMENT_STATUS_COLORS.get(status, "red"),
        profile_status=employee.get("profileStatus"),
        profile_url=f"/profile/{record_id}",
    )


def hr_profile_matches(profile: dict, filters: EmployeeFilters) -> bool:
    if filters.status and profile.get("profileStatus") != filters.status:
        return False
    if not filters.search:
        return True
    needle = filters.search.lower()
    haystack = (
        dig(profile, "personalInfo", "fullName"),
        dig(profile, "personalInfo", "email"),
        profile.get("hrId"),
        profile.get("employeeId"),
    )
    return any(needle in str(value).lower() for value in haystack if value)


def hr_profile_row(profile: dict) -> HRProfileRow:
    status = profile.get("profileStatus")
    return HRProfileRow(
        id=ref_id(profile.get("_id")) or "",
        hr_id=profile.get("hrId"),
        full_name=dig(profile, "personalInfo", "fullName") or "N/A",
        email=dig(profile, "personalInfo", "email") or dig(profile, "userId", "email") or "N/A",
        department=dig(profile, "companyDetails", "department"),
        designation=dig(profile, "companyDetails", "designation"),
        profile_status=status,
        submitted_on=format_row_date(profile.get("profileSubmittedAt")),
        can_decide=status == ProfileStatus.submitted.value,
    )


async def submit_hr_profile_decision(
    api: ApiClient,
    notices: NoticeLog,
    profile_id: str,
    body: ProfileDecisionRequest,
) -> ActionResult:
    """Approve or reject a submitted HR profile (manager/admin)."""
    try:
        await api.put(
            f"/api/hr-profile/{profile_id}/approve",
            json={"status": body.status.value, "comments": body.comments},
        )
    except UpstreamError as exc:
        notices.error(failure_message(exc, "Failed to approve HR profile"))
        return ActionResult.from_upstream(exc)

    verb = "approved" if body.status == Decision.approved else "rejected"
    notices.success(f"HR profile {verb} successfully")
    return ActionResult.done()


# ── Page ────────────────────────────────────────────────────────────

class EmployeesPage:
    def __init__(
        self,
        session: SessionContext,
        *,
        filters: Optional[EmployeeFilters] = None,
        tab: Optional[EmployeesTab] = None,
    ) -> None:
        self.api = session.api
        self.user = session.user
        self.notices = NoticeLog(logger)
        self.filters = filters or EmployeeFilters()
        self.tab = EmployeesTab.employees
        if tab == EmployeesTab.hr_profiles and self.can_review_hr_profiles:
            self.tab = EmployeesTab.hr_profiles

        self.employees: list[dict] = []
        self.hr_profiles: list[dict] = []

    @property
    def role(self) -> UserRole:
        return self.user.role

    @property
    def can_review_hr_profiles(self) -> bool:
        return self.role in HR_PROFILE_REVIEWERS

    @property
    def can_decide_profiles(self) -> bool:
        return self.role in PROFILE_APPROVERS

    async def load(self) -> None:
        if self.tab == EmployeesTab.hr_profiles:
            await asyncio.gather(self.fetch_employees(), self.fetch_hr_profiles())
        else:
            await self.fetch_employees()

    async def fetch_employees(self) -> None:
        try:
            data = await self.api.get("/api/employees", params=self.filters.to_params() or None)
        except UpstreamError as exc:
            logger.error("Error fetching employees: %s", exc.upstream_status)
            self.notices.error("Failed to load employees")
            return
        self.employees = as_list(data)

    async def fetch_hr_profiles(self) -> None:
        try:
            data = await self.api.get("/api/hr-profile/all")
        except UpstreamError as exc:
            logger.error("Error fetching HR profiles: %s", exc.upstream_status)
            self.notices.error("Failed to load HR profiles")
            return
        self.hr_profiles = as_list(data)

    async def decide_hr_profile(self, profile_id: str, body: ProfileDecisionRequest) -> ActionResult:
        result = await submit_hr_profile_decision(self.api, self.notices, profile_id, body)
        if result.ok:
            await self.fetch_hr_profiles()
        return result

    async def decide_profile(self, employee_id: str, body: ProfileDecisionRequest) -> ActionResult:
        """Approve or reject an employee's submitted profile (hr/admin)."""
        try:
            await self.api.put(
                f"/api/employees/{employee_id}/approve-profile",
                json={"status": body.status.value, "comments": body.comments},
            )
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to update profile status"))
            return ActionResult.from_upstream(exc)

        verb = "approved" if body.status == Decision.approved else "rejected"
        self.notices.success(f"Profile {verb} successfully")
        await self.fetch_employees()
        return ActionResult.done()

    # ── View ─────────────────────────────────────────────────────────

    def _empty_message(self) -> Optional[str]:
        if self.employees:
            return None
        if self.filters.any_set:
            return "Try adjusting your filters"
        return "No employees available"

    def to_view(self) -> EmployeesView:
        tabs = [EmployeesTab.employees]
        if self.can_review_hr_profiles:
            tabs.append(EmployeesTab.hr_profiles)
        hr_profiles = []
        if self.tab == EmployeesTab.hr_profiles:
            hr_profiles = [
                hr_profile_row(p) for p in self.hr_profiles if hr_profile_matches(p, self.filters)
            ]
        return EmployeesView(
            role=self.role,
            tab=self.tab,
            subtitle=(
                "Manage your team members" if self.role == UserRole.manager
                else "Manage employee information"
            ),
            tabs=tabs,
            can_decide_profiles=self.can_decide_profiles,
            filters=self.filters,
            active_filter_count=sum(1 for f in (self.filters.department, self.filters.status) if f),
            stats=employee_stats(self.employees),
            departments=unique_departments(self.employees),
            employees=[employee_row(e) for e in self.employees],
            results_count=len(self.employees),
            empty_message=self._empty_message(),
            hr_profiles=hr_profiles,
            notices=self.notices.drain(),
        )
