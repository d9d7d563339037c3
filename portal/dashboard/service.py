"""Dashboard page — stats, announcement ticker and the role's sub-view."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

from portal.auth.schemas import SessionContext
from portal.common.constants import (
    ATTENDANCE_STATUS_COLORS,
    LEAVE_BALANCE_COLORS,
    TODAY_FORMAT,
    LeaveType,
    UserRole,
)
from portal.common.exceptions import UpstreamError
from portal.common.notices import ActionResult, NoticeLog
from portal.common.payload import (
    as_list,
    attendance_band,
    dig,
    format_row_date,
    is_past,
    percentage,
    ref_id,
    to_float,
)
from portal.config import settings
from portal.dashboard.schemas import (
    ActivityItem,
    AdminDashboard,
    AttendanceToday,
    ChartSlice,
    DashboardView,
    EmployeeDashboard,
    HRDashboard,
    ManagerDashboard,
)
from portal.employees.schemas import ProfileDecisionRequest
from portal.employees.service import HR_PROFILE_REVIEWERS, hr_profile_row, submit_hr_profile_decision
from portal.engagement.service import build_announcement

logger = logging.getLogger(__name__)

_BALANCE_TYPES = (LeaveType.casual, LeaveType.paid, LeaveType.sick)


# ── Stat helpers ────────────────────────────────────────────────────

def count(stats: Optional[dict], *keys: str) -> int:
    return int(to_float(dig(stats, *keys)))


def department_slices(raw: Any) -> list[ChartSlice]:
    """``{"Sales": 3}`` or ``[{"name": "Sales", "value": 3}]`` → chart slices."""
    if isinstance(raw, dict):
        return [ChartSlice(name=str(name), value=to_float(value)) for name, value in raw.items()]
    return [
        ChartSlice(name=str(item.get("name") or "Unassigned"), value=to_float(item.get("value")))
        for item in as_list(raw)
        if isinstance(item, dict)
    ]


def active_announcements(announcements: list[dict], now: Optional[datetime] = None) -> list[dict]:
    """Announcements without an expiry or not yet expired, capped for the ticker."""
    active = [a for a in announcements if not is_past(a.get("expiryDate"), now)]
    return active[: settings.DASHBOARD_ANNOUNCEMENT_LIMIT]


def _initial(name: Optional[str]) -> str:
    return name[0].upper() if name else "?"


def leave_item(leave: dict) -> ActivityItem:
    employee = leave.get("employeeId")
    who = dig(employee, "personalInfo", "fullName") or dig(employee, "employeeId") or "Unknown"
    return ActivityItem(
        id=ref_id(leave.get("_id")) or "",
        who=who,
        initial=_initial(dig(employee, "personalInfo", "fullName")),
        summary=leave.get("leaveType"),
        status=leave.get("status"),
        date=format_row_date(leave.get("startDate")),
    )


def grievance_item(grievance: dict) -> ActivityItem:
    employee = grievance.get("employeeId")
    who = dig(employee, "personalInfo", "fullName") or dig(employee, "employeeId") or "Unknown"
    return ActivityItem(
        id=ref_id(grievance.get("_id")) or "",
        who=who,
        initial=_initial(dig(employee, "personalInfo", "fullName")),
        summary=grievance.get("title"),
        status=grievance.get("status"),
        date=format_row_date(grievance.get("createdAt")),
    )


def offer_item(offer: dict) -> ActivityItem:
    name = dig(offer, "candidateInfo", "fullName")
    return ActivityItem(
        id=ref_id(offer.get("_id")) or "",
        who=name or "Unknown Candidate",
        initial=_initial(name),
        summary=dig(offer, "jobId", "title"),
        status=dig(offer, "offerLetter", "status") or offer.get("status"),
        date=format_row_date(dig(offer, "offerLetter", "sentAt") or offer.get("createdAt")),
    )


def _items(stats: Optional[dict], key: str, build) -> list[ActivityItem]:
    return [build(entry) for entry in as_list(dig(stats, key)) if isinstance(entry, dict)]


def _rows(stats: Optional[dict], key: str) -> list[dict]:
    return [entry for entry in as_list(dig(stats, key)) if isinstance(entry, dict)]


# ── Role sub-views ──────────────────────────────────────────────────

def employee_dashboard(stats: Optional[dict]) -> EmployeeDashboard:
    present = count(stats, "monthlyStats", "presentDays")
    total = count(stats, "monthlyStats", "totalDays")
    attendance = percentage(present, total)

    breakdown = [
        ChartSlice(
            name=leave_type.value,
            value=to_float(dig(stats, "leaveBalance", leave_type.value)),
            color=LEAVE_BALANCE_COLORS[leave_type.value],
        )
        for leave_type in _BALANCE_TYPES
    ]

    today_raw = dig(stats, "attendanceToday")
    today = AttendanceToday()
    if isinstance(today_raw, dict):
        status = today_raw.get("status") or "Not Marked"
        hours = today_raw.get("totalWorkingHours")
        today = AttendanceToday(
            status=status,
            status_color=ATTENDANCE_STATUS_COLORS.get(status, "gray"),
            hours_worked=round(to_float(hours), 1) if hours else None,
            punches=[p for p in as_list(today_raw.get("punches")) if isinstance(p, dict)],
        )

    latest = dig(stats, "latestPerformance")
    return EmployeeDashboard(
        present_days=present,
        total_days=total,
        absent_days=count(stats, "monthlyStats", "absentDays"),
        leave_days=count(stats, "monthlyStats", "leaveDays"),
        monthly_working_hours=round(to_float(dig(stats, "monthlyStats", "totalWorkingHours")), 1),
        attendance_percentage=attendance,
        attendance_color=attendance_band(attendance),
        total_leave_balance=sum(slice_.value for slice_ in breakdown),
        leave_breakdown=breakdown,
        today=today,
        week_summary=dig(stats, "weekSummary", default={}),
        monthly_chart_data=_rows(stats, "monthlyChartData"),
        attendance_history=_rows(stats, "attendanceHistory"),
        upcoming_leaves=_items(stats, "upcomingLeaves", leave_item),
        recent_leaves=_items(stats, "recentLeaves", leave_item),
        latest_performance=latest if isinstance(latest, dict) else None,
    )


def manager_dashboard(stats: Optional[dict], pending_profiles: list[dict]) -> ManagerDashboard:
    attendance = to_float(dig(stats, "attendancePercentage"))
    return ManagerDashboard(
        team_size=count(stats, "teamSize"),
        team_present=count(stats, "teamPresent"),
        team_absent=count(stats, "teamAbsent"),
        team_on_leave=count(stats, "teamOnLeave"),
        attendance_percentage=attendance,
        attendance_color=attendance_band(attendance),
        pending_approvals=count(stats, "pendingApprovals"),
        team_grievances=count(stats, "teamGrievances"),
        resolved_grievances=count(stats, "resolvedGrievances"),
        pending_reviews=count(stats, "pendingReviews"),
        completed_reviews=count(stats, "completedReviews"),
        approved_leaves=count(stats, "approvedLeaves"),
        attendance_trend=_rows(stats, "attendanceTrend"),
        leave_trend=_rows(stats, "leaveTrend"),
        department_distribution=department_slices(dig(stats, "departmentDistribution")),
        team_member_status=_rows(stats, "teamMemberStatus"),
        recent_leaves=_items(stats, "recentLeaves", leave_item),
        recent_grievances=_items(stats, "recentGrievances", grievance_item),
        recent_offers=_items(stats, "recentOffers", offer_item),
        pending_hr_profiles=[hr_profile_row(p) for p in pending_profiles],
    )


def hr_dashboard(stats: Optional[dict]) -> HRDashboard:
    return HRDashboard(
        total_employees=count(stats, "totalEmployees"),
        active_employees=count(stats, "activeEmployees"),
        inactive_employees=count(stats, "inactiveEmployees"),
        present_today=count(stats, "presentToday"),
        absent_today=count(stats, "absentToday"),
        on_leave_today=count(stats, "onLeaveToday"),
        monthly_present=count(stats, "monthlyPresent"),
        monthly_absent=count(stats, "monthlyAbsent"),
        attendance_percentage=to_float(dig(stats, "attendancePercentage")),
        pending_approvals=count(stats, "pendingApprovals"),
        approved_leaves=count(stats, "approvedLeaves"),
        rejected_leaves=count(stats, "rejectedLeaves"),
        open_tickets=count(stats, "openTickets"),
        resolved_tickets=count(stats, "resolvedTickets"),
        new_applications=count(stats, "newApplications"),
        pending_reviews=count(stats, "pendingReviews"),
        completed_reviews=count(stats, "completedReviews"),
        attendance_trend=_rows(stats, "attendanceTrend"),
        department_distribution=department_slices(dig(stats, "departmentDistribution")),
        employee_status=_rows(stats, "employeeStatus"),
        recent_leaves=_items(stats, "recentLeaves", leave_item),
        recent_grievances=_items(stats, "recentGrievances", grievance_item),
        recent_offers=_items(stats, "recentOffers", offer_item),
    )


def admin_dashboard(stats: Optional[dict], pending_profiles: list[dict]) -> AdminDashboard:
    attendance = to_float(dig(stats, "attendancePercentage"))
    return AdminDashboard(
        total_users=count(stats, "totalUsers"),
        total_employees=count(stats, "totalEmployees"),
        active_employees=count(stats, "activeEmployees"),
        inactive_employees=count(stats, "inactiveEmployees"),
        total_departments=count(stats, "totalDepartments"),
        total_payroll_cost=to_float(dig(stats, "totalPayrollCost")),
        present_today=count(stats, "presentToday"),
        absent_today=count(stats, "absentToday"),
        on_leave_today=count(stats, "onLeaveToday"),
        attendance_percentage=attendance,
        attendance_color=attendance_band(attendance),
        approved_leaves=count(stats, "approvedLeaves"),
        pending_approvals=count(stats, "pendingApprovals"),
        open_tickets=count(stats, "openTickets"),
        new_applications=count(stats, "newApplications"),
        pending_reviews=count(stats, "pendingReviews"),
        attendance_trend=_rows(stats, "attendanceTrend"),
        department_distribution=department_slices(dig(stats, "departmentDistribution")),
        employee_status=_rows(stats, "employeeStatus"),
        recent_leaves=_items(stats, "recentLeaves", leave_item),
        recent_grievances=_items(stats, "recentGrievances", grievance_item),
        pending_hr_profiles=[hr_profile_row(p) for p in pending_profiles],
    )


# ── Page ────────────────────────────────────────────────────────────

class DashboardPage:
    """Landing page for the signed-in user.

    Every fetch fails on its own: the failure is logged and that part of the
    page stays empty.
    """

    def __init__(self, session: SessionContext) -> None:
        self.api = session.api
        self.user = session.user
        self.notices = NoticeLog(logger)
        self.stats: Optional[dict] = None
        self.profile: Optional[dict] = None
        self.announcements: list[dict] = []
        self.pending_hr_profiles: list[dict] = []

    @property
    def role(self) -> UserRole:
        return self.user.role

    @property
    def profile_path(self) -> str:
        if self.role in (UserRole.hr, UserRole.admin):
            return "/api/hr-profile/my-profile"
        return "/api/profile/my-profile"

    async def load(self) -> None:
        fetches = [self.fetch_stats(), self.fetch_announcements(), self.fetch_profile()]
        if self.role in HR_PROFILE_REVIEWERS:
            fetches.append(self.fetch_pending_hr_profiles())
        await asyncio.gather(*fetches)

    async def fetch_stats(self) -> None:
        try:
            data = await self.api.get("/api/dashboard/stats")
        except UpstreamError as exc:
            logger.error("Error fetching stats: %s", exc.upstream_status)
            return
        self.stats = data if isinstance(data, dict) else None

    async def fetch_announcements(self) -> None:
        try:
            data = await self.api.get("/api/engagement/announcements")
        except UpstreamError as exc:
            logger.error("Error fetching announcements: %s", exc.upstream_status)
            return
        self.announcements = active_announcements(
            [a for a in as_list(data) if isinstance(a, dict)]
        )

    async def fetch_profile(self) -> None:
        # A missing profile is normal for new users; the email stands in.
        try:
            data = await self.api.get(self.profile_path)
        except UpstreamError as exc:
            logger.error("Error fetching profile: %s", exc.upstream_status)
            return
        self.profile = data if isinstance(data, dict) else None

    async def fetch_pending_hr_profiles(self) -> None:
        try:
            data = await self.api.get("/api/hr-profile/pending-approvals")
        except UpstreamError as exc:
            logger.error("Error fetching pending HR profiles: %s", exc.upstream_status)
            self.pending_hr_profiles = []
            return
        self.pending_hr_profiles = [p for p in as_list(data) if isinstance(p, dict)]

    async def decide_hr_profile(self, profile_id: str, body: ProfileDecisionRequest) -> ActionResult:
        result = await submit_hr_profile_decision(self.api, self.notices, profile_id, body)
        if result.ok:
            await self.fetch_pending_hr_profiles()
        return result

    @property
    def display_name(self) -> str:
        return dig(self.profile, "personalInfo", "fullName") or self.user.email or "User"

    def to_view(self, now: Optional[datetime] = None) -> DashboardView:
        now = now or datetime.now(timezone.utc)
        view = DashboardView(
            role=self.role,
            display_name=self.display_name,
            today=now.strftime(TODAY_FORMAT),
            announcements=[build_announcement(a) for a in self.announcements],
            notices=self.notices.drain(),
        )
        if self.role == UserRole.employee:
            view.employee = employee_dashboard(self.stats)
        elif self.role == UserRole.manager:
            view.manager = manager_dashboard(self.stats, self.pending_hr_profiles)
        elif self.role == UserRole.hr:
            view.hr = hr_dashboard(self.stats)
        else:
            view.admin = admin_dashboard(self.stats, self.pending_hr_profiles)
        return view
