"""Dashboard Pydantic v2 schemas — one sub-view per role."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from portal.common.constants import UserRole
from portal.common.notices import Notice
from portal.employees.schemas import HRProfileRow
from portal.engagement.schemas import AnnouncementOut


class ChartSlice(BaseModel):
    name: str
    value: float = 0
    color: Optional[str] = None


class ActivityItem(BaseModel):
    """A recent leave, grievance or offer in a dashboard activity list."""

    id: str
    who: str
    initial: str = "?"
    summary: Optional[str] = None
    status: Optional[str] = None
    date: Optional[str] = None


class AttendanceToday(BaseModel):
    status: str = "Not Marked"
    status_color: str = "gray"
    hours_worked: Optional[float] = None
    punches: List[Dict[str, Any]] = []


# ═════════════════════════════════════════════════════════════════════
# Role sub-views
# ═════════════════════════════════════════════════════════════════════


class EmployeeDashboard(BaseModel):
    present_days: int = 0
    total_days: int = 0
    absent_days: int = 0
    leave_days: int = 0
    monthly_working_hours: float = 0
    attendance_percentage: float = 0
    attendance_color: str = "red"
    total_leave_balance: float = 0
    leave_breakdown: List[ChartSlice] = []
    today: AttendanceToday = AttendanceToday()
    week_summary: Dict[str, Any] = {}
    monthly_chart_data: List[Dict[str, Any]] = []
    attendance_history: List[Dict[str, Any]] = []
    upcoming_leaves: List[ActivityItem] = []
    recent_leaves: List[ActivityItem] = []
    latest_performance: Optional[Dict[str, Any]] = None


class ManagerDashboard(BaseModel):
    team_size: int = 0
    team_present: int = 0
    team_absent: int = 0
    team_on_leave: int = 0
    attendance_percentage: float = 0
    attendance_color: str = "red"
    pending_approvals: int = 0
    team_grievances: int = 0
    resolved_grievances: int = 0
    pending_reviews: int = 0
    completed_reviews: int = 0
    approved_leaves: int = 0
    attendance_trend: List[Dict[str, Any]] = []
    leave_trend: List[Dict[str, Any]] = []
    department_distribution: List[ChartSlice] = []
    team_member_status: List[Dict[str, Any]] = []
    recent_leaves: List[ActivityItem] = []
    recent_grievances: List[ActivityItem] = []
    recent_offers: List[ActivityItem] = []
    pending_hr_profiles: List[HRProfileRow] = []


class HRDashboard(BaseModel):
    total_employees: int = 0
    active_employees: int = 0
    inactive_employees: int = 0
    present_today: int = 0
    absent_today: int = 0
    on_leave_today: int = 0
    monthly_present: int = 0
    monthly_absent: int = 0
    attendance_percentage: float = 0
    pending_approvals: int = 0
    approved_leaves: int = 0
    rejected_leaves: int = 0
    open_tickets: int = 0
    resolved_tickets: int = 0
    new_applications: int = 0
    pending_reviews: int = 0
    completed_reviews: int = 0
    attendance_trend: List[Dict[str, Any]] = []
    department_distribution: List[ChartSlice] = []
    employee_status: List[Dict[str, Any]] = []
    recent_leaves: List[ActivityItem] = []
    recent_grievances: List[ActivityItem] = []
    recent_offers: List[ActivityItem] = []


class AdminDashboard(BaseModel):
    total_users: int = 0
    total_employees: int = 0
    active_employees: int = 0
    inactive_employees: int = 0
    total_departments: int = 0
    total_payroll_cost: float = 0
    present_today: int = 0
    absent_today: int = 0
    on_leave_today: int = 0
    attendance_percentage: float = 0
    attendance_color: str = "red"
    approved_leaves: int = 0
    pending_approvals: int = 0
    open_tickets: int = 0
    new_applications: int = 0
    pending_reviews: int = 0
    attendance_trend: List[Dict[str, Any]] = []
    department_distribution: List[ChartSlice] = []
    employee_status: List[Dict[str, Any]] = []
    recent_leaves: List[ActivityItem] = []
    recent_grievances: List[ActivityItem] = []
    pending_hr_profiles: List[HRProfileRow] = []


# ═════════════════════════════════════════════════════════════════════
# Page
# ═════════════════════════════════════════════════════════════════════


class DashboardView(BaseModel):
    role: UserRole
    display_name: str
    today: str
    announcements: List[AnnouncementOut] = []
    employee: Optional[EmployeeDashboard] = None
    manager: Optional[ManagerDashboard] = None
    hr: Optional[HRDashboard] = None
    admin: Optional[AdminDashboard] = None
    notices: List[Notice] = []
