"""Enums and constants for the HR portal — matching the upstream API's string values."""

from __future__ import annotations

import enum


# ── Auth / Roles ────────────────────────────────────────────────────

class UserRole(str, enum.Enum):
    employee = "employee"
    manager = "manager"
    hr = "hr"
    admin = "admin"


PRIVILEGED_ROLES: tuple[UserRole, ...] = (UserRole.manager, UserRole.hr, UserRole.admin)


# ── Leave ───────────────────────────────────────────────────────────

class LeaveType(str, enum.Enum):
    paid = "PL"
    unpaid = "UL"
    casual = "CL"
    sick = "SL"


class LeaveStatus(str, enum.Enum):
    pending = "Pending"
    manager_approved = "Manager Approved"
    manager_rejected = "Manager Rejected"
    hr_approved = "HR Approved"
    hr_rejected = "HR Rejected"
    cancelled = "Cancelled"


class LeaveViewMode(str, enum.Enum):
    my_leaves = "my-leaves"
    team_leaves = "team-leaves"


class Decision(str, enum.Enum):
    approved = "Approved"
    rejected = "Rejected"


# ── Grievances ──────────────────────────────────────────────────────

class GrievanceType(str, enum.Enum):
    grievance = "Grievance"
    complaint = "Complaint"
    query = "Query"
    suggestion = "Suggestion"


class GrievanceCategory(str, enum.Enum):
    hr_issues = "HR Issues"
    salary_issues = "Salary Issues"
    it_support = "IT Support"
    workplace_complaints = "Workplace Complaints"
    policy_queries = "Policy Queries"
    facilities = "Facilities/Maintenance"


class GrievancePriority(str, enum.Enum):
    low = "Low"
    medium = "Medium"
    high = "High"
    urgent = "Urgent"


class GrievanceStatus(str, enum.Enum):
    open = "Open"
    in_progress = "In Progress"
    resolved = "Resolved"
    closed = "Closed"


# ── Engagement ──────────────────────────────────────────────────────

class Visibility(str, enum.Enum):
    all = "All"
    department = "Department"


# ── Profiles / Employees ────────────────────────────────────────────

class ProfileStatus(str, enum.Enum):
    draft = "Draft"
    submitted = "Submitted"
    approved = "Approved"
    rejected = "Rejected"


class EmploymentStatus(str, enum.Enum):
    active = "Active"
    inactive = "Inactive"
    on_leave = "On Leave"


class EmployeesTab(str, enum.Enum):
    employees = "employees"
    hr_profiles = "hr-profiles"


# ── Recruitment ─────────────────────────────────────────────────────

class OfferStatus(str, enum.Enum):
    pending = "Pending"
    sent = "Sent"
    accepted = "Accepted"
    rejected = "Rejected"
    expired = "Expired"


class OfferAction(str, enum.Enum):
    accept = "accept"
    reject = "reject"


# ── Display lookups ─────────────────────────────────────────────────

LEAVE_STATUS_COLORS: dict[str, str] = {
    LeaveStatus.hr_approved.value: "green",
    LeaveStatus.manager_approved.value: "blue",
    LeaveStatus.hr_rejected.value: "red",
    LeaveStatus.manager_rejected.value: "red",
}

GRIEVANCE_STATUS_COLORS: dict[str, str] = {
    GrievanceStatus.resolved.value: "green",
    GrievanceStatus.in_progress.value: "blue",
    GrievanceStatus.closed.value: "gray",
}

GRIEVANCE_PRIORITY_COLORS: dict[str, str] = {
    GrievancePriority.urgent.value: "red",
    GrievancePriority.high.value: "orange",
    GrievancePriority.medium.value: "yellow",
}

RESOLVER_LABELS: dict[str, str] = {
    UserRole.manager.value: "Solved by Manager",
    UserRole.hr.value: "Solved by HR",
    UserRole.admin.value: "Solved by Admin",
}

EMPLOYMENT_STATUS_COLORS: dict[str, str] = {
    EmploymentStatus.active.value: "green",
    EmploymentStatus.on_leave.value: "yellow",
}

ATTENDANCE_STATUS_COLORS: dict[str, str] = {
    "Present": "green",
    "Absent": "red",
    "On Leave": "yellow",
    "Not Marked": "gray",
    "Complete": "emerald",
    "Late Entry": "orange",
}

LEAVE_BALANCE_COLORS: dict[str, str] = {
    LeaveType.casual.value: "#3b82f6",
    LeaveType.paid.value: "#10b981",
    LeaveType.sick.value: "#f59e0b",
}

PAID_LEAVE_POLICY: list[str] = [
    "Less than 6 months: 0 paid leaves",
    "6 months to less than 1 year: 2 paid leaves",
    "1 year or more: 4 paid leaves",
]

# ── Misc constants ──────────────────────────────────────────────────

ROW_DATE_FORMAT = "%d/%m/%Y"          # 18/10/2026
LONG_DATE_FORMAT = "%B %d, %Y"        # October 18, 2026
TODAY_FORMAT = "%A, %B %d, %Y"        # Sunday, October 18, 2026
DEFAULT_STATUS_COLOR = "yellow"
