"""Employees Pydantic v2 schemas — directory filters, rows, HR profiles."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel

from portal.common.constants import Decision, EmployeesTab, EmploymentStatus, UserRole
from portal.common.notices import Notice


# ═════════════════════════════════════════════════════════════════════
# Requests
# ═════════════════════════════════════════════════════════════════════


class EmployeeFilters(BaseModel):
    search: str = ""
    department: str = ""
    status: str = ""

    @property
    def any_set(self) -> bool:
        return bool(self.search or self.department or self.status)

    def to_params(self) -> dict[str, str]:
        """Only the filters that hold a value; the API treats absent as "all"."""
        return {key: value for key, value in self.model_dump().items() if value}


class LiveSearchMessage(EmployeeFilters):
    """One message on the live-search socket: the current filters, or a reset."""

    clear: bool = False

    def filters(self) -> EmployeeFilters:
        if self.clear:
            return EmployeeFilters()
        return EmployeeFilters(search=self.search, department=self.department, status=self.status)


class ProfileDecisionRequest(BaseModel):
    status: Decision
    comments: str = ""


# ═════════════════════════════════════════════════════════════════════
# View
# ═════════════════════════════════════════════════════════════════════


class EmployeeStats(BaseModel):
    total: int = 0
    active: int = 0
    inactive: int = 0
    departments: Dict[str, int] = {}


class EmployeeRow(BaseModel):
    id: str
    employee_id: Optional[str] = None
    full_name: str = "N/A"
    initial: str = "E"
    email: str = "N/A"
    department: str = "N/A"
    designation: str = "N/A"
    status: str = EmploymentStatus.active.value
    status_color: str = "green"
    profile_status: Optional[str] = None
    profile_url: str


class HRProfileRow(BaseModel):
    id: str
    hr_id: Optional[str] = None
    full_name: str = "N/A"
    email: str = "N/A"
    department: Optional[str] = None
    designation: Optional[str] = None
    profile_status: Optional[str] = None
    submitted_on: Optional[str] = None
    can_decide: bool = False


class EmployeesView(BaseModel):
    role: UserRole
    tab: EmployeesTab = EmployeesTab.employees
    subtitle: str
    tabs: List[EmployeesTab] = [EmployeesTab.employees]
    can_decide_profiles: bool = False
    filters: EmployeeFilters
    active_filter_count: int = 0
    stats: EmployeeStats
    departments: List[str] = []
    status_options: List[str] = [s.value for s in EmploymentStatus]
    employees: List[EmployeeRow] = []
    results_count: int = 0
    empty_message: Optional[str] = None
    hr_profiles: List[HRProfileRow] = []
    notices: List[Notice] = []
