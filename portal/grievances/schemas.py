"""Grievance Pydantic v2 schemas — ticket form, resolution and page view."""

from typing import List, Optional

from pydantic import BaseModel, Field

from portal.common.constants import (
    GrievanceCategory,
    GrievancePriority,
    GrievanceType,
    UserRole,
)
from portal.common.notices import Notice


# ═════════════════════════════════════════════════════════════════════
# Requests
# ═════════════════════════════════════════════════════════════════════


class GrievanceCreate(BaseModel):
    type: GrievanceType = GrievanceType.query
    category: GrievanceCategory = GrievanceCategory.hr_issues
    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(..., min_length=1, max_length=5000)
    priority: GrievancePriority = GrievancePriority.medium


class GrievanceDraft(BaseModel):
    """Blank submission form."""

    type: GrievanceType = GrievanceType.query
    category: GrievanceCategory = GrievanceCategory.hr_issues
    title: str = ""
    description: str = ""
    priority: GrievancePriority = GrievancePriority.medium


class GrievanceResolve(BaseModel):
    # Blank text is reported as a notice by the page, not as a 422 problem.
    resolution_details: str = ""


# ═════════════════════════════════════════════════════════════════════
# View
# ═════════════════════════════════════════════════════════════════════


class GrievanceRow(BaseModel):
    id: str
    ticket_number: Optional[str] = None
    employee_name: Optional[str] = None
    type: Optional[str] = None
    category: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[str] = None
    priority_color: str
    status: str
    status_color: str
    resolved_by: Optional[str] = None
    resolution_details: Optional[str] = None
    resolved_at: Optional[str] = None
    can_resolve: bool = False


class GrievanceFormOptions(BaseModel):
    types: List[GrievanceType] = list(GrievanceType)
    categories: List[GrievanceCategory] = list(GrievanceCategory)
    priorities: List[GrievancePriority] = list(GrievancePriority)
    defaults: GrievanceDraft = Field(default_factory=GrievanceDraft)


class GrievancesView(BaseModel):
    role: UserRole
    can_submit: bool = False
    show_employee_column: bool = True
    show_actions: bool = False
    form: Optional[GrievanceFormOptions] = None
    grievances: List[GrievanceRow] = []
    empty_message: str = "No grievances found"
    notices: List[Notice] = []


class GrievanceDetailView(BaseModel):
    """Resolve dialog for open tickets, read-only details otherwise."""

    mode: str
    grievance: GrievanceRow
    notices: List[Notice] = []
