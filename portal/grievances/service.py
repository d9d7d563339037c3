"""Grievances page — ticket list, submission and manager resolution."""

from __future__ import annotations

import logging
from typing import Optional

from portal.auth.schemas import SessionContext
from portal.common.constants import (
    DEFAULT_STATUS_COLOR,
    GRIEVANCE_PRIORITY_COLORS,
    GRIEVANCE_STATUS_COLORS,
    RESOLVER_LABELS,
    GrievanceStatus,
    UserRole,
)
from portal.common.exceptions import NotFoundException, UpstreamError
from portal.common.notices import ActionResult, NoticeLog, failure_message
from portal.common.payload import dig, format_long_date, ref_id
from portal.grievances.schemas import (
    GrievanceCreate,
    GrievanceDetailView,
    GrievanceFormOptions,
    GrievanceRow,
    GrievancesView,
)

logger = logging.getLogger(__name__)

_CLOSED_STATES = {GrievanceStatus.resolved.value, GrievanceStatus.closed.value}


def status_color(status: Optional[str]) -> str:
    return GRIEVANCE_STATUS_COLORS.get(status or "", DEFAULT_STATUS_COLOR)


def priority_color(priority: Optional[str]) -> str:
    return GRIEVANCE_PRIORITY_COLORS.get(priority or "", "gray")


def resolver_label(grievance: dict) -> Optional[str]:
    """Label like "Solved by HR" for resolved tickets whose resolver's role is known."""
    if grievance.get("status") != GrievanceStatus.resolved.value:
        return None
    role = dig(grievance, "resolution", "resolvedBy", "role")
    return RESOLVER_LABELS.get(role) if role else None


class GrievancesPage:
    def __init__(self, session: SessionContext) -> None:
        self.api = session.api
        self.user = session.user
        self.notices = NoticeLog(logger)
        self.grievances: list[dict] = []

    @property
    def role(self) -> UserRole:
        return self.user.role

    @property
    def can_submit(self) -> bool:
        return self.role in (UserRole.employee, UserRole.hr)

    def can_resolve(self, grievance: dict) -> bool:
        if self.role != UserRole.manager:
            return False
        return grievance.get("status") not in _CLOSED_STATES

    async def load(self) -> None:
        try:
            data = await self.api.get("/api/grievances")
        except UpstreamError:
            self.notices.error("Failed to load grievances")
            return
        self.grievances = data if isinstance(data, list) else []

    def find(self, grievance_id: str) -> dict:
        for grievance in self.grievances:
            if ref_id(grievance.get("_id")) == grievance_id:
                return grievance
        raise NotFoundException("Grievance", grievance_id)

    async def submit(self, body: GrievanceCreate) -> ActionResult:
        try:
            await self.api.post("/api/grievances", json=body.model_dump(mode="json"))
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to submit grievance"))
            return ActionResult.from_upstream(exc)

        self.notices.success("Grievance submitted successfully!")
        await self.load()
        return ActionResult.done()

    async def resolve(self, grievance_id: str, details: str) -> ActionResult:
        if not details.strip():
            self.notices.error("Please provide resolution details")
            return ActionResult.rejected(422)

        try:
            await self.api.put(
                f"/api/grievances/{grievance_id}/resolve",
                json={"resolutionDetails": details},
            )
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to resolve grievance"))
            return ActionResult.from_upstream(exc)

        self.notices.success("Grievance resolved successfully!")
        await self.load()
        return ActionResult.done()

    # ── View ─────────────────────────────────────────────────────────

    def _row(self, grievance: dict) -> GrievanceRow:
        status = grievance.get("status") or GrievanceStatus.open.value
        employee = grievance.get("employeeId")
        employee_name = None
        if self.role != UserRole.employee:
            employee_name = dig(employee, "personalInfo", "fullName") or dig(employee, "employeeId")
        return GrievanceRow(
            id=ref_id(grievance.get("_id")) or "",
            ticket_number=grievance.get("ticketNumber"),
            employee_name=employee_name,
            type=grievance.get("type"),
            category=grievance.get("category"),
            title=grievance.get("title"),
            description=grievance.get("description"),
            priority=grievance.get("priority"),
            priority_color=priority_color(grievance.get("priority")),
            status=status,
            status_color=status_color(status),
            resolved_by=resolver_label(grievance),
            resolution_details=dig(grievance, "resolution", "resolutionDetails"),
            resolved_at=format_long_date(dig(grievance, "resolution", "resolvedAt")),
            can_resolve=self.can_resolve(grievance),
        )

    def to_view(self) -> GrievancesView:
        return GrievancesView(
            role=self.role,
            can_submit=self.can_submit,
            show_employee_column=self.role != UserRole.employee,
            show_actions=self.role == UserRole.manager,
            form=GrievanceFormOptions() if self.can_submit else None,
            grievances=[self._row(g) for g in self.grievances],
            notices=self.notices.drain(),
        )

    def detail_view(self, grievance_id: str) -> GrievanceDetailView:
        grievance = self.find(grievance_id)
        return GrievanceDetailView(
            mode="resolve" if self.can_resolve(grievance) else "view",
            grievance=self._row(grievance),
            notices=self.notices.drain(),
        )
