"""Employees router — directory, HR-profile review, profile decisions, live search.

All endpoints require authentication. The websocket takes the bearer token
from the Authorization header or a ``token`` query parameter.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, WebSocket, WebSocketDisconnect
from pydantic import ValidationError
from starlette.status import WS_1008_POLICY_VIOLATION

from portal.auth.dependencies import get_current_user, get_session, require_role
from portal.auth.schemas import SessionContext
from portal.common.constants import EmployeesTab
from portal.common.debounce import Debouncer
from portal.common.exceptions import AppException
from portal.config import settings
from portal.employees.schemas import (
    EmployeeFilters,
    EmployeesView,
    LiveSearchMessage,
    ProfileDecisionRequest,
)
from portal.employees.service import HR_PROFILE_REVIEWERS, PROFILE_APPROVERS, EmployeesPage
from portal.upstream import get_api_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["employees"])


def _filters(
    search: str = Query("", description="Name, email or employee id"),
    department: str = Query(""),
    status: str = Query("", description="Employment status (profile status on the hr-profiles tab)"),
) -> EmployeeFilters:
    return EmployeeFilters(search=search, department=department, status=status)


# ── GET / ────────────────────────────────────────────────────────────

@router.get("/", response_model=EmployeesView)
async def employees_view(
    filters: EmployeeFilters = Depends(_filters),
    tab: Optional[EmployeesTab] = Query(None),
    session: SessionContext = Depends(get_session),
):
    """Employee directory with statistics; managers and admins also see HR profiles."""
    page = EmployeesPage(session, filters=filters, tab=tab)
    await page.load()
    return page.to_view()


# ── POST /hr-profiles/{profile_id}/decision ──────────────────────────

@router.post("/hr-profiles/{profile_id}/decision", response_model=EmployeesView)
async def decide_hr_profile(
    profile_id: str,
    body: ProfileDecisionRequest,
    response: Response,
    session: SessionContext = Depends(require_role(*HR_PROFILE_REVIEWERS)),
):
    page = EmployeesPage(session, tab=EmployeesTab.hr_profiles)
    await page.load()
    result = await page.decide_hr_profile(profile_id, body)
    result.mirror(response)
    return page.to_view()


# ── POST /{employee_id}/profile-decision ─────────────────────────────

@router.post("/{employee_id}/profile-decision", response_model=EmployeesView)
async def decide_profile(
    employee_id: str,
    body: ProfileDecisionRequest,
    response: Response,
    session: SessionContext = Depends(require_role(*PROFILE_APPROVERS)),
):
    """Approve or reject an employee's submitted profile."""
    page = EmployeesPage(session)
    await page.load()
    result = await page.decide_profile(employee_id, body)
    result.mirror(response)
    return page.to_view()


# ── WS /live ─────────────────────────────────────────────────────────

@router.websocket("/live")
async def live_search(websocket: WebSocket):
    """Push a refreshed directory view once the filter messages go quiet."""
    api = await get_api_client(websocket)
    try:
        user = await get_current_user(api)
    except AppException:
        await websocket.close(code=WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    page = EmployeesPage(SessionContext(user=user, api=api))

    async def push() -> None:
        await page.load()
        await websocket.send_json(page.to_view().model_dump(mode="json"))

    await push()
    debouncer = Debouncer(settings.search_debounce_seconds, push)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = LiveSearchMessage.model_validate_json(raw)
            except ValidationError as exc:
                logger.warning("Ignoring malformed live-search message: %s", exc.errors())
                continue
            page.filters = message.filters()
            debouncer.trigger()
    except WebSocketDisconnect:
        logger.info("Live search closed for %s", user.email)
    finally:
        debouncer.cancel()
