"""Leaves router — leave lists by role, application form, approve/reject.

All endpoints require authentication. Approval authority is shown in the
view flags but enforced by the HRMS API.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from portal.auth.dependencies import get_session
from portal.auth.schemas import SessionContext
from portal.common.constants import LeaveViewMode
from portal.leave.schemas import LeaveApplicationForm, LeaveDecisionRequest, LeavesView
from portal.leave.service import LeavesPage

router = APIRouter(prefix="", tags=["leaves"])


# ── GET / ───────────────────────────────────────────────────────────

@router.get("/", response_model=LeavesView)
async def leaves_view(
    mode: Optional[LeaveViewMode] = Query(None, description="Managers: my-leaves or team-leaves"),
    employee_id: Optional[str] = Query(None, description="HR/Admin: employee to view"),
    session: SessionContext = Depends(get_session),
):
    """Leave list, balance and form defaults for the current view."""
    page = LeavesPage(session, mode=mode, selected_employee_id=employee_id)
    await page.load()
    return page.to_view()


# ── POST / ──────────────────────────────────────────────────────────

@router.post("/", response_model=LeavesView)
async def apply_leave(
    body: LeaveApplicationForm,
    response: Response,
    mode: Optional[LeaveViewMode] = Query(None),
    session: SessionContext = Depends(get_session),
):
    """Submit a leave application, then refetch leaves and balance."""
    page = LeavesPage(session, mode=mode)
    await page.load()
    result = await page.apply(body)
    result.mirror(response)
    return page.to_view()


# ── POST /{leave_id}/decision ───────────────────────────────────────

@router.post("/{leave_id}/decision", response_model=LeavesView)
async def decide_leave(
    leave_id: str,
    body: LeaveDecisionRequest,
    response: Response,
    mode: Optional[LeaveViewMode] = Query(None),
    employee_id: Optional[str] = Query(None),
    session: SessionContext = Depends(get_session),
):
    """Approve or reject a leave application, then refetch the list."""
    page = LeavesPage(session, mode=mode, selected_employee_id=employee_id)
    await page.load()
    result = await page.decide(leave_id, body.status)
    result.mirror(response)
    return page.to_view()
