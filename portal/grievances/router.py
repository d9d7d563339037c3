"""Grievances router — list, submit, detail and resolve tickets.

All endpoints require authentication.
"""

from fastapi import APIRouter, Depends, Response

from portal.auth.dependencies import get_session
from portal.auth.schemas import SessionContext
from portal.grievances.schemas import (
    GrievanceCreate,
    GrievanceDetailView,
    GrievanceResolve,
    GrievancesView,
)
from portal.grievances.service import GrievancesPage

router = APIRouter(prefix="", tags=["grievances"])


# ── GET / ────────────────────────────────────────────────────────────

@router.get("/", response_model=GrievancesView)
async def grievances_view(
    session: SessionContext = Depends(get_session),
):
    """Tickets visible to the current user."""
    page = GrievancesPage(session)
    await page.load()
    return page.to_view()


# ── POST / ───────────────────────────────────────────────────────────

@router.post("/", response_model=GrievancesView)
async def submit_grievance(
    body: GrievanceCreate,
    response: Response,
    session: SessionContext = Depends(get_session),
):
    """Raise a new ticket."""
    page = GrievancesPage(session)
    await page.load()
    result = await page.submit(body)
    result.mirror(response)
    return page.to_view()


# ── GET /{grievance_id} ──────────────────────────────────────────────

@router.get("/{grievance_id}", response_model=GrievanceDetailView)
async def grievance_detail(
    grievance_id: str,
    session: SessionContext = Depends(get_session),
):
    """One ticket, in resolve or read-only mode."""
    page = GrievancesPage(session)
    await page.load()
    return page.detail_view(grievance_id)


# ── POST /{grievance_id}/resolve ─────────────────────────────────────

@router.post("/{grievance_id}/resolve", response_model=GrievancesView)
async def resolve_grievance(
    grievance_id: str,
    body: GrievanceResolve,
    response: Response,
    session: SessionContext = Depends(get_session),
):
    """Resolve an open ticket with resolution details."""
    page = GrievancesPage(session)
    await page.load()
    result = await page.resolve(grievance_id, body.resolution_details)
    result.mirror(response)
    return page.to_view()
