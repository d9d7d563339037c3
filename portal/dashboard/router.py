"""Dashboard router — role dashboards and the HR-profile approval queue."""

from fastapi import APIRouter, Depends, Response

from portal.auth.dependencies import get_session, require_role
from portal.auth.schemas import SessionContext
from portal.dashboard.schemas import DashboardView
from portal.dashboard.service import DashboardPage
from portal.employees.schemas import ProfileDecisionRequest
from portal.employees.service import HR_PROFILE_REVIEWERS

router = APIRouter(prefix="", tags=["dashboard"])


@router.get("/", response_model=DashboardView)
async def dashboard_view(
    session: SessionContext = Depends(get_session),
):
    """Greeting, announcement ticker and the sub-view for the caller's role."""
    page = DashboardPage(session)
    await page.load()
    return page.to_view()


@router.post("/hr-profiles/{profile_id}/decision", response_model=DashboardView)
async def decide_hr_profile(
    profile_id: str,
    body: ProfileDecisionRequest,
    response: Response,
    session: SessionContext = Depends(require_role(*HR_PROFILE_REVIEWERS)),
):
    page = DashboardPage(session)
    await page.load()
    result = await page.decide_hr_profile(profile_id, body)
    result.mirror(response)
    return page.to_view()
