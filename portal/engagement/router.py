"""Engagement router — announcements, polls, poll drafts and voting.

All endpoints require authentication; creating announcements and polls is
limited to managers, HR and admins.
"""

from fastapi import APIRouter, Depends, Response

from portal.auth.dependencies import get_session, require_role
from portal.auth.schemas import SessionContext
from portal.common.constants import PRIVILEGED_ROLES
from portal.common.notices import NoticeLog
from portal.engagement.schemas import (
    AnnouncementCreate,
    EngagementView,
    PollDraft,
    PollDraftEdit,
    PollDraftView,
    VoteRequest,
)
from portal.engagement.service import EngagementPage, edit_poll_draft, logger

router = APIRouter(prefix="", tags=["engagement"])


# ── GET / ────────────────────────────────────────────────────────────

@router.get("/", response_model=EngagementView)
async def engagement_view(
    session: SessionContext = Depends(get_session),
):
    """Announcements and polls, with the caller's voting state."""
    page = EngagementPage(session)
    await page.load()
    return page.to_view()


# ── POST /announcements ──────────────────────────────────────────────

@router.post("/announcements", response_model=EngagementView)
async def create_announcement(
    body: AnnouncementCreate,
    response: Response,
    session: SessionContext = Depends(require_role(*PRIVILEGED_ROLES)),
):
    page = EngagementPage(session)
    await page.load()
    result = await page.create_announcement(body)
    result.mirror(response)
    return page.to_view()


# ── POST /polls ──────────────────────────────────────────────────────

@router.post("/polls", response_model=EngagementView)
async def create_poll(
    body: PollDraft,
    response: Response,
    session: SessionContext = Depends(require_role(*PRIVILEGED_ROLES)),
):
    """Create a poll from a draft with at least two non-empty options."""
    page = EngagementPage(session)
    await page.load()
    result = await page.create_poll(body)
    result.mirror(response)
    return page.to_view()


# ── POST /polls/draft ────────────────────────────────────────────────

@router.post("/polls/draft", response_model=PollDraftView)
async def edit_draft(
    body: PollDraftEdit,
    response: Response,
    session: SessionContext = Depends(require_role(*PRIVILEGED_ROLES)),
):
    """Add, remove or update an option of a poll draft."""
    notices = NoticeLog(logger)
    draft = edit_poll_draft(body, notices)
    if notices.items:
        response.status_code = 422
    return PollDraftView(draft=draft, notices=notices.drain())


# ── POST /polls/{poll_id}/vote ───────────────────────────────────────

@router.post("/polls/{poll_id}/vote", response_model=EngagementView)
async def vote(
    poll_id: str,
    body: VoteRequest,
    response: Response,
    session: SessionContext = Depends(get_session),
):
    """Cast the caller's single vote on a poll."""
    page = EngagementPage(session)
    await page.load()
    result = await page.vote(poll_id, body.option_index)
    result.mirror(response)
    return page.to_view()
