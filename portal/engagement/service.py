"""Engagement page — announcements and polls, creation and single-shot voting."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from portal.auth.schemas import SessionContext
from portal.common.constants import PRIVILEGED_ROLES
from portal.common.exceptions import UpstreamError, ValidationException
from portal.common.notices import ActionResult, NoticeLog, failure_message
from portal.common.payload import (
    dig,
    format_long_date,
    format_row_date,
    is_past,
    percentage,
    ref_id,
)
from portal.engagement.schemas import (
    MIN_POLL_OPTIONS,
    AnnouncementCreate,
    AnnouncementOut,
    EngagementView,
    PollDraft,
    PollDraftEdit,
    PollOptionOut,
    PollOut,
)

logger = logging.getLogger(__name__)


# ── Poll arithmetic ─────────────────────────────────────────────────

def voter_ids(option: dict) -> list[Optional[str]]:
    return [ref_id(vote) for vote in option.get("votes") or []]


def user_vote_index(poll: dict, user_id: Optional[str]) -> int:
    """Index of the option *user_id* voted for, -1 when none (or no user)."""
    if not user_id:
        return -1
    for index, option in enumerate(poll.get("options") or []):
        if user_id in voter_ids(option):
            return index
    return -1


def total_votes(poll: dict) -> int:
    return sum(len(option.get("votes") or []) for option in poll.get("options") or [])


def poll_is_expired(poll: dict, now: Optional[datetime] = None) -> bool:
    return is_past(poll.get("deadline"), now)


def build_poll(poll: dict, user_id: Optional[str], now: Optional[datetime] = None) -> PollOut:
    voted_index = user_vote_index(poll, user_id)
    has_voted = voted_index != -1
    expired = poll_is_expired(poll, now)
    total = total_votes(poll)

    options = []
    for index, option in enumerate(poll.get("options") or []):
        count = len(option.get("votes") or [])
        pct = percentage(count, total)
        if has_voted:
            label = f"{count} votes ({pct:.1f}%)"
        elif not expired:
            label = "Click to vote"
        else:
            label = None
        options.append(PollOptionOut(
            index=index,
            text=option.get("text") or "",
            votes=count,
            percentage=pct,
            is_user_vote=index == voted_index,
            label=label,
        ))

    return PollOut(
        id=ref_id(poll.get("_id")) or "",
        question=poll.get("question") or "",
        deadline=format_long_date(poll.get("deadline")),
        is_expired=expired,
        has_voted=has_voted,
        user_voted_index=voted_index,
        can_vote=not expired and not has_voted and bool(user_id),
        total_votes=total,
        options=options,
    )


def build_announcement(announcement: dict) -> AnnouncementOut:
    return AnnouncementOut(
        id=ref_id(announcement.get("_id")) or "",
        title=announcement.get("title") or "",
        description=announcement.get("description") or "",
        visibility=announcement.get("visibility"),
        is_pinned=bool(announcement.get("isPinned")),
        created_on=format_row_date(announcement.get("createdAt")),
        expiry_date=format_long_date(announcement.get("expiryDate")),
        created_by=dig(announcement, "createdBy", "email"),
    )


# ── Draft editing ───────────────────────────────────────────────────

def edit_poll_draft(edit: PollDraftEdit, notices: NoticeLog) -> PollDraft:
    """Apply one add/remove/update to a copy of the draft.

    A removal that would leave fewer than two options is refused with a
    notice and the draft comes back unchanged.
    """
    draft = edit.draft.model_copy(deep=True)
    if edit.op == "add":
        draft.add_option()
        return draft

    if edit.index is None or edit.index >= len(draft.options):
        raise ValidationException({"index": [f"No option at index {edit.index}."]})

    if edit.op == "remove":
        if not draft.can_remove_option():
            notices.error(f"Poll must have at least {MIN_POLL_OPTIONS} options")
            return draft
        draft.remove_option(edit.index)
    else:
        draft.update_option(edit.index, edit.value)
    return draft


# ── Page ────────────────────────────────────────────────────────────

class EngagementPage:
    def __init__(self, session: SessionContext) -> None:
        self.api = session.api
        self.user = session.user
        self.notices = NoticeLog(logger)
        self.announcements: list[dict] = []
        self.polls: list[dict] = []

    @property
    def can_create(self) -> bool:
        return self.user.role in PRIVILEGED_ROLES

    async def load(self) -> None:
        try:
            announcements, polls = await asyncio.gather(
                self.api.get("/api/engagement/announcements"),
                self.api.get("/api/engagement/polls"),
            )
        except UpstreamError as exc:
            logger.error("Error fetching engagement data: %s", exc.detail)
            return
        self.announcements = announcements if isinstance(announcements, list) else []
        self.polls = polls if isinstance(polls, list) else []

    def find_poll(self, poll_id: str) -> Optional[dict]:
        for poll in self.polls:
            if ref_id(poll.get("_id")) == poll_id:
                return poll
        return None

    async def create_announcement(self, body: AnnouncementCreate) -> ActionResult:
        if not body.title or not body.description:
            self.notices.error("Please fill in title and description")
            return ActionResult.rejected(422)

        try:
            await self.api.post("/api/engagement/announcements", json=body.to_payload())
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to create announcement"))
            return ActionResult.from_upstream(exc)

        self.notices.success("Announcement created successfully!")
        await self.load()
        return ActionResult.done()

    async def create_poll(self, draft: PollDraft) -> ActionResult:
        if not draft.question:
            self.notices.error("Please enter a question")
            return ActionResult.rejected(422)
        if len(draft.valid_options()) < MIN_POLL_OPTIONS:
            self.notices.error(f"Please add at least {MIN_POLL_OPTIONS} poll options")
            return ActionResult.rejected(422)

        try:
            await self.api.post("/api/engagement/polls", json=draft.to_payload())
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to create poll"))
            return ActionResult.from_upstream(exc)

        self.notices.success("Poll created successfully!")
        await self.load()
        return ActionResult.done()

    async def vote(self, poll_id: str, option_index: int) -> ActionResult:
        poll = self.find_poll(poll_id)
        if poll is None:
            self.notices.error("Poll not found")
            return ActionResult.rejected(404)
        if option_index >= len(poll.get("options") or []):
            self.notices.error("Invalid poll option")
            return ActionResult.rejected(422)
        if poll_is_expired(poll):
            self.notices.error("This poll has expired")
            return ActionResult.rejected(409)
        if user_vote_index(poll, self.user.id) != -1:
            self.notices.error("You have already voted on this poll")
            return ActionResult.rejected(409)

        try:
            await self.api.post(
                f"/api/engagement/polls/{poll_id}/vote",
                json={"optionIndex": option_index},
            )
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to submit vote"))
            return ActionResult.from_upstream(exc)

        self.notices.success("Vote submitted successfully!")
        await self.load()
        return ActionResult.done()

    def to_view(self) -> EngagementView:
        now = datetime.now(timezone.utc)
        return EngagementView(
            can_create=self.can_create,
            announcements=[build_announcement(a) for a in self.announcements],
            polls=[build_poll(p, self.user.id, now) for p in self.polls],
            notices=self.notices.drain(),
        )
