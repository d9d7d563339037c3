"""Engagement Pydantic v2 schemas — announcements, polls, poll drafts."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from portal.common.constants import Visibility
from portal.common.notices import Notice
from portal.common.payload import iso_midnight

MIN_POLL_OPTIONS = 2


# ═════════════════════════════════════════════════════════════════════
# Announcements
# ═════════════════════════════════════════════════════════════════════


class AnnouncementCreate(BaseModel):
    # Required-ness of title/description is checked by the page so the
    # caller gets a notice instead of a 422 problem.
    title: str = ""
    description: str = ""
    visibility: Visibility = Visibility.all
    departments: List[str] = []
    expiry_date: Optional[date] = None
    is_pinned: bool = False

    def to_payload(self) -> dict:
        expiry = iso_midnight(self.expiry_date) if self.expiry_date else None
        return {
            "title": self.title,
            "description": self.description,
            "visibility": self.visibility.value,
            "departments": self.departments if self.visibility == Visibility.department else [],
            "expiryDate": expiry,
            "isPinned": self.is_pinned,
        }


class AnnouncementOut(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    visibility: Optional[str] = None
    is_pinned: bool = False
    created_on: Optional[str] = None
    expiry_date: Optional[str] = None
    created_by: Optional[str] = None


# ═════════════════════════════════════════════════════════════════════
# Polls
# ═════════════════════════════════════════════════════════════════════


class PollDraft(BaseModel):
    """Poll being composed; starts with two blank options."""

    question: str = ""
    options: List[str] = Field(default_factory=lambda: ["", ""])
    deadline: Optional[datetime] = None
    visibility: Visibility = Visibility.all
    departments: List[str] = []

    def valid_options(self) -> list[str]:
        return [opt.strip() for opt in self.options if opt.strip()]

    def add_option(self) -> None:
        self.options = [*self.options, ""]

    def can_remove_option(self) -> bool:
        return len(self.options) - 1 >= MIN_POLL_OPTIONS

    def remove_option(self, index: int) -> None:
        self.options = [opt for i, opt in enumerate(self.options) if i != index]

    def update_option(self, index: int, value: str) -> None:
        options = list(self.options)
        options[index] = value
        self.options = options

    def to_payload(self) -> dict:
        deadline = None
        if self.deadline is not None:
            moment = self.deadline
            if moment.tzinfo is None:
                moment = moment.replace(tzinfo=timezone.utc)
            deadline = moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
        return {
            "question": self.question,
            "options": [{"text": text, "votes": []} for text in self.valid_options()],
            "deadline": deadline,
            "visibility": self.visibility.value,
            "departments": self.departments if self.visibility == Visibility.department else [],
            "isActive": True,
        }


class PollDraftEdit(BaseModel):
    draft: PollDraft = Field(default_factory=PollDraft)
    op: Literal["add", "remove", "update"]
    index: Optional[int] = Field(None, ge=0)
    value: str = ""


class PollDraftView(BaseModel):
    draft: PollDraft
    notices: List[Notice] = []


class VoteRequest(BaseModel):
    option_index: int = Field(..., ge=0)


class PollOptionOut(BaseModel):
    index: int
    text: str = ""
    votes: int = 0
    percentage: float = 0
    is_user_vote: bool = False
    label: Optional[str] = None


class PollOut(BaseModel):
    id: str
    question: str = ""
    deadline: Optional[str] = None
    is_expired: bool = False
    has_voted: bool = False
    user_voted_index: int = -1
    can_vote: bool = False
    total_votes: int = 0
    options: List[PollOptionOut] = []


# ═════════════════════════════════════════════════════════════════════
# Page
# ═════════════════════════════════════════════════════════════════════


class EngagementView(BaseModel):
    can_create: bool = False
    announcements: List[AnnouncementOut] = []
    polls: List[PollOut] = []
    notices: List[Notice] = []
