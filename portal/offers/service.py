"""Offer-response page — a candidate accepts or rejects their offer letter.

The page is public: the candidate proves who they are with the email the
offer was sent to, and the recruitment API checks it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from portal.common.constants import OfferAction, OfferStatus
from portal.common.exceptions import UpstreamError
from portal.common.notices import ActionResult, NoticeLog, failure_message
from portal.common.payload import dig, format_long_date, is_past, to_float
from portal.config import settings
from portal.offers.schemas import OfferDetails, OfferView, RedirectHint
from portal.upstream import ApiClient

logger = logging.getLogger(__name__)

STATUS_MESSAGES = {
    OfferStatus.accepted.value: (
        "You have accepted this offer. Our HR team will contact you shortly for the next steps."
    ),
    OfferStatus.rejected.value: "You have rejected this offer. Thank you for your response.",
}


def format_inr(value: Any) -> Optional[str]:
    """Indian digit grouping: ``1250000`` → ``12,50,000``."""
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    integer, _, fraction = f"{abs(amount):.2f}".partition(".")
    fraction = fraction.rstrip("0")
    if len(integer) > 3:
        head, tail = integer[:-3], integer[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        integer = ",".join(groups + [tail])
    sign = "-" if amount < 0 else ""
    return f"{sign}{integer}.{fraction}" if fraction else f"{sign}{integer}"


def _text(value: Any) -> Optional[str]:
    return str(value) if value not in (None, "") else None


class OfferResponsePage:
    def __init__(
        self,
        api: ApiClient,
        application_id: str,
        action: OfferAction,
        email: str = "",
    ) -> None:
        self.api = api
        self.application_id = application_id
        self.action = action
        self.email = email.strip()
        self.notices = NoticeLog(logger)
        self.application: Optional[dict] = None
        self.redirect: Optional[RedirectHint] = None

    async def load(self) -> None:
        if not self.email:
            return
        try:
            data = await self.api.get(f"/api/recruitment/applications/{self.application_id}")
        except UpstreamError as exc:
            logger.error("Error fetching application %s: %s", self.application_id, exc.upstream_status)
            self.notices.error("Failed to load offer details")
            return
        self.application = data if isinstance(data, dict) else None

    # ── Derived state ────────────────────────────────────────────────

    @property
    def offer(self) -> Optional[dict]:
        offer = dig(self.application, "offerLetter")
        return offer if isinstance(offer, dict) else None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return is_past(dig(self.offer, "expiryDate"), now)

    @property
    def is_accepted(self) -> bool:
        return dig(self.offer, "status") == OfferStatus.accepted.value

    @property
    def is_rejected(self) -> bool:
        return dig(self.offer, "status") == OfferStatus.rejected.value

    def can_respond(self, now: Optional[datetime] = None) -> bool:
        return (
            self.offer is not None
            and not self.is_accepted
            and not self.is_rejected
            and not self.is_expired(now)
        )

    # ── Actions ──────────────────────────────────────────────────────

    def _check_respondable(self, email: str) -> Optional[ActionResult]:
        if not email.strip():
            self.notices.error("Email is required")
            return ActionResult.rejected(422)
        if self.offer is None:
            self.notices.error("The offer letter you're looking for doesn't exist or has been removed.")
            return ActionResult.rejected(404)
        if self.is_expired():
            self.notices.error("This offer has expired")
            return ActionResult.rejected(409)
        if self.is_accepted or self.is_rejected:
            self.notices.error("You have already responded to this offer")
            return ActionResult.rejected(409)
        return None

    async def accept(self, email: str) -> ActionResult:
        refused = self._check_respondable(email)
        if refused is not None:
            return refused

        try:
            await self.api.post(
                f"/api/recruitment/applications/{self.application_id}/accept-offer",
                json={"candidateEmail": email.strip()},
            )
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to accept offer"))
            return ActionResult.from_upstream(exc)

        self.notices.success("Offer accepted successfully! We look forward to working with you.")
        self.redirect = RedirectHint(delay_ms=settings.OFFER_REDIRECT_DELAY_MS)
        await self.load()
        return ActionResult.done()

    async def reject(self, email: str, reason: str) -> ActionResult:
        refused = self._check_respondable(email)
        if refused is not None:
            return refused
        if not reason.strip():
            self.notices.error("Please provide a reason for rejecting the offer")
            return ActionResult.rejected(422)

        try:
            await self.api.post(
                f"/api/recruitment/applications/{self.application_id}/reject-offer",
                json={"candidateEmail": email.strip(), "reason": reason},
            )
        except UpstreamError as exc:
            self.notices.error(failure_message(exc, "Failed to reject offer"))
            return ActionResult.from_upstream(exc)

        self.notices.success("Offer rejection recorded. Thank you for your response.")
        self.redirect = RedirectHint(delay_ms=settings.OFFER_REDIRECT_DELAY_MS)
        await self.load()
        return ActionResult.done()

    # ── View ─────────────────────────────────────────────────────────

    def _details(self, offer: dict, expired: bool) -> OfferDetails:
        expiry = format_long_date(offer.get("expiryDate"))
        expiry_notice = None
        if expiry:
            expiry_notice = f"This offer {'expired on' if expired else 'expires on'} {expiry}."
        document = offer.get("documentUrl")
        salary = format_inr(offer.get("salary"))
        return OfferDetails(
            candidate_name=offer.get("candidateName"),
            job_title=offer.get("jobTitle"),
            department=offer.get("department") or "N/A",
            salary=to_float(offer.get("salary")) if salary else None,
            salary_display=f"₹{salary}" if salary else "N/A",
            joining_date=format_long_date(offer.get("joiningDate")) or "N/A",
            work_location=offer.get("workLocation") or None,
            probation_period=_text(offer.get("probationPeriod")),
            notice_period=_text(offer.get("noticePeriod")),
            additional_terms=offer.get("additionalTerms") or None,
            expiry_date=expiry,
            expiry_notice=expiry_notice,
            document_url=f"{settings.API_BASE_URL.rstrip('/')}{document}" if document else None,
        )

    def to_view(self, now: Optional[datetime] = None) -> OfferView:
        now = now or datetime.now(timezone.utc)
        offer = self.offer
        expired = self.is_expired(now)
        status = dig(offer, "status")
        return OfferView(
            application_id=self.application_id,
            action=self.action,
            email=self.email,
            needs_email=not self.email,
            found=offer is not None,
            is_expired=expired,
            is_accepted=self.is_accepted,
            is_rejected=self.is_rejected,
            can_respond=self.can_respond(now),
            offer=self._details(offer, expired) if offer is not None else None,
            status_message=STATUS_MESSAGES.get(status) if status else None,
            redirect=self.redirect,
            notices=self.notices.drain(),
        )
