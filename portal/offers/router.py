"""Offers router — public offer-letter view and candidate response.

No authentication: the candidate's email identifies them to the recruitment
API. Responses are rate limited per client address.
"""

from fastapi import APIRouter, Depends, Query, Request, Response

from portal.common.constants import OfferAction
from portal.common.rate_limit import limiter
from portal.config import settings
from portal.offers.schemas import OfferAcceptRequest, OfferRejectRequest, OfferView
from portal.offers.service import OfferResponsePage
from portal.upstream import ApiClient, get_api_client

router = APIRouter(prefix="", tags=["offers"])


# ── GET /{application_id}/{action} ───────────────────────────────────

@router.get("/{application_id}/{action}", response_model=OfferView)
async def offer_view(
    application_id: str,
    action: OfferAction,
    email: str = Query("", description="Email the offer was sent to"),
    api: ApiClient = Depends(get_api_client),
):
    """Offer details; asks for the email first when none was given."""
    page = OfferResponsePage(api, application_id, action, email)
    await page.load()
    return page.to_view()


# ── POST /{application_id}/accept ────────────────────────────────────

@router.post("/{application_id}/accept", response_model=OfferView)
@limiter.limit(settings.OFFER_RESPONSE_RATE_LIMIT)
async def accept_offer(
    request: Request,
    application_id: str,
    body: OfferAcceptRequest,
    response: Response,
    api: ApiClient = Depends(get_api_client),
):
    page = OfferResponsePage(api, application_id, OfferAction.accept, body.email)
    await page.load()
    result = await page.accept(body.email)
    result.mirror(response)
    return page.to_view()


# ── POST /{application_id}/reject ────────────────────────────────────

@router.post("/{application_id}/reject", response_model=OfferView)
@limiter.limit(settings.OFFER_RESPONSE_RATE_LIMIT)
async def reject_offer(
    request: Request,
    application_id: str,
    body: OfferRejectRequest,
    response: Response,
    api: ApiClient = Depends(get_api_client),
):
    """Decline the offer with a reason."""
    page = OfferResponsePage(api, application_id, OfferAction.reject, body.email)
    await page.load()
    result = await page.reject(body.email, body.reason)
    result.mirror(response)
    return page.to_view()
