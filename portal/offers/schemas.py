"""Offer-response Pydantic v2 schemas — public accept/reject page."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from portal.common.constants import OfferAction
from portal.common.notices import Notice


class OfferAcceptRequest(BaseModel):
    email: str = ""


class OfferRejectRequest(BaseModel):
    email: str = ""
    reason: str = ""


class OfferDetails(BaseModel):
    candidate_name: Optional[str] = None
    job_title: Optional[str] = None
    department: str = "N/A"
    salary: Optional[float] = None
    salary_display: str = "N/A"
    joining_date: str = "N/A"
    work_location: Optional[str] = None
    probation_period: Optional[str] = None
    notice_period: Optional[str] = None
    additional_terms: Optional[str] = None
    expiry_date: Optional[str] = None
    expiry_notice: Optional[str] = None
    document_url: Optional[str] = None


class RedirectHint(BaseModel):
    to: str = "/"
    delay_ms: int


class OfferView(BaseModel):
    application_id: str
    action: OfferAction
    email: str = ""
    needs_email: bool = False
    found: bool = False
    is_expired: bool = False
    is_accepted: bool = False
    is_rejected: bool = False
    can_respond: bool = False
    offer: Optional[OfferDetails] = None
    status_message: Optional[str] = None
    redirect: Optional[RedirectHint] = None
    notices: List[Notice] = []
