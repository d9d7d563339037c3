"""Offer-response page — public view, accept/reject rules, formatting."""

from __future__ import annotations

from datetime import datetime, timezone

from portal.common.constants import OfferAction
from portal.config import settings
from portal.offers.service import OfferResponsePage, format_inr
from portal.upstream import ApiClient

APP_PATH = "/api/recruitment/applications/app-1"

NOW = datetime(2026, 10, 18, 9, 0, tzinfo=timezone.utc)


def _application(**offer):
    letter = {
        "status": "Sent",
        "candidateName": "Nisha Kumar",
        "jobTitle": "Backend Engineer",
        "department": "Engineering",
        "salary": 1250000,
        "joiningDate": "2026-11-02T00:00:00.000Z",
        "probationPeriod": 6,
        "expiryDate": "2999-01-01T00:00:00.000Z",
        "documentUrl": "/uploads/offers/app-1.pdf",
    }
    letter.update(offer)
    return {"_id": "app-1", "offerLetter": letter}


class TestFormatting:
    def test_indian_grouping(self):
        assert format_inr(1250000) == "12,50,000"
        assert format_inr(999) == "999"
        assert format_inr(123456789) == "12,34,56,789"
        assert format_inr("75000.5") == "75,000.5"
        assert format_inr("n/a") is None


async def test_view_without_email_asks_for_it(client, backend):
    resp = await client.get("/api/v1/offers/app-1/accept")

    view = resp.json()
    assert resp.status_code == 200
    assert view["needs_email"]
    assert not view["found"]
    assert backend.calls("GET", APP_PATH) == []


async def test_view_renders_offer_details(client, backend, monkeypatch):
    monkeypatch.setattr(settings, "API_BASE_URL", "https://hrms.example.com/")
    backend.on("GET", APP_PATH, _application())

    resp = await client.get("/api/v1/offers/app-1/reject", params={"email": "nisha@example.com"})

    view = resp.json()
    assert view["found"] and view["can_respond"]
    assert view["action"] == "reject"
    offer = view["offer"]
    assert offer["salary_display"] == "₹12,50,000"
    assert offer["joining_date"] == "November 02, 2026"
    assert offer["probation_period"] == "6"
    assert offer["expiry_notice"] == "This offer expires on January 01, 2999."
    assert offer["document_url"] == "https://hrms.example.com/uploads/offers/app-1.pdf"


async def test_application_without_offer_letter(client, backend):
    backend.on("GET", APP_PATH, {"_id": "app-1"})

    resp = await client.get("/api/v1/offers/app-1/accept", params={"email": "nisha@example.com"})

    view = resp.json()
    assert not view["found"]
    assert view["offer"] is None
    assert not view["can_respond"]


async def test_load_failure_adds_notice(client, backend):
    backend.on("GET", APP_PATH, {"message": "boom"}, status=500)

    resp = await client.get("/api/v1/offers/app-1/accept", params={"email": "nisha@example.com"})

    assert resp.json()["notices"][0]["message"] == "Failed to load offer details"


async def test_accept_posts_email_and_sets_redirect(client, backend):
    backend.on("GET", APP_PATH, _application())
    backend.on("POST", f"{APP_PATH}/accept-offer", {"message": "ok"})

    resp = await client.post("/api/v1/offers/app-1/accept", json={"email": " nisha@example.com "})

    assert resp.status_code == 200
    view = resp.json()
    assert view["notices"][0]["message"] == (
        "Offer accepted successfully! We look forward to working with you."
    )
    assert view["redirect"] == {"to": "/", "delay_ms": 3000}
    assert backend.last_json("POST", f"{APP_PATH}/accept-offer") == {"candidateEmail": "nisha@example.com"}
    assert len(backend.calls("GET", APP_PATH)) == 2


async def test_expired_offer_cannot_be_accepted(client, backend):
    backend.on("GET", APP_PATH, _application(expiryDate="2020-01-01T00:00:00.000Z"))

    view_resp = await client.get("/api/v1/offers/app-1/accept", params={"email": "nisha@example.com"})
    resp = await client.post("/api/v1/offers/app-1/accept", json={"email": "nisha@example.com"})

    view = view_resp.json()
    assert view["is_expired"] and not view["can_respond"]
    assert view["offer"]["expiry_notice"] == "This offer expired on January 01, 2020."
    assert resp.status_code == 409
    assert resp.json()["notices"][0]["message"] == "This offer has expired"
    assert backend.calls("POST") == []


async def test_already_accepted_shows_status_message(client, backend):
    backend.on("GET", APP_PATH, _application(status="Accepted"))

    resp = await client.post("/api/v1/offers/app-1/reject", json={"email": "n@example.com", "reason": "x"})

    assert resp.status_code == 409
    view = resp.json()
    assert view["is_accepted"]
    assert view["status_message"].startswith("You have accepted this offer.")


async def test_reject_requires_reason(client, backend):
    backend.on("GET", APP_PATH, _application())

    resp = await client.post("/api/v1/offers/app-1/reject", json={"email": "nisha@example.com", "reason": "  "})

    assert resp.status_code == 422
    assert resp.json()["notices"][0]["message"] == "Please provide a reason for rejecting the offer"
    assert backend.calls("POST") == []


async def test_reject_failure_uses_backend_message(client, backend):
    backend.on("GET", APP_PATH, _application())
    backend.on("POST", f"{APP_PATH}/reject-offer", {"message": "Email does not match"}, status=403)

    resp = await client.post(
        "/api/v1/offers/app-1/reject",
        json={"email": "other@example.com", "reason": "Relocating"},
    )

    assert resp.status_code == 403
    assert resp.json()["notices"][0]["message"] == "Email does not match"
    assert backend.last_json("POST", f"{APP_PATH}/reject-offer") == {
        "candidateEmail": "other@example.com",
        "reason": "Relocating",
    }


async def test_accept_without_email_is_refused(http, backend):
    page = OfferResponsePage(ApiClient(http), "app-1", OfferAction.accept)
    await page.load()

    result = await page.accept("")

    assert result.status_code == 422
    assert page.to_view(NOW).notices[0].message == "Email is required"
    assert backend.requests == []


async def test_responses_are_rate_limited(client, backend):
    for _ in range(10):
        resp = await client.post("/api/v1/offers/app-1/accept", json={"email": ""})
        assert resp.status_code == 422

    resp = await client.post("/api/v1/offers/app-1/accept", json={"email": ""})

    assert resp.status_code == 429
