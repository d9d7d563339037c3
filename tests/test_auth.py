"""Session resolution, role checks and problem-detail errors."""

from __future__ import annotations

from tests.conftest import auth_headers


async def test_health_is_public(client):
    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


async def test_missing_token_is_401(client, backend):
    resp = await client.get("/api/v1/grievances/")
    assert resp.status_code == 401
    assert backend.requests == []


async def test_rejected_token_is_401(client):
    resp = await client.get(
        "/api/v1/grievances/",
        headers={"Authorization": "Bearer stale-token"},
    )
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Session invalid or expired."
    assert resp.json()["type"].endswith("/unauthorized")
    assert resp.headers["WWW-Authenticate"] == "Bearer"


async def test_session_lookup_failure_is_upstream_problem(client, backend):
    backend.on("GET", "/api/auth/me", {"message": "Server error"}, status=500)

    resp = await client.get("/api/v1/grievances/", headers=auth_headers("employee"))

    assert resp.status_code == 502
    assert resp.headers["content-type"].startswith("application/problem+json")
    body = resp.json()
    assert body["type"].endswith("/upstream-error")
    assert body["detail"] == "Server error"


async def test_token_is_forwarded_upstream(client, backend):
    backend.on("GET", "/api/grievances", [])

    await client.get("/api/v1/grievances/", headers=auth_headers("manager"))

    call = backend.calls("GET", "/api/grievances")[0]
    assert call.headers["Authorization"] == "Bearer test-token-manager"


async def test_role_gate_returns_forbidden_problem(client, backend):
    resp = await client.post(
        "/api/v1/engagement/announcements",
        json={"title": "Diwali party", "description": "Friday 5pm"},
        headers=auth_headers("employee"),
    )

    assert resp.status_code == 403
    assert resp.json()["type"].endswith("/forbidden")
    assert backend.calls("POST", "/api/engagement/announcements") == []


async def test_request_validation_is_problem_detail(client, backend):
    backend.on("GET", "/api/leaves", [])
    backend.on("GET", "/api/leaves/balance", {"balances": {"PL": 2}})

    resp = await client.post(
        "/api/v1/leaves/",
        json={"leave_type": "PL", "start_date": "2026-10-20", "end_date": "2026-10-18", "reason": "Trip"},
        headers=auth_headers("employee"),
    )

    assert resp.status_code == 422
    assert resp.json()["title"] == "Validation Error"
    assert backend.calls("POST", "/api/leaves") == []


async def test_query_token_is_ignored_on_http_routes(client, backend):
    resp = await client.get("/api/v1/grievances/", params={"token": "test-token-hr"})

    assert resp.status_code == 401
    assert backend.requests == []
