"""Shared test fixtures — fake HRMS API, app, client, session helpers.

Reusable across all test modules (auth, leave, engagement, offers, etc.).
The HRMS API is replaced by an httpx.MockTransport that records every
request, so tests can assert both what the portal rendered and what it sent.
"""

from __future__ import annotations

import json
from typing import Any, AsyncGenerator, Callable, Optional, Union

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from portal.auth.schemas import CurrentUser, SessionContext
from portal.common.rate_limit import limiter
from portal.main import create_app
from portal.upstream import ApiClient, create_http_client

# ── Users known to the fake API ─────────────────────────────────────

USERS: dict[str, dict[str, Any]] = {
    "employee": {"_id": "u-emp", "email": "asha@example.com", "role": "employee", "employeeId": "e-emp"},
    "manager": {"_id": "u-mgr", "email": "ravi@example.com", "role": "manager", "employeeId": "e-mgr"},
    "hr": {"_id": "u-hr", "email": "meera@example.com", "role": "hr", "employeeId": "e-hr"},
    "admin": {"_id": "u-adm", "email": "admin@example.com", "role": "admin"},
}


def token_for(role: str) -> str:
    return f"test-token-{role}"


def auth_headers(role: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token_for(role)}"}


# ── Fake HRMS API ───────────────────────────────────────────────────

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Stands in for the HRMS REST API; records every request it serves.

    Routes are keyed by (method, path); query strings are ignored for
    matching and inspected through :meth:`calls` instead.
    """

    def __init__(self) -> None:
        self.users = {token_for(role): dict(user) for role, user in USERS.items()}
        self.routes: dict[tuple[str, str], Union[Handler, tuple[int, Any]]] = {}
        self.requests: list[httpx.Request] = []

    def on(
        self,
        method: str,
        path: str,
        json: Any = None,
        *,
        status: int = 200,
        handler: Optional[Handler] = None,
    ) -> None:
        self.routes[(method.upper(), path)] = handler or (status, json)

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> list[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method.upper())
            and (path is None or r.url.path == path)
        ]

    def last_json(self, method: str, path: str) -> Any:
        return json.loads(self.calls(method, path)[-1].content)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is not None:
            if callable(route):
                return route(request)
            status, body = route
            return httpx.Response(status, json=body)

        if request.method == "GET" and request.url.path == "/api/auth/me":
            token = request.headers.get("Authorization", "").removeprefix("Bearer ")
            user = self.users.get(token)
            if user is None:
                return httpx.Response(401, json={"message": "Not authorized, token failed"})
            return httpx.Response(200, json=user)

        return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    limiter.reset()
    yield


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
def app(backend):
    """Fresh app whose shared upstream client talks to the fake API.

    ASGITransport does not run the lifespan, so the mock client set here is
    the one every request uses.
    """
    application = create_app()
    application.state.http = create_http_client(httpx.MockTransport(backend.handle))
    yield application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Page-level helpers ──────────────────────────────────────────────

@pytest.fixture
async def http(backend) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with create_http_client(httpx.MockTransport(backend.handle)) as client:
        yield client


@pytest.fixture
def session_for(http) -> Callable[..., SessionContext]:
    """Build the session a page would get for *role*, optionally overriding user fields."""

    def _make(role: str, **overrides: Any) -> SessionContext:
        user = CurrentUser.model_validate({**USERS[role], **overrides})
        return SessionContext(user=user, api=ApiClient(http, token=token_for(role)))

    return _make
