"""Async httpx client for the HRMS REST API and its per-request wrapper."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from fastapi.requests import HTTPConnection

from portal.common.exceptions import UpstreamError
from portal.config import settings

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = "Cannot connect to server."


def create_http_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Shared connection pool to the HRMS API, one per application."""
    return httpx.AsyncClient(
        base_url=settings.API_BASE_URL,
        timeout=settings.API_TIMEOUT_SECONDS,
        headers={"Accept": "application/json"},
        transport=transport,
    )


class ApiClient:
    """Calls the HRMS API on behalf of one caller.

    The caller's bearer token is forwarded on every request; the backend is
    the one enforcing who may see or change what.
    """

    def __init__(self, http: httpx.AsyncClient, token: Optional[str] = None) -> None:
        self._http = http
        self.token = token

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self._request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self._request("PUT", path, json=json)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else None
        try:
            resp = await self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise UpstreamError(503, UNREACHABLE_MESSAGE) from exc

        if resp.status_code >= 400:
            payload = _decode(resp)
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.error("%s %s -> %d %s", method, path, resp.status_code, message or "")
            raise UpstreamError(resp.status_code, message, payload)

        return _decode(resp)


def _decode(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return None


def _extract_bearer(conn: HTTPConnection) -> Optional[str]:
    """Bearer token from the Authorization header, or ``?token=`` for websockets."""
    auth_header = conn.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header[7:]
    if conn.scope["type"] == "websocket":
        return conn.query_params.get("token")
    return None


async def get_api_client(conn: HTTPConnection) -> ApiClient:
    """FastAPI dependency: an ``ApiClient`` bound to the caller's token."""
    return ApiClient(conn.app.state.http, token=_extract_bearer(conn))
