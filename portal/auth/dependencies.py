"""Auth dependencies — session resolution against the HRMS API, role checks."""

from __future__ import annotations

from typing import Callable

from fastapi import Depends

from portal.auth.schemas import CurrentUser, SessionContext
from portal.common.constants import UserRole
from portal.common.exceptions import ForbiddenException, UnauthorizedException, UpstreamError
from portal.upstream import ApiClient, get_api_client


# ── Core dependency ─────────────────────────────────────────────────

async def get_current_user(
    api: ApiClient = Depends(get_api_client),
) -> CurrentUser:
    """Resolve the caller through ``GET /api/auth/me`` with their own token."""
    if not api.token:
        raise UnauthorizedException()

    try:
        data = await api.get("/api/auth/me")
    except UpstreamError as exc:
        if exc.upstream_status in (401, 403):
            raise UnauthorizedException("Session invalid or expired.")
        raise

    return CurrentUser.model_validate(data)


async def get_session(
    api: ApiClient = Depends(get_api_client),
    user: CurrentUser = Depends(get_current_user),
) -> SessionContext:
    return SessionContext(user=user, api=api)


# ── Role-based dependency ───────────────────────────────────────────

def require_role(*allowed_roles: UserRole) -> Callable:
    """Return a FastAPI dependency that enforces role membership."""

    async def _check(
        session: SessionContext = Depends(get_session),
    ) -> SessionContext:
        if session.role not in allowed_roles:
            raise ForbiddenException(
                detail=f"Role '{session.role.value}' is not permitted. Required: {[r.value for r in allowed_roles]}.",
            )
        return session

    return _check
