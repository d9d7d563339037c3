"""Portal exceptions and their RFC 7807 Problem Detail responses.

Page actions report most failures through notices on the view. These
exceptions cover what cannot be rendered as a view: no session, wrong role,
unknown ids, malformed input and an HRMS API failure outside a page action.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

BASE_ERROR_URI = "https://hr-portal.local/errors"


# ── Exception hierarchy ─────────────────────────────────────────────

class AppException(Exception):
    """Base for portal errors; rendered as ``application/problem+json``."""

    status_code = 500
    error_type = "internal-error"
    title = "Internal Error"

    def __init__(
        self,
        detail: str,
        errors: Optional[dict[str, list[str]]] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        self.detail = detail
        self.errors = errors
        self.headers = headers
        super().__init__(detail)


class UnauthorizedException(AppException):
    """401 — no bearer token, or the HRMS API no longer accepts it."""

    status_code = 401
    error_type = "unauthorized"
    title = "Unauthorized"

    def __init__(self, detail: str = "Missing or invalid Authorization header.") -> None:
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenException(AppException):
    status_code = 403
    error_type = "forbidden"
    title = "Forbidden"

    def __init__(self, detail: str = "You do not have permission to perform this action.") -> None:
        super().__init__(detail)


class NotFoundException(AppException):
    """404 — an id the loaded page does not know."""

    status_code = 404
    error_type = "not-found"
    title = "Not Found"

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        self.title = f"{entity_type} Not Found"
        super().__init__(f"{entity_type} with id '{entity_id}' does not exist.")


class ValidationException(AppException):
    """422 — input that parses but cannot be applied."""

    status_code = 422
    error_type = "validation-error"
    title = "Validation Error"

    def __init__(self, errors: dict[str, list[str]]) -> None:
        super().__init__("One or more fields failed validation.", errors=errors)


class UpstreamError(AppException):
    """The HRMS API failed or could not be reached.

    ``upstream_status`` keeps the backend's own status code (503 when the
    request never got a response) and ``message`` its ``message`` field, so
    pages can show the backend's wording verbatim. Escaping a page it is a
    502.
    """

    status_code = 502
    error_type = "upstream-error"
    title = "Upstream Error"

    def __init__(
        self,
        upstream_status: int,
        message: Optional[str] = None,
        payload: Any = None,
    ) -> None:
        self.upstream_status = upstream_status
        self.message = message
        self.payload = payload
        super().__init__(message or f"HRMS API responded with status {upstream_status}.")


# ── Problem Detail responses ────────────────────────────────────────

def problem_response(
    request: Request,
    *,
    status: int,
    error_type: str,
    title: str,
    detail: str,
    errors: Optional[dict[str, list[str]]] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    body: dict[str, Any] = {
        "type": f"{BASE_ERROR_URI}/{error_type}",
        "title": title,
        "status": status,
        "detail": detail,
        "instance": request.url.path,
    }
    if errors:
        body["errors"] = errors
    return JSONResponse(
        status_code=status,
        content=body,
        headers=headers,
        media_type="application/problem+json",
    )


async def _handle_app_exception(request: Request, exc: AppException) -> JSONResponse:
    if isinstance(exc, UpstreamError):
        logger.error(
            "HRMS API failure on %s %s: %s %s",
            request.method, request.url.path, exc.upstream_status, exc.detail,
        )
    return problem_response(
        request,
        status=exc.status_code,
        error_type=exc.error_type,
        title=exc.title,
        detail=exc.detail,
        errors=exc.errors,
        headers=exc.headers,
    )


def _field_name(loc: tuple) -> str:
    # ("body", "start_date") -> "start_date"; ("body",) -> "body"
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts) or "unknown"


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    field_errors: dict[str, list[str]] = {}
    for err in exc.errors():
        field_errors.setdefault(_field_name(tuple(err.get("loc", ()))), []).append(
            err.get("msg", "Invalid value")
        )
    return problem_response(
        request,
        status=422,
        error_type="validation-error",
        title="Validation Error",
        detail="Request validation failed.",
        errors=field_errors,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the problem-detail handlers to *app* (called from main.py)."""
    app.add_exception_handler(AppException, _handle_app_exception)          # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _handle_validation_error)  # type: ignore[arg-type]
