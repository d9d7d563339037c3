"""Transient notices shown next to a view, and the outcome of page actions."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Response
from pydantic import BaseModel

from portal.common.exceptions import UpstreamError


class NoticeLevel(str, enum.Enum):
    success = "success"
    error = "error"
    info = "info"


class Notice(BaseModel):
    level: NoticeLevel
    message: str
    duration_ms: Optional[int] = None


class NoticeLog:
    """Collects the notices raised while serving one request or connection.

    Every notice is also written to *logger* so failures surface in the
    service logs, not only in the rendered view.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger
        self.items: list[Notice] = []

    def success(self, message: str) -> None:
        self._add(NoticeLevel.success, message)

    def info(self, message: str) -> None:
        self._add(NoticeLevel.info, message)

    def error(self, message: str, *, duration_ms: Optional[int] = None) -> None:
        self._add(NoticeLevel.error, message, duration_ms)

    def drain(self) -> list[Notice]:
        """Return collected notices and start a fresh batch."""
        items, self.items = self.items, []
        return items

    def _add(
        self,
        level: NoticeLevel,
        message: str,
        duration_ms: Optional[int] = None,
    ) -> None:
        if level == NoticeLevel.error:
            self._logger.error("notice: %s", message)
        else:
            self._logger.info("notice: %s", message)
        self.items.append(Notice(level=level, message=message, duration_ms=duration_ms))


def failure_message(exc: UpstreamError, fallback: str) -> str:
    """Backend's own message when it sent one, else *fallback*."""
    return exc.message or fallback


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a page action; routers mirror ``status_code`` on failure."""

    ok: bool
    status_code: int = 200

    @classmethod
    def done(cls) -> "ActionResult":
        return cls(ok=True)

    @classmethod
    def rejected(cls, status_code: int = 422) -> "ActionResult":
        return cls(ok=False, status_code=status_code)

    @classmethod
    def from_upstream(cls, exc: UpstreamError) -> "ActionResult":
        return cls(ok=False, status_code=exc.upstream_status)

    def mirror(self, response: Response) -> None:
        """Copy a failed outcome's status onto the HTTP response."""
        if not self.ok:
            response.status_code = self.status_code
