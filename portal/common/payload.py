"""Helpers for reading upstream JSON payloads and formatting them for display."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Optional

from portal.common.constants import LONG_DATE_FORMAT, ROW_DATE_FORMAT


def dig(obj: Any, *keys: str, default: Any = None) -> Any:
    """Walk nested dicts; return *default* as soon as a level is missing or None."""
    current = obj
    for key in keys:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def ref_id(value: Any) -> Optional[str]:
    """Id of a reference that may be a raw id or a populated ``{"_id": ...}`` object."""
    if isinstance(value, dict):
        value = value.get("_id")
    return str(value) if value is not None else None


def as_list(data: Any) -> list:
    if data is None:
        return []
    return data if isinstance(data, list) else [data]


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (``Z`` suffix allowed) into an aware datetime.

    Date-only values are taken as UTC midnight. Unparseable values yield None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def iso_midnight(day: date) -> str:
    """``2026-10-18`` → ``2026-10-18T00:00:00Z``."""
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")


def is_past(value: Any, now: Optional[datetime] = None) -> bool:
    """True when *value* is a timestamp strictly before *now*."""
    moment = parse_datetime(value)
    if moment is None:
        return False
    return moment < (now or datetime.now(timezone.utc))


def percentage(part: float, whole: float) -> float:
    """``part / whole * 100`` rounded to one decimal; 0 when *whole* is 0."""
    if not whole:
        return 0
    return round(part / whole * 100, 1)


def attendance_band(value: float) -> str:
    if value >= 90:
        return "green"
    if value >= 70:
        return "yellow"
    return "red"


def format_row_date(value: Any) -> Optional[str]:
    moment = parse_datetime(value)
    return moment.strftime(ROW_DATE_FORMAT) if moment else None


def format_long_date(value: Any) -> Optional[str]:
    moment = parse_datetime(value)
    return moment.strftime(LONG_DATE_FORMAT) if moment else None


def to_float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0
