"""
Date Parsing
Italian relative/absolute listing dates to ISO-8601 (UTC, "Z" suffix)
"""
from __future__ import annotations

from calendar import monthrange
from datetime import datetime, timedelta, timezone
from typing import Optional
import re

from ..core.diagnostics import Diagnostics

_DAYS_RE = re.compile(r'^(\d+)\s+giorn[oi]\s+fa$', re.IGNORECASE)
_WEEKS_RE = re.compile(r'^(\d+)\s+settiman[ae]\s+fa$', re.IGNORECASE)
_MONTHS_RE = re.compile(r'^(\d+)\s+mes[ei]\s+fa$', re.IGNORECASE)
_YEARS_RE = re.compile(r'^(\d+)\s+ann[oi]\s+fa$', re.IGNORECASE)
_ABSOLUTE_RE = re.compile(r'^(\d{1,2})/(\d{1,2})/(\d{4})$')


def to_iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.astimezone()
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def timestamp_to_iso(seconds: int) -> str:
    return to_iso(datetime.fromtimestamp(int(seconds), tz=timezone.utc))


def local_now() -> datetime:
    return datetime.now().astimezone()


def shift_months(value: datetime, months: int) -> datetime:
    """Move the month field back/forward, clamping the day to the target month's length."""
    total = value.year * 12 + (value.month - 1) + months
    year, month = divmod(total, 12)
    month += 1
    day = min(value.day, monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def shift_years(value: datetime, years: int) -> datetime:
    year = value.year + years
    day = min(value.day, monthrange(year, value.month)[1])
    return value.replace(year=year, day=day)


def parse_italian_date(
    date_str: str,
    now: Optional[datetime] = None,
    diagnostics: Optional[Diagnostics] = None,
) -> str:
    """
    Parse a listing date such as "oggi", "ieri", "3 giorni fa", "2 settimane fa",
    "5 mesi fa", "1 anno fa" or "DD/MM/YYYY".

    Relative forms are computed from `now` (local time by default). Anything
    unrecognized maps to `now` and is reported as an unparseable date.
    """
    if now is None:
        now = local_now()
    elif now.tzinfo is None:
        now = now.astimezone()

    text = (date_str or "").strip()
    lower = text.lower()

    if lower == "oggi":
        return to_iso(now)
    if lower == "ieri":
        return to_iso(now - timedelta(days=1))

    match = _DAYS_RE.match(lower)
    if match:
        try:
            return to_iso(now - timedelta(days=int(match.group(1))))
        except (ValueError, OverflowError):
            pass

    match = _WEEKS_RE.match(lower)
    if match:
        try:
            return to_iso(now - timedelta(days=int(match.group(1)) * 7))
        except (ValueError, OverflowError):
            pass

    match = _MONTHS_RE.match(lower)
    if match:
        try:
            return to_iso(shift_months(now, -int(match.group(1))))
        except (ValueError, OverflowError):
            pass

    match = _YEARS_RE.match(lower)
    if match:
        try:
            return to_iso(shift_years(now, -int(match.group(1))))
        except (ValueError, OverflowError):
            pass

    match = _ABSOLUTE_RE.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups())
        try:
            return to_iso(datetime(year, month, day).astimezone())
        except (ValueError, OverflowError):
            pass

    if diagnostics is not None:
        diagnostics.info("unparseable_date", date=text)
    return to_iso(now)
