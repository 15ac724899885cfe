"""Date canonicalization.

Every date the ledger compares, groups or renders goes through ``normalize``
first and is handled as a ``YYYY-MM-DD`` text key afterwards. ``None`` stands for
"unknown date"; callers never see an exception from this module.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

YMD_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_LOOSE_YMD_RE = re.compile(r"^\s*(\d{4})[./-](\d{1,2})[./-](\d{1,2})\.?\s*$")


def is_ymd(value: Any) -> bool:
    return isinstance(value, str) and bool(YMD_RE.match(value))


def _utc_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def _parse_text(text: str) -> date | None:
    text = text.strip()
    if not text:
        return None

    m = _LOOSE_YMD_RE.match(text)
    if m:
        y, mo, d = (int(g) for g in m.groups())
        try:
            return date(y, mo, d)
        except ValueError:
            return None

    try:
        return _utc_date(datetime.fromisoformat(text))
    except ValueError:
        pass

    # RFC 2822 ("Fri, 01 Mar 2024 09:00:00 +0900")
    try:
        return _utc_date(parsedate_to_datetime(text))
    except (TypeError, ValueError, IndexError, OverflowError):
        return None


def _from_epoch(value: int | float) -> date | None:
    try:
        seconds = float(value)
        if not math.isfinite(seconds):
            return None
        return datetime.fromtimestamp(seconds, tz=timezone.utc).date()
    except (OverflowError, OSError, ValueError):
        return None


def normalize(value: Any) -> str | None:
    """Return the canonical ``YYYY-MM-DD`` key for ``value`` or ``None``.

    - Text whose first 10 characters already form a key is cut to those
      characters; any time-of-day suffix is ignored.
    - ``datetime`` values (and parseable text) are reduced to their UTC date.
      Naive datetimes are taken as UTC.
    - Ints and floats are POSIX timestamps in seconds.

    >>> normalize("2024-03-01T23:30:00-05:00")
    '2024-03-01'
    >>> normalize("not a date") is None
    True
    """
    parsed: date | None
    if isinstance(value, str):
        head = value[:10]
        if is_ymd(head):
            return head
        parsed = _parse_text(value)
    elif isinstance(value, datetime):
        parsed = _utc_date(value)
    elif isinstance(value, date):
        parsed = value
    elif isinstance(value, bool):
        parsed = None
    elif isinstance(value, (int, float)):
        parsed = _from_epoch(value)
    else:
        parsed = None

    if parsed is None:
        return None
    return parsed.isoformat()


def date_parts(key: str | None) -> tuple[int, int, int] | None:
    """Split a canonical key into integer (year, month, day)."""
    if not is_ymd(key):
        return None
    return int(key[0:4]), int(key[5:7]), int(key[8:10])


def year_of(key: str | None) -> int | None:
    parts = date_parts(key)
    return parts[0] if parts else None
