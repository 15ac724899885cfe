"""SQL filter builders for the entry listing and export.

Entries written before the canonical text key existed keep their date in a
native ``DateTime`` column, so a date range has to be expressed against both
physical representations and OR-ed together.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta

from sqlalchemy import and_, func, not_, or_, true
from sqlalchemy.sql.elements import ColumnElement

from app.utils.normalization import escape_like

from .dates import is_ymd

CANONICAL_GLOB = "[0-9][0-9][0-9][0-9]-[0-9][0-9]-[0-9][0-9]*"


def _bound(value: str | None) -> date | None:
    if not is_ymd(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def build_range_filter(
    text_column,
    native_column,
    start: str | None = None,
    end: str | None = None,
) -> ColumnElement[bool]:
    """Match rows whose date falls within ``[start, end]`` (both inclusive).

    Bounds that are not valid ``YYYY-MM-DD`` keys are treated as open. With no
    usable bound at all the clause matches everything.
    """
    lo = _bound(start)
    hi = _bound(end)
    if lo is None and hi is None:
        return true()

    key = func.substr(text_column, 1, 10)
    canonical = text_column.op("GLOB", is_comparison=True)(CANONICAL_GLOB)
    text_conds = [text_column.is_not(None), canonical]
    native_conds = [or_(text_column.is_(None), text_column == ""), native_column.is_not(None)]
    if lo is not None:
        text_conds.append(key >= lo.isoformat())
        native_conds.append(native_column >= datetime.combine(lo, time.min))
    if hi is not None:
        text_conds.append(key <= hi.isoformat())
        # 종료일 당일 시각까지 포함
        native_conds.append(native_column < datetime.combine(hi + timedelta(days=1), time.min))

    # 비정규 텍스트 날짜는 일단 포함하고 조회 후 key_in_range로 거른다
    loose_text = and_(text_column.is_not(None), text_column != "", not_(canonical))

    return or_(and_(*text_conds), and_(*native_conds), loose_text)


def key_in_range(key: str | None, start: str | None = None, end: str | None = None) -> bool:
    """Python-side counterpart of ``build_range_filter`` for an already resolved key.

    With a usable bound, rows without a key never match.
    """
    lo = _bound(start)
    hi = _bound(end)
    if lo is None and hi is None:
        return True
    if not is_ymd(key):
        return False
    if lo is not None and key < lo.isoformat():
        return False
    if hi is not None and key > hi.isoformat():
        return False
    return True


def build_search_filter(column, q: str | None) -> ColumnElement[bool] | None:
    """Case-insensitive substring match; ``None`` when ``q`` is blank."""
    text = (q or "").strip()
    if not text:
        return None
    return column.ilike(f"%{escape_like(text)}%", escape="\\")
