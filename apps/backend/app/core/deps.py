from __future__ import annotations

from fastapi import Query, Request

from app.ledger.workbook import WorkbookRenderer
from app.schemas import EntryFilters


def get_workbook_renderer(request: Request) -> WorkbookRenderer:
    """Renderer built at startup (``app.main.lifespan``). Tests may override this dependency."""
    return request.app.state.workbook_renderer


def get_entry_filters(
    start: str | None = Query(None, description="YYYY-MM-DD, inclusive"),
    end: str | None = Query(None, description="YYYY-MM-DD, inclusive"),
    q: str | None = Query(None, description="Case-insensitive description search"),
    order: str | None = Query(None, description="asc (default) or desc"),
) -> EntryFilters:
    # 잘못된 값은 422 대신 '조건 없음'으로 처리
    return EntryFilters(start=start, end=end, q=q, order=order)
