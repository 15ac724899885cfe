from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from app import models
from app.core.errors import NotFound, ValidationFailure
from app.core.logging import get_logger
from app.ledger.query import build_range_filter, build_search_filter, key_in_range
from app.schemas import EntryCreate, EntryFilters, EntryUpdate

logger = get_logger(__name__)


class EntryService:
    """CRUD and filtered reads over the ``entry`` table."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_all(self, filters: EntryFilters) -> list[models.Entry]:
        q = self.db.query(models.Entry).filter(
            build_range_filter(models.Entry.date, models.Entry.legacy_date, filters.start, filters.end)
        )
        search = build_search_filter(models.Entry.description, filters.q)
        if search is not None:
            q = q.filter(search)
        # 최종 정렬은 정규화된 날짜 키로 다시 수행 (문자열/Date 혼재)
        rows = q.order_by(models.Entry.date, models.Entry.id).all()
        # 비정규 텍스트 날짜: 정규화 키로 범위 재확인
        return [e for e in rows if key_in_range(e.date_key, filters.start, filters.end)]

    def get(self, entry_id: int) -> models.Entry:
        row = self.db.get(models.Entry, entry_id)
        if row is None:
            raise NotFound()
        return row

    def create(self, payload: EntryCreate) -> models.Entry:
        row = models.Entry(**payload.model_dump())
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("entry %s created (%s)", row.id, row.date)
        return row

    def update(self, entry_id: int, payload: EntryUpdate) -> models.Entry:
        patch: dict[str, Any] = payload.changes()
        if not patch:
            raise ValidationFailure("empty update")
        row = self.get(entry_id)
        for key, value in patch.items():
            setattr(row, key, value)
        # 변경 내용과 무관하게 수정 시각 갱신
        row.updated_at = models.now_local_naive()
        self.db.commit()
        self.db.refresh(row)
        return row

    def delete(self, entry_id: int) -> None:
        row = self.get(entry_id)
        self.db.delete(row)
        self.db.commit()
        logger.info("entry %s deleted", entry_id)
