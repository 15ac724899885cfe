from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal, Mapping

from .dates import normalize

SortOrder = Literal["asc", "desc"]


def _field(record: Any, *names: str) -> Any:
    for name in names:
        if isinstance(record, Mapping):
            if name in record:
                return record[name]
        elif hasattr(record, name):
            return getattr(record, name)
    return None


def resolve_date_key(text_value: Any, native_value: Any = None) -> str | None:
    """Canonical key of a stored row; a non-empty text date wins over the native one."""
    if text_value is not None and text_value != "":
        return normalize(text_value)
    return normalize(native_value)


@dataclass(frozen=True)
class LedgerRow:
    """Read-only copy of an entry as the aggregation and layout code see it."""

    id: Any
    date_key: str | None
    description: str
    income: Any = 0
    expense: Any = 0
    tag: str | None = None
    note: str | None = None

    @classmethod
    def from_record(cls, record: Any) -> "LedgerRow":
        """Build from an ORM entry or a plain mapping; missing fields are tolerated."""
        return cls(
            id=_field(record, "id", "_id"),
            date_key=resolve_date_key(_field(record, "date"), _field(record, "legacy_date")),
            description=str(_field(record, "description", "desc") or ""),
            income=_field(record, "income") or 0,
            expense=_field(record, "expense") or 0,
            tag=_field(record, "tag"),
            note=_field(record, "note"),
        )


def _id_sort_value(value: Any) -> tuple[int, Any]:
    # id 타입이 섞여도 비교 가능하도록 (숫자 → 문자열 → 없음)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    if value is None:
        return (2, "")
    return (1, str(value))


def sort_rows(rows: Iterable[LedgerRow], order: SortOrder = "asc") -> list[LedgerRow]:
    """Order rows by date key with the id as tiebreak.

    Rows without a date sort before every dated row in ascending order.
    """
    return sorted(
        rows,
        key=lambda r: (r.date_key or "", _id_sort_value(r.id)),
        reverse=(order == "desc"),
    )
