"""Partition an ordered ledger into runs of rows sharing a month or a day.

The runs drive two things in the exported sheet: which Year/Month/Day cells are
merged, and where the heavier horizontal borders go.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from .dates import date_parts
from .rows import LedgerRow

GroupKey = tuple[int, ...] | None


@dataclass(frozen=True)
class Segment:
    """Inclusive index range ``[start, end]`` over the sorted rows."""

    start: int
    end: int
    key: GroupKey

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def is_mergeable(self) -> bool:
        return self.key is not None and self.length > 1


@dataclass(frozen=True)
class Segmentation:
    month_segments: tuple[Segment, ...]
    day_segments: tuple[Segment, ...]


def month_key(row: LedgerRow) -> GroupKey:
    parts = date_parts(row.date_key)
    return parts[:2] if parts else None


def day_key(row: LedgerRow) -> GroupKey:
    return date_parts(row.date_key)


def runs(keys: Sequence[GroupKey]) -> list[Segment]:
    """Maximal runs of equal keys. ``None`` never equals anything, itself included."""
    out: list[Segment] = []
    start = 0
    for i in range(1, len(keys) + 1):
        if i < len(keys) and keys[i] is not None and keys[i] == keys[i - 1]:
            continue
        out.append(Segment(start=start, end=i - 1, key=keys[start]))
        start = i
    return out


def segment_by(rows: Sequence[LedgerRow], key: Callable[[LedgerRow], GroupKey]) -> list[Segment]:
    return runs([key(r) for r in rows])


def segment(rows: Sequence[LedgerRow]) -> Segmentation:
    return Segmentation(
        month_segments=tuple(segment_by(rows, month_key)),
        day_segments=tuple(segment_by(rows, day_key)),
    )
