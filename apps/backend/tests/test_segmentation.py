from __future__ import annotations

import pytest

from app.ledger.rows import LedgerRow
from app.ledger.segmentation import Segment, runs, segment


def _rows(*dates) -> list[LedgerRow]:
    return [LedgerRow(id=i, date_key=d, description=str(i)) for i, d in enumerate(dates)]


def _spans(segments) -> list[tuple[int, int]]:
    return [(s.start, s.end) for s in segments]


def _assert_partition(segments, keys):
    """Every index covered once, in order, and no run can grow."""
    covered = [i for s in segments for i in range(s.start, s.end + 1)]
    assert covered == list(range(len(keys)))
    for s in segments:
        for i in range(s.start, s.end + 1):
            assert keys[i] == s.key
        if s.key is None:
            assert s.length == 1
    for a, b in zip(segments, segments[1:]):
        assert a.end + 1 == b.start
        assert a.key is None or b.key is None or a.key != b.key


def test_three_march_entries():
    seg = segment(_rows("2024-03-01", "2024-03-01", "2024-03-02"))
    assert _spans(seg.month_segments) == [(0, 2)]
    assert seg.month_segments[0].key == (2024, 3)
    assert _spans(seg.day_segments) == [(0, 1), (2, 2)]
    assert [s.is_mergeable for s in seg.day_segments] == [True, False]


def test_missing_dates_never_merge():
    seg = segment(_rows("2024-01-01", None, None, "2024-01-01"))
    assert _spans(seg.day_segments) == [(0, 0), (1, 1), (2, 2), (3, 3)]
    assert _spans(seg.month_segments) == [(0, 0), (1, 1), (2, 2), (3, 3)]
    assert not any(s.is_mergeable for s in seg.month_segments)


def test_same_day_different_year_or_month_split():
    seg = segment(_rows("2023-12-05", "2024-12-05", "2024-11-05", "2024-11-05"))
    assert _spans(seg.month_segments) == [(0, 0), (1, 1), (2, 3)]
    assert _spans(seg.day_segments) == [(0, 0), (1, 1), (2, 3)]


def test_descending_order_groups_the_same():
    seg = segment(_rows("2024-02-03", "2024-02-01", "2024-02-01", "2024-01-31"))
    assert _spans(seg.month_segments) == [(0, 2), (3, 3)]
    assert _spans(seg.day_segments) == [(0, 0), (1, 2), (3, 3)]


def test_empty():
    seg = segment([])
    assert seg.month_segments == ()
    assert seg.day_segments == ()


@pytest.mark.parametrize(
    "keys",
    [
        [],
        ["a"],
        [None],
        ["a", "a", "a"],
        ["a", "b", "a"],
        [None, None, "a", "a", None],
        ["a", "a", "b", "b", "b", "c", None, "c", "c"],
    ],
)
def test_runs_partition_is_maximal(keys):
    _assert_partition(runs(keys), keys)


def test_segment_length_and_mergeable():
    assert Segment(2, 4, (2024, 1)).length == 3
    assert Segment(2, 4, (2024, 1)).is_mergeable
    assert not Segment(2, 2, (2024, 1)).is_mergeable
