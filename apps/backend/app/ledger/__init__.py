"""
Ledger 엔진 패키지

날짜 정규화, 합계/잔액 계산, 날짜 구간 분할, 엑셀 배치를 제공합니다.
요청 상태나 DB 세션에 의존하지 않는 순수 로직만 둡니다.
"""

from .aggregation import Carry, RunningBalance, Summary, SummaryDetail, aggregate, num, running_balances
from .dates import date_parts, is_ymd, normalize
from .query import build_range_filter, build_search_filter, key_in_range
from .rows import LedgerRow, sort_rows
from .segmentation import Segment, Segmentation, segment
from .workbook import WorkbookRenderer

__all__ = [
    "Carry",
    "LedgerRow",
    "RunningBalance",
    "Segment",
    "Segmentation",
    "Summary",
    "SummaryDetail",
    "WorkbookRenderer",
    "aggregate",
    "build_range_filter",
    "build_search_filter",
    "date_parts",
    "is_ymd",
    "key_in_range",
    "normalize",
    "num",
    "running_balances",
    "segment",
    "sort_rows",
]
