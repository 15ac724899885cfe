"""Plain-data description of the exported ledger sheet.

``WorkbookRenderer.render`` fills a ``Grid``; ``WorkbookRenderer.to_workbook``
turns it into an openpyxl workbook. Keeping the plan separate lets the merge and
border decisions be checked without opening a spreadsheet.

Coordinates are 1-based ``(row, column)`` pairs, the same as openpyxl.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .aggregation import RunningBalance

TITLE_ROW = 1
HEADER_ROW = 2
DATA_START_ROW = 3

COL_YEAR = 1
COL_MONTH = 2
COL_DAY = 3
COL_DESC = 4
COL_INCOME = 5
COL_EXPENSE = 6
COL_BALANCE = 7
N_COLS = 7

# 열 폭 (A~G)
COL_WIDTHS = (4.38, 3.38, 3.38, 19.5, 12.5, 12.5, 15.5)


class BorderTier(str, Enum):
    """Line weights, lightest first. Values are openpyxl ``Side`` styles."""

    HAIR = "hair"
    THIN = "thin"
    MEDIUM = "medium"
    HEAVY = "thick"


class CellRole(str, Enum):
    TITLE = "title"
    HEADER = "header"
    DATE_PART = "date_part"
    TEXT = "text"
    MONEY = "money"
    SUMMARY_HEADER = "summary_header"
    LABEL = "label"


@dataclass(frozen=True)
class SheetLabels:
    title: str = "{year}년 공금 수불부"
    columns: tuple[str, ...] = ("년", "월", "일", "적요", "수입", "지출", "잔액")
    totals: tuple[str, str, str] = ("총 수입", "총 지출", "총 잔액")
    prev_carry: str = "{year}년 이월금"
    year_income: str = "{year}년 수입"
    year_expense: str = "{year}년 지출"
    year_balance: str = "{year}년 총 잔액"


@dataclass(frozen=True)
class CellSpec:
    value: Any
    role: CellRole


@dataclass(frozen=True)
class MergeRange:
    min_row: int
    min_col: int
    max_row: int
    max_col: int


@dataclass(frozen=True)
class Edges:
    top: BorderTier = BorderTier.THIN
    bottom: BorderTier = BorderTier.THIN
    left: BorderTier = BorderTier.THIN
    right: BorderTier = BorderTier.THIN


@dataclass(frozen=True)
class Grid:
    cells: dict[tuple[int, int], CellSpec]
    merges: tuple[MergeRange, ...]
    borders: dict[tuple[int, int], Edges]
    balances: tuple[RunningBalance, ...]
    data_last_row: int
    summary_header_row: int
    carry_block_row: int
    widths: tuple[float, ...] = field(default=COL_WIDTHS)

    @property
    def row_count(self) -> int:
        return len(self.balances)

    def value(self, row: int, col: int) -> Any:
        spec = self.cells.get((row, col))
        return spec.value if spec else None
