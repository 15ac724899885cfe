"""Spreadsheet rendering of a summarized ledger.

The renderer is built once at application start (see ``app.main``) and handed
to the export route; it keeps no per-request state.
"""

from __future__ import annotations

from io import BytesIO
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from app.core.errors import RenderFailure
from app.core.logging import get_logger
from app.utils.normalization import sanitize_xml_text

from .aggregation import Summary, running_balances
from .dates import date_parts
from .layout import (
    COL_BALANCE,
    COL_DAY,
    COL_DESC,
    COL_EXPENSE,
    COL_INCOME,
    COL_MONTH,
    COL_YEAR,
    DATA_START_ROW,
    HEADER_ROW,
    N_COLS,
    TITLE_ROW,
    BorderTier,
    CellRole,
    CellSpec,
    Edges,
    Grid,
    MergeRange,
    SheetLabels,
)
from .rows import LedgerRow
from .segmentation import Segment

logger = get_logger(__name__)

HEADER_FILL = "FFE7E6E6"
SUMMARY_HEADER_FILL = "FFD9E1F2"
BORDER_COLOR = "FF000000"


def accounting_format(symbol: str, locale: str) -> str:
    """Excel accounting format: currency marker, thousands separator, ``-`` for zero."""
    cur = f"[${symbol}-{locale}]"
    return f'_-{cur}* #,##0_-;-{cur}* #,##0_-;_-{cur}* "-"_-;_-@_-'


class WorkbookRenderer:
    def __init__(
        self,
        *,
        sheet_name: str = "공금수불부",
        creator: str = "fund-ledger",
        currency_symbol: str = "₩",
        currency_locale: str = "ko-KR",
        font_name: str = "맑은 고딕",
        labels: SheetLabels | None = None,
    ) -> None:
        self.sheet_name = sheet_name
        self.creator = creator
        self.money_format = accounting_format(currency_symbol, currency_locale)
        self.font_name = font_name
        self.labels = labels or SheetLabels()

    @classmethod
    def from_settings(cls, settings) -> "WorkbookRenderer":
        return cls(
            sheet_name=settings.SHEET_NAME,
            creator=settings.WORKBOOK_CREATOR,
            currency_symbol=settings.CURRENCY_SYMBOL,
            currency_locale=settings.CURRENCY_LOCALE,
            font_name=settings.FONT_NAME,
        )

    # ------------------------------------------------------------------ plan

    def render(
        self,
        summary: Summary,
        rows: Sequence[LedgerRow],
        month_segments: Sequence[Segment],
        day_segments: Sequence[Segment],
    ) -> Grid:
        """Lay out title, header, one line per row, and the summary block."""
        detail = summary.detail
        labels = self.labels
        cells: dict[tuple[int, int], CellSpec] = {}
        borders: dict[tuple[int, int], Edges] = {}
        merges: list[MergeRange] = []

        cells[(TITLE_ROW, 1)] = CellSpec(labels.title.format(year=detail.target_year), CellRole.TITLE)
        merges.append(MergeRange(TITLE_ROW, 1, TITLE_ROW, N_COLS))

        for col, text in enumerate(labels.columns, start=1):
            cells[(HEADER_ROW, col)] = CellSpec(text, CellRole.HEADER)

        balances = running_balances(rows, detail.prev_carry)
        for bal, row in zip(balances, rows):
            r = DATA_START_ROW + bal.index
            parts = date_parts(row.date_key)
            y, m, d = parts if parts else (None, None, None)
            cells[(r, COL_YEAR)] = CellSpec(y, CellRole.DATE_PART)
            cells[(r, COL_MONTH)] = CellSpec(m, CellRole.DATE_PART)
            cells[(r, COL_DAY)] = CellSpec(d, CellRole.DATE_PART)
            cells[(r, COL_DESC)] = CellSpec(sanitize_xml_text(row.description), CellRole.TEXT)
            cells[(r, COL_INCOME)] = CellSpec(bal.income, CellRole.MONEY)
            cells[(r, COL_EXPENSE)] = CellSpec(bal.expense, CellRole.MONEY)
            cells[(r, COL_BALANCE)] = CellSpec(bal.balance, CellRole.MONEY)

        n = len(rows)
        month_segments = self._usable(month_segments, n, "month")
        day_segments = self._usable(day_segments, n, "day")

        for seg in month_segments:
            if seg.is_mergeable:
                for col in (COL_YEAR, COL_MONTH):
                    merges.append(MergeRange(DATA_START_ROW + seg.start, col, DATA_START_ROW + seg.end, col))
        for seg in day_segments:
            if seg.is_mergeable:
                merges.append(MergeRange(DATA_START_ROW + seg.start, COL_DAY, DATA_START_ROW + seg.end, COL_DAY))

        borders.update(self._data_region_borders(n, month_segments, day_segments))

        data_last_row = DATA_START_ROW + n - 1 if n else HEADER_ROW

        # 내역 마지막 줄 다음 한 줄 비우고 합계 블록
        sum_header = data_last_row + 2
        sum_value = sum_header + 1
        totals = (summary.income, summary.expense, summary.balance)
        for offset, (label, amount) in enumerate(zip(labels.totals, totals)):
            col = COL_INCOME + offset
            cells[(sum_header, col)] = CellSpec(label, CellRole.SUMMARY_HEADER)
            cells[(sum_value, col)] = CellSpec(amount, CellRole.MONEY)
            borders[(sum_header, col)] = Edges()
            borders[(sum_value, col)] = Edges()

        carry_row = sum_value + 2
        carry_lines = (
            (labels.prev_carry.format(year=detail.prev_year), detail.prev_carry),
            (labels.year_income.format(year=detail.target_year), detail.target_year_income),
            (labels.year_expense.format(year=detail.target_year), detail.target_year_expense),
            (labels.year_balance.format(year=detail.target_year), detail.target_year_balance),
        )
        for offset, (label, amount) in enumerate(carry_lines):
            r = carry_row + offset
            cells[(r, COL_INCOME)] = CellSpec(label, CellRole.LABEL)
            cells[(r, COL_BALANCE)] = CellSpec(amount, CellRole.MONEY)
            merges.append(MergeRange(r, COL_INCOME, r, COL_EXPENSE))
            for col in (COL_INCOME, COL_EXPENSE, COL_BALANCE):
                borders[(r, col)] = Edges()

        return Grid(
            cells=cells,
            merges=tuple(merges),
            borders=borders,
            balances=tuple(balances),
            data_last_row=data_last_row,
            summary_header_row=sum_header,
            carry_block_row=carry_row,
        )

    @staticmethod
    def _usable(segments: Sequence[Segment], n: int, kind: str) -> list[Segment]:
        ok = []
        for seg in segments:
            if 0 <= seg.start <= seg.end < n:
                ok.append(seg)
            else:
                logger.warning("skipping %s segment outside the data rows: %s (rows=%d)", kind, seg, n)
        return ok

    @staticmethod
    def _data_region_borders(
        n: int,
        month_segments: Sequence[Segment],
        day_segments: Sequence[Segment],
    ) -> dict[tuple[int, int], Edges]:
        """Borders for the header plus entry rows.

        A boundary belongs to the segment that closes there: it is decided on the
        bottom edge of the segment's last row and copied onto the top edge of the
        next row so the two cells agree.
        """
        month_ends = {s.end for s in month_segments}
        day_ends = {s.end for s in day_segments}

        def closing(idx: int) -> BorderTier:
            if idx == n - 1:
                return BorderTier.HEAVY
            if idx in month_ends:
                return BorderTier.MEDIUM
            if idx in day_ends:
                return BorderTier.THIN
            return BorderTier.HAIR

        header_bottom = BorderTier.MEDIUM if n else BorderTier.HEAVY
        out: dict[tuple[int, int], Edges] = {}
        for col in range(1, N_COLS + 1):
            out[(HEADER_ROW, col)] = Edges(
                top=BorderTier.HEAVY,
                bottom=header_bottom,
                left=BorderTier.HEAVY if col == 1 else BorderTier.THIN,
                right=BorderTier.HEAVY if col == N_COLS else BorderTier.THIN,
            )

        above = header_bottom
        for idx in range(n):
            below = closing(idx)
            for col in range(1, N_COLS + 1):
                out[(DATA_START_ROW + idx, col)] = Edges(
                    top=above,
                    bottom=below,
                    left=BorderTier.HEAVY if col == 1 else BorderTier.HAIR,
                    right=BorderTier.HEAVY if col == N_COLS else BorderTier.HAIR,
                )
            above = below
        return out

    # ---------------------------------------------------------------- encode

    def _side(self, tier: BorderTier) -> Side:
        return Side(style=tier.value, color=BORDER_COLOR)

    def _border(self, edges: Edges) -> Border:
        return Border(
            top=self._side(edges.top),
            bottom=self._side(edges.bottom),
            left=self._side(edges.left),
            right=self._side(edges.right),
        )

    def _apply_role(self, cell, role: CellRole) -> None:
        center = Alignment(horizontal="center", vertical="center")
        if role is CellRole.TITLE:
            cell.font = Font(name=self.font_name, size=14, bold=True)
            cell.alignment = center
        elif role in (CellRole.HEADER, CellRole.SUMMARY_HEADER):
            fill = HEADER_FILL if role is CellRole.HEADER else SUMMARY_HEADER_FILL
            cell.font = Font(name=self.font_name, size=10, bold=True)
            cell.alignment = center
            cell.fill = PatternFill(fill_type="solid", fgColor=fill)
        elif role is CellRole.MONEY:
            cell.font = Font(name=self.font_name, size=10)
            cell.number_format = self.money_format
            cell.alignment = Alignment(horizontal="right", vertical="center")
        elif role is CellRole.TEXT:
            cell.font = Font(name=self.font_name, size=10)
            cell.alignment = Alignment(horizontal="left", vertical="center", wrap_text=True)
        else:
            cell.font = Font(name=self.font_name, size=10)
            cell.alignment = center

    def to_workbook(self, grid: Grid) -> Workbook:
        wb = Workbook()
        wb.properties.creator = self.creator
        ws = wb.active
        ws.title = sanitize_xml_text(self.sheet_name)[:31] or "Sheet1"

        for col, width in enumerate(grid.widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width
        # 1: 제목, 2: 머리글 고정
        ws.freeze_panes = f"A{DATA_START_ROW}"

        for (r, c), spec in grid.cells.items():
            value = spec.value
            if isinstance(value, str):
                value = sanitize_xml_text(value)
            ws.cell(row=r, column=c, value=value)

        # 병합은 값 기록 후, 서식 적용 전에 (병합 시 가장자리 테두리가 덮어써짐)
        for rng in grid.merges:
            try:
                self._merge(ws, rng)
            except RenderFailure as exc:
                logger.warning("merge skipped: %s", exc.reason)

        for (r, c), spec in grid.cells.items():
            self._apply_role(ws.cell(row=r, column=c), spec.role)
        for (r, c), edges in grid.borders.items():
            try:
                ws.cell(row=r, column=c).border = self._border(edges)
            except (AttributeError, ValueError) as exc:
                logger.warning("border skipped at %s%d: %s", get_column_letter(c), r, exc)
        return wb

    @staticmethod
    def _merge(ws, rng: MergeRange) -> None:
        if rng.min_row > rng.max_row or rng.min_col > rng.max_col:
            raise RenderFailure(f"degenerate range {rng}")
        try:
            ws.merge_cells(
                start_row=rng.min_row,
                start_column=rng.min_col,
                end_row=rng.max_row,
                end_column=rng.max_col,
            )
        except (ValueError, TypeError) as exc:
            raise RenderFailure(f"cannot merge {rng}: {exc}") from exc

    def write(self, grid: Grid) -> bytes:
        buffer = BytesIO()
        self.to_workbook(grid).save(buffer)
        return buffer.getvalue()
