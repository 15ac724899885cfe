from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.core.logging import get_logger
from app.ledger.aggregation import Carry, RunningBalance, Summary, aggregate, running_balances
from app.ledger.layout import Grid
from app.ledger.rows import LedgerRow, sort_rows
from app.ledger.segmentation import Segmentation, segment
from app.ledger.workbook import WorkbookRenderer
from app.schemas import EntryFilters

from .carry_service import CarryService
from .entry_service import EntryService

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerReport:
    rows: list[LedgerRow]
    carry: Carry
    summary: Summary
    balances: list[RunningBalance]
    segmentation: Segmentation


class LedgerService:
    """Fetch, order and summarize entries for the listing and the export."""

    def __init__(self, db: Session) -> None:
        self.db = db
        self.entries = EntryService(db)
        self.carry = CarryService(db)

    def report(self, filters: EntryFilters) -> LedgerReport:
        rows = sort_rows(
            (LedgerRow.from_record(e) for e in self.entries.get_all(filters)),
            filters.order,
        )
        carry = self.carry.carry()
        summary = aggregate(rows, carry)
        return LedgerReport(
            rows=rows,
            carry=carry,
            summary=summary,
            balances=running_balances(rows, carry.prev_carry),
            segmentation=segment(rows),
        )

    def export(self, filters: EntryFilters, renderer: WorkbookRenderer) -> tuple[Grid, bytes]:
        report = self.report(filters)
        seg = report.segmentation
        grid = renderer.render(report.summary, report.rows, seg.month_segments, seg.day_segments)
        payload = renderer.write(grid)
        logger.info(
            "workbook rendered: rows=%d merges=%d income=%s expense=%s balance=%s",
            grid.row_count,
            len(grid.merges),
            report.summary.income,
            report.summary.expense,
            report.summary.balance,
        )
        return grid, payload
