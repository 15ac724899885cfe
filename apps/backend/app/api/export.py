"""Spreadsheet download of the (filtered) ledger."""

from urllib.parse import quote

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_entry_filters, get_workbook_renderer
from app.ledger.workbook import WorkbookRenderer
from app.models import now_local_naive
from app.schemas import EntryFilters
from app.services import LedgerService

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = APIRouter(prefix="/entries", tags=["export"])


def export_filename(prefix: str, when=None) -> str:
    when = when or now_local_naive()
    return f"{prefix}_{when:%Y%m%d}.xlsx"


def content_disposition(filename: str) -> str:
    # 한글 파일명: ASCII 대체명 + RFC 5987 filename*
    fallback = filename.encode("ascii", "ignore").decode("ascii").lstrip("_") or "ledger.xlsx"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@router.get("/export.xlsx")
def export_entries(
    filters: EntryFilters = Depends(get_entry_filters),
    db: Session = Depends(get_db),
    renderer: WorkbookRenderer = Depends(get_workbook_renderer),
):
    _, payload = LedgerService(db).export(filters, renderer)
    filename = export_filename(settings.EXPORT_TITLE_PREFIX)
    return Response(
        content=payload,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(filename)},
    )
