"""Entry CRUD and the summarized listing."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_entry_filters
from app.schemas import (
    EntriesPageOut,
    EntryCreate,
    EntryFilters,
    EntryOut,
    EntryUpdate,
    LedgerRowOut,
    SummaryOut,
)
from app.services import EntryService, LedgerService

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=EntriesPageOut)
def list_entries(
    filters: EntryFilters = Depends(get_entry_filters),
    db: Session = Depends(get_db),
):
    """Rows in the requested order, each with its running balance, plus the summary."""
    report = LedgerService(db).report(filters)
    rows = [
        LedgerRowOut(
            id=row.id,
            date=row.date_key,
            description=row.description,
            income=bal.income,
            expense=bal.expense,
            balance=bal.balance,
            tag=row.tag,
            note=row.note,
        )
        for row, bal in zip(report.rows, report.balances)
    ]
    return EntriesPageOut(
        rows=rows,
        summary=SummaryOut.model_validate(report.summary),
        filters=filters,
    )


@router.post("", response_model=EntryOut, status_code=201)
def create_entry(payload: EntryCreate, db: Session = Depends(get_db)):
    return EntryService(db).create(payload)


@router.get("/{entry_id}", response_model=EntryOut)
def get_entry(entry_id: int, db: Session = Depends(get_db)):
    return EntryService(db).get(entry_id)


def update_entry(entry_id: int, payload: EntryUpdate, db: Session = Depends(get_db)):
    return EntryService(db).update(entry_id, payload)


router.add_api_route("/{entry_id}", update_entry, methods=["PATCH"], response_model=EntryOut)
# 기존 클라이언트 호환 (PUT)
router.add_api_route("/{entry_id}", update_entry, methods=["PUT"], response_model=EntryOut)


@router.delete("/{entry_id}", status_code=204)
def delete_entry(entry_id: int, db: Session = Depends(get_db)):
    EntryService(db).delete(entry_id)
    return None
