"""backfill canonical text dates from legacy_date

Rows imported from the old store carry a native ``legacy_date`` or a free-form
text date. Rewrite ``date`` as the canonical ``YYYY-MM-DD`` key (the UTC calendar
date of ``legacy_date`` when the text is empty).
``legacy_date`` is kept; the range filter still reads it for rows this misses.

Revision ID: 0002_backfill_entry_dates
Revises: 0001_ledger_core
Create Date: 2026-10-17 09:30:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.ledger.dates import normalize


# revision identifiers, used by Alembic.
revision: str = "0002_backfill_entry_dates"
down_revision: Union[str, Sequence[str], None] = "0001_ledger_core"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


entry = sa.table(
    "entry",
    sa.column("id", sa.Integer()),
    sa.column("date", sa.String()),
    sa.column("legacy_date", sa.DateTime()),
)


def upgrade() -> None:
    bind = op.get_bind()
    rows = bind.execute(sa.select(entry.c.id, entry.c.date, entry.c.legacy_date)).all()
    for row in rows:
        current = row.date
        key = normalize(current) if current else normalize(row.legacy_date)
        if key and key != current:
            bind.execute(sa.update(entry).where(entry.c.id == row.id).values(date=key))


def downgrade() -> None:
    # 정규화 이전 텍스트는 보관하지 않으므로 되돌리지 않는다
    pass
