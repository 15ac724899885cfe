"""ledger core tables (entry, carrysetting)

Revision ID: 0001_ledger_core
Revises:
Create Date: 2026-10-17 09:00:00.000000
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001_ledger_core"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    tables = set(inspector.get_table_names())

    if "entry" not in tables:
        op.create_table(
            "entry",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("date", sa.String(length=32), nullable=True),
            sa.Column("legacy_date", sa.DateTime(), nullable=True),
            sa.Column("description", sa.Text(), nullable=False),
            sa.Column("income", sa.Numeric(18, 2), nullable=False, server_default="0"),
            sa.Column("expense", sa.Numeric(18, 2), nullable=False, server_default="0"),
            sa.Column("tag", sa.String(length=100), nullable=True),
            sa.Column("note", sa.Text(), nullable=True),
            sa.Column("created_at", sa.DateTime(), nullable=False),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
            sa.CheckConstraint("income >= 0", name="ck_entry_income_non_negative"),
            sa.CheckConstraint("expense >= 0", name="ck_entry_expense_non_negative"),
        )
        op.create_index("ix_entry_date_id", "entry", ["date", "id"])
        op.create_index("ix_entry_legacy_date", "entry", ["legacy_date"])

    if "carrysetting" not in tables:
        op.create_table(
            "carrysetting",
            sa.Column("key", sa.String(length=32), primary_key=True),
            sa.Column("prev_year", sa.Integer(), nullable=False),
            sa.Column("prev_carry", sa.Numeric(18, 2), nullable=False, server_default="0"),
            sa.Column("updated_at", sa.DateTime(), nullable=False),
        )


def downgrade() -> None:
    bind = op.get_bind()
    tables = set(sa.inspect(bind).get_table_names())
    if "carrysetting" in tables:
        op.drop_table("carrysetting")
    if "entry" in tables:
        op.drop_index("ix_entry_legacy_date", table_name="entry")
        op.drop_index("ix_entry_date_id", table_name="entry")
        op.drop_table("entry")
