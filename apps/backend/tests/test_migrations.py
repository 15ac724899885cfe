from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic import command
from alembic.config import Config

pytestmark = pytest.mark.slow

BACKEND_DIR = Path(__file__).resolve().parents[1]


@pytest.fixture()
def alembic_cfg(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrate.sqlite3'}"
    cfg = Config()
    cfg.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url)
    return cfg, url


def test_upgrade_creates_tables(alembic_cfg):
    cfg, url = alembic_cfg
    command.upgrade(cfg, "head")
    eng = sa.create_engine(url)
    try:
        tables = set(sa.inspect(eng).get_table_names())
        assert {"entry", "carrysetting", "alembic_version"} <= tables
    finally:
        eng.dispose()


def test_backfill_canonical_dates(alembic_cfg):
    cfg, url = alembic_cfg
    command.upgrade(cfg, "0001_ledger_core")

    eng = sa.create_engine(url)
    entry = sa.table(
        "entry",
        sa.column("id", sa.Integer()),
        sa.column("date", sa.String()),
        sa.column("legacy_date", sa.DateTime()),
        sa.column("description", sa.Text()),
        sa.column("created_at", sa.DateTime()),
        sa.column("updated_at", sa.DateTime()),
    )
    now = datetime(2024, 1, 1)
    stamp = {"created_at": now, "updated_at": now}
    try:
        with eng.begin() as conn:
            conn.execute(
                sa.insert(entry),
                [
                    {"id": 1, "date": None, "legacy_date": datetime(2023, 5, 6, 22, 0), "description": "a", **stamp},
                    {"id": 2, "date": "2023/7/8", "legacy_date": None, "description": "b", **stamp},
                    {"id": 3, "date": "2023-09-10", "legacy_date": None, "description": "c", **stamp},
                    {"id": 4, "date": "unknown", "legacy_date": None, "description": "d", **stamp},
                ],
            )

        command.upgrade(cfg, "head")

        with eng.connect() as conn:
            dates = dict(conn.execute(sa.select(entry.c.id, entry.c.date)).all())
        assert dates == {1: "2023-05-06", 2: "2023-07-08", 3: "2023-09-10", 4: "unknown"}
    finally:
        eng.dispose()
