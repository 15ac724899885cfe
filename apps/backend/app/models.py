from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from .core.config import settings
from .core.database import Base
from .ledger.rows import resolve_date_key


try:
    LOCAL_ZONE = ZoneInfo(getattr(settings, "TIMEZONE", "Asia/Seoul"))
except (ZoneInfoNotFoundError, ValueError):
    LOCAL_ZONE = ZoneInfo("Asia/Seoul")


CARRY_SETTING_KEY = "carry"


def now_local_naive() -> datetime:
    """Return naive datetime normalized to configured local timezone."""
    return datetime.now(LOCAL_ZONE).replace(tzinfo=None)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)


class Entry(Base, TimestampMixin):
    """One money-in/money-out line of the ledger.

    ``date`` holds the canonical ``YYYY-MM-DD`` key for everything written by this
    service. Rows imported from the old store may instead carry a native
    ``legacy_date`` with ``date`` left empty; readers must accept either.
    """

    __table_args__ = (
        CheckConstraint("income >= 0", name="ck_entry_income_non_negative"),
        CheckConstraint("expense >= 0", name="ck_entry_expense_non_negative"),
        Index("ix_entry_date_id", "date", "id"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    date: Mapped[str | None] = mapped_column(String(32), nullable=True)
    legacy_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    income: Mapped[float] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    expense: Mapped[float] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    tag: Mapped[str | None] = mapped_column(String(100))
    note: Mapped[str | None] = mapped_column(Text)

    @property
    def date_key(self) -> str | None:
        return resolve_date_key(self.date, self.legacy_date)


class CarrySetting(Base):
    """Balance inherited from the period before the ledger starts (singleton row)."""

    key: Mapped[str] = mapped_column(String(32), primary_key=True, default=CARRY_SETTING_KEY)
    prev_year: Mapped[int] = mapped_column(Integer, nullable=False)
    prev_carry: Mapped[float] = mapped_column(Numeric(18, 2), default=0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=now_local_naive, onupdate=now_local_naive, nullable=False)
