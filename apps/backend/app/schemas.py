from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

from .ledger.aggregation import num
from .ledger.dates import is_ymd, normalize
from .utils import clean_text


def _money(v: Any, field_name: str) -> float:
    amount = num(v)
    if amount < 0:
        raise ValueError(f"{field_name} must be >= 0")
    return amount


# ======================== Entries ========================

class EntryCreate(BaseModel):
    """New ledger line. ``date`` accepts any date-like value and is stored as ``YYYY-MM-DD``."""

    date: str
    description: str = Field(validation_alias=AliasChoices("description", "desc"))
    income: float = 0
    expense: float = 0
    tag: Optional[str] = Field(default=None, max_length=100)
    note: Optional[str] = None
    model_config = ConfigDict(extra="ignore")

    @field_validator("date", mode="before")
    def normalize_date(cls, v: Any) -> str:
        ymd = normalize(v)
        if not ymd:
            raise ValueError("date is required (YYYY-MM-DD)")
        return ymd

    @field_validator("description", mode="before")
    def description_required(cls, v: Any) -> str:
        text = clean_text(v)
        if not text:
            raise ValueError("description is required")
        return text

    @field_validator("income", "expense", mode="before")
    def coerce_money(cls, v: Any, info) -> float:
        return _money(v, info.field_name)

    @field_validator("tag", "note", mode="before")
    def strip_optional(cls, v: Any) -> Optional[str]:
        return clean_text(v)


class EntryUpdate(BaseModel):
    """Partial update; only fields present in the request body are applied."""

    date: Optional[str] = None
    description: Optional[str] = Field(default=None, validation_alias=AliasChoices("description", "desc"))
    income: Optional[float] = None
    expense: Optional[float] = None
    tag: Optional[str] = Field(default=None, max_length=100)
    note: Optional[str] = None
    model_config = ConfigDict(extra="ignore")

    @field_validator("date", mode="before")
    def normalize_date(cls, v: Any) -> Optional[str]:
        # 해석할 수 없는 날짜는 변경 항목에서 제외된다 (서비스에서 None 제거)
        return normalize(v) if v not in (None, "") else None

    @field_validator("description", mode="before")
    def description_not_blank(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        if not text:
            raise ValueError("description must not be blank")
        return text

    @field_validator("income", "expense", mode="before")
    def coerce_money(cls, v: Any, info) -> Optional[float]:
        if v is None:
            return None
        return _money(v, info.field_name)

    @field_validator("tag", "note", mode="before")
    def strip_optional(cls, v: Any) -> Optional[str]:
        return clean_text(v)

    def changes(self) -> dict[str, Any]:
        data = self.model_dump(exclude_unset=True)
        if data.get("date") is None:
            data.pop("date", None)
        for key in ("description", "income", "expense"):
            if key in data and data[key] is None:
                data.pop(key)
        return data


class EntryOut(BaseModel):
    id: int
    date: Optional[str] = Field(default=None, validation_alias=AliasChoices("date_key", "date"))
    description: str
    income: float
    expense: float
    tag: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LedgerRowOut(BaseModel):
    id: int
    date: Optional[str] = Field(default=None, validation_alias=AliasChoices("date_key", "date"))
    description: str
    income: float
    expense: float
    balance: float
    tag: Optional[str] = None
    note: Optional[str] = None


class EntryFilters(BaseModel):
    """Listing/export query. Malformed bounds silently mean "no bound"."""

    start: Optional[str] = None
    end: Optional[str] = None
    q: Optional[str] = None
    order: Literal["asc", "desc"] = "asc"

    @field_validator("start", "end", mode="before")
    def drop_invalid_bound(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        text = str(v).strip()
        return text if is_ymd(text) else None

    @field_validator("q", mode="before")
    def strip_query(cls, v: Any) -> Optional[str]:
        return clean_text(v)

    @field_validator("order", mode="before")
    def default_order(cls, v: Any) -> str:
        return "desc" if str(v or "").strip().lower() == "desc" else "asc"


# ======================== Summary ========================

class SummaryDetailOut(BaseModel):
    prev_year: int
    target_year: int
    prev_carry: float
    target_year_income: float
    target_year_expense: float
    target_year_balance: float

    model_config = ConfigDict(from_attributes=True)


class SummaryOut(BaseModel):
    income: float
    expense: float
    balance: float
    detail: SummaryDetailOut

    model_config = ConfigDict(from_attributes=True)


class EntriesPageOut(BaseModel):
    rows: list[LedgerRowOut]
    summary: SummaryOut
    filters: EntryFilters


# ======================== Settings ========================

class CarrySettingIn(BaseModel):
    prev_year: int = Field(validation_alias=AliasChoices("prev_year", "prevYear"))
    prev_carry: float = Field(validation_alias=AliasChoices("prev_carry", "prevCarry"))
    model_config = ConfigDict(extra="ignore")

    @field_validator("prev_year", mode="before")
    def year_finite(cls, v: Any) -> int:
        # 유한한 숫자면 허용, 소수부는 버림
        try:
            year = float(v)
        except (TypeError, ValueError, OverflowError):
            raise ValueError("prev_year must be finite number") from None
        if not math.isfinite(year):
            raise ValueError("prev_year must be finite number")
        return int(year)

    @field_validator("prev_carry")
    def carry_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("prev_carry must be finite number")
        return v


class CarrySettingOut(BaseModel):
    prev_year: int
    prev_carry: float
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def target_year(self) -> int:
        return self.prev_year + 1
