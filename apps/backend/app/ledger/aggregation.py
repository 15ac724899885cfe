"""Totals, carry-forward balance and running balance over an ordered ledger."""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal
from itertools import accumulate
from typing import Any, Sequence

from .dates import year_of
from .rows import LedgerRow


def num(value: Any) -> float:
    """Coerce to a finite float; anything else counts as 0."""
    if value is None or isinstance(value, bool):
        return float(value or 0)
    if isinstance(value, Decimal):
        value = float(value) if value.is_finite() else 0.0
    try:
        out = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0
    return out if math.isfinite(out) else 0.0


@dataclass(frozen=True)
class Carry:
    prev_year: int
    prev_carry: float = 0.0

    @property
    def target_year(self) -> int:
        return self.prev_year + 1


@dataclass(frozen=True)
class SummaryDetail:
    prev_year: int
    target_year: int
    prev_carry: float
    target_year_income: float
    target_year_expense: float
    target_year_balance: float


@dataclass(frozen=True)
class Summary:
    income: float
    expense: float
    balance: float
    detail: SummaryDetail


@dataclass(frozen=True)
class RunningBalance:
    index: int
    row_id: Any
    income: float
    expense: float
    balance: float


def _totals(rows: Sequence[LedgerRow]) -> tuple[float, float]:
    return (
        sum(num(r.income) for r in rows),
        sum(num(r.expense) for r in rows),
    )


def aggregate(rows: Sequence[LedgerRow], carry: Carry) -> Summary:
    """Summarize ``rows`` (already sorted) against the carried-in balance.

    The target year is ``carry.prev_year + 1``. Rows without a usable date count
    toward the overall totals only.
    """
    prev_carry = num(carry.prev_carry)
    income, expense = _totals(rows)

    target_year = carry.target_year
    in_year = [r for r in rows if year_of(r.date_key) == target_year]
    year_income, year_expense = _totals(in_year)

    return Summary(
        income=income,
        expense=expense,
        balance=prev_carry + income - expense,
        detail=SummaryDetail(
            prev_year=carry.prev_year,
            target_year=target_year,
            prev_carry=prev_carry,
            target_year_income=year_income,
            target_year_expense=year_expense,
            target_year_balance=prev_carry + year_income - year_expense,
        ),
    )


def running_balances(rows: Sequence[LedgerRow], seed: Any = 0) -> list[RunningBalance]:
    """Prefix-sum balance after each row, starting from ``seed``."""
    deltas = [num(r.income) - num(r.expense) for r in rows]
    totals = list(accumulate(deltas, initial=num(seed)))[1:]
    return [
        RunningBalance(
            index=i,
            row_id=r.id,
            income=num(r.income),
            expense=num(r.expense),
            balance=totals[i],
        )
        for i, r in enumerate(rows)
    ]
