"""Instrument terms and accrual result models."""

from __future__ import annotations

from dataclasses import dataclass
import pandas as pd


@dataclass(frozen=True)
class InstrumentTerms:
    """Origination terms of a fixed-income token."""

    future_value: float
    original_price: float
    total_installments: int
    profitability_start_date: pd.Timestamp
    symbol: str | None = None

    @property
    def maturity_day(self) -> int:
        return int(self.profitability_start_date.day)

    @property
    def total_income(self) -> float:
        return float(self.future_value) - float(self.original_price)


@dataclass(frozen=True)
class AccrualResult:
    """Current value of a token plus the breakdown used to reach it."""

    current_value: float
    daily_income: float
    days_passed_since_last_maturity: int
    days_in_current_period: int
    monthly_income: float
    last_maturity_date: pd.Timestamp
    next_maturity_date: pd.Timestamp

    @property
    def accrued_income(self) -> float:
        return self.days_passed_since_last_maturity * self.daily_income

