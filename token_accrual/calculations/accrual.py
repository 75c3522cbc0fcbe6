"""Maturity-cycle accrual of a token's current value."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

import numpy as np
import pandas as pd

from token_accrual.calculations.maturity import last_maturity_date, next_maturity_date
from token_accrual.data.validator import parse_instrument_terms, validate_terms
from token_accrual.models.instrument import AccrualResult, InstrumentTerms
from token_accrual.utils.date_utils import to_day
from token_accrual.utils.date_utils import today as current_day
from token_accrual.utils.logging import get_logger

LOGGER = get_logger(__name__)

PATH_COLUMNS = [
    'date',
    'last_maturity_date',
    'next_maturity_date',
    'days_passed',
    'days_in_period',
    'daily_income',
    'current_value',
]


def _coerce_terms(terms: InstrumentTerms | Mapping[str, Any]) -> InstrumentTerms:
    if isinstance(terms, InstrumentTerms):
        return validate_terms(terms)
    return parse_instrument_terms(terms)


def _label(terms: InstrumentTerms) -> str:
    return f'[{terms.symbol}] ' if terms.symbol else ''


def monthly_income(terms: InstrumentTerms) -> float:
    """Income earned over one maturity cycle."""
    return terms.total_income / int(terms.total_installments)


def compute(
    terms: InstrumentTerms | Mapping[str, Any],
    today: pd.Timestamp | datetime | date | str | None = None,
) -> AccrualResult:
    """Current value of a token as of `today` (defaults to the current date).

    Income for a cycle accrues linearly per day between the last and the next
    maturity date. On a maturity date itself the value resets to the original
    price and nothing has accrued yet.
    """
    terms = _coerce_terms(terms)
    t = current_day() if today is None else to_day(today)
    label = _label(terms)

    per_month = monthly_income(terms)
    last = last_maturity_date(terms.maturity_day, t)
    nxt = next_maturity_date(terms.maturity_day, last)
    LOGGER.debug(
        '%sToday %s, last maturity %s, next maturity %s',
        label,
        t.date().isoformat(),
        last.date().isoformat(),
        nxt.date().isoformat(),
    )

    if t == last:
        daily_income = 0.0
        days_passed = 0
        days_in_period = 0
        LOGGER.debug('%sEvaluating on a maturity date; daily income is 0.', label)
    else:
        days_in_period = int(round((nxt - last) / pd.Timedelta(days=1)))
        daily_income = per_month / days_in_period
        days_passed = max(int(round((t - last) / pd.Timedelta(days=1))), 0)

    current_value = round(float(terms.original_price) + days_passed * daily_income, 2)
    LOGGER.info(
        '%sCurrent value %.2f (%d of %d days, daily income %.6f)',
        label,
        current_value,
        days_passed,
        days_in_period,
        daily_income,
    )
    return AccrualResult(
        current_value=current_value,
        daily_income=daily_income,
        days_passed_since_last_maturity=days_passed,
        days_in_current_period=days_in_period,
        monthly_income=per_month,
        last_maturity_date=last,
        next_maturity_date=nxt,
    )


def accrual_path(
    terms: InstrumentTerms | Mapping[str, Any],
    start_date: pd.Timestamp | datetime | date | str,
    end_date: pd.Timestamp | datetime | date | str,
) -> pd.DataFrame:
    """Daily current value between two dates inclusive, one row per calendar day."""
    terms = _coerce_terms(terms)
    start = to_day(start_date)
    end = to_day(end_date)
    if end < start:
        return pd.DataFrame(columns=PATH_COLUMNS)

    days = pd.date_range(start=start, end=end, freq='D')
    last = pd.DatetimeIndex([last_maturity_date(terms.maturity_day, d) for d in days])
    nxt = pd.DatetimeIndex([next_maturity_date(terms.maturity_day, d) for d in last])

    on_boundary = np.asarray(days == last)
    period = np.asarray((nxt - last).days, dtype=int)
    passed = np.clip(np.asarray((days - last).days, dtype=int), 0, None)
    period = np.where(on_boundary, 0, period)
    passed = np.where(on_boundary, 0, passed)
    safe_period = np.where(period > 0, period, 1)
    daily = np.where(on_boundary, 0.0, monthly_income(terms) / safe_period)
    base = float(terms.original_price)
    values = [round(base + int(p) * float(d), 2) for p, d in zip(passed, daily)]

    return pd.DataFrame(
        {
            'date': days,
            'last_maturity_date': last,
            'next_maturity_date': nxt,
            'days_passed': passed,
            'days_in_period': period,
            'daily_income': daily,
            'current_value': values,
        },
        columns=PATH_COLUMNS,
    )
