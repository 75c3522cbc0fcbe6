"""Monthly maturity-cycle boundaries."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd

from token_accrual.models.instrument import InstrumentTerms
from token_accrual.utils.date_utils import month_anchor, shift_months, to_day


def last_maturity_date(
    maturity_day: int,
    as_of_date: pd.Timestamp | datetime | date | str,
) -> pd.Timestamp:
    """Most recent cycle boundary on or before the as-of date.

    Days past the end of a short month snap to that month's last day.
    """
    t = to_day(as_of_date)
    candidate = month_anchor(t.year, t.month, maturity_day)
    if candidate > t:
        candidate = shift_months(candidate, -1, maturity_day)
    return candidate


def next_maturity_date(maturity_day: int, last_maturity: pd.Timestamp) -> pd.Timestamp:
    """Cycle boundary one calendar month after `last_maturity`, same clamping."""
    return shift_months(to_day(last_maturity), 1, maturity_day)


def maturity_schedule(terms: InstrumentTerms) -> pd.DataFrame:
    """One row per installment: maturity dates following the profitability start."""
    start = terms.profitability_start_date
    rows = []
    previous = start
    for installment in range(1, int(terms.total_installments) + 1):
        maturity = shift_months(start, installment, terms.maturity_day)
        rows.append(
            {
                'installment': installment,
                'period_start': previous,
                'maturity_date': maturity,
                'days_in_period': int((maturity - previous).days),
            }
        )
        previous = maturity
    return pd.DataFrame(rows, columns=['installment', 'period_start', 'maturity_date', 'days_in_period'])
