"""Date helpers for maturity-cycle arithmetic."""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd

from token_accrual.models.errors import InvalidDateError


def to_timestamp(value: pd.Timestamp | datetime | date | str) -> pd.Timestamp:
    """Convert an input value to a timezone-naive pandas Timestamp."""
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        return ts
    if ts.tz is not None:
        ts = ts.tz_convert(None)
    return ts


def to_day(value: pd.Timestamp | datetime | date | str) -> pd.Timestamp:
    """Timezone-naive timestamp truncated to midnight."""
    ts = to_timestamp(value)
    return ts if ts is pd.NaT else ts.normalize()


def today() -> pd.Timestamp:
    return pd.Timestamp.now().normalize()


def parse_profitability_date(value: object) -> pd.Timestamp:
    """Read a stored profitability start date (ISO string or datetime-like).

    Raises InvalidDateError for any other representation or an unparseable string.
    """
    if isinstance(value, bool) or not isinstance(value, (str, date, datetime, pd.Timestamp)):
        raise InvalidDateError(
            f'Invalid startProfitabilityDate format {type(value).__name__!r}. '
            'Expected a timestamp or ISO date string.'
        )
    try:
        ts = to_day(value.strip() if isinstance(value, str) else value)
    except (ValueError, TypeError, OverflowError) as exc:
        raise InvalidDateError(f'Cannot parse startProfitabilityDate {value!r}: {exc}') from exc
    if pd.isna(ts):
        raise InvalidDateError(f'Cannot parse startProfitabilityDate {value!r}.')
    return ts


def month_anchor(year: int, month: int, day: int) -> pd.Timestamp:
    """Date for `day` in the given month, snapped to the month end when the month is shorter.

    `month` may fall outside 1..12 and rolls the year accordingly.
    """
    year, month0 = divmod(year * 12 + (month - 1), 12)
    first = pd.Timestamp(year=year, month=month0 + 1, day=1)
    return first.replace(day=min(int(day), first.days_in_month))


def shift_months(ts: pd.Timestamp, months: int, day: int) -> pd.Timestamp:
    """Anchor `day` in the month `months` away from `ts`."""
    return month_anchor(ts.year, ts.month + months, day)
