from datetime import date, datetime

import pandas as pd
import pytest

from token_accrual.models.errors import InvalidDateError
from token_accrual.utils.date_utils import month_anchor, parse_profitability_date, shift_months, to_day


def test_month_anchor_keeps_day_when_month_is_long_enough() -> None:
    assert month_anchor(2024, 3, 31) == pd.Timestamp('2024-03-31')
    assert month_anchor(2024, 4, 28) == pd.Timestamp('2024-04-28')


def test_month_anchor_snaps_to_month_end() -> None:
    assert month_anchor(2024, 4, 31) == pd.Timestamp('2024-04-30')
    assert month_anchor(2024, 2, 31) == pd.Timestamp('2024-02-29')
    assert month_anchor(2025, 2, 29) == pd.Timestamp('2025-02-28')
    assert month_anchor(2025, 2, 30) == pd.Timestamp('2025-02-28')


def test_month_anchor_rolls_year() -> None:
    assert month_anchor(2024, 13, 15) == pd.Timestamp('2025-01-15')
    assert month_anchor(2024, 0, 31) == pd.Timestamp('2023-12-31')


def test_shift_months_uses_requested_day_not_clamped_day() -> None:
    assert shift_months(pd.Timestamp('2024-02-29'), 1, 31) == pd.Timestamp('2024-03-31')
    assert shift_months(pd.Timestamp('2024-03-31'), -1, 31) == pd.Timestamp('2024-02-29')


def test_to_day_strips_time_and_timezone() -> None:
    assert to_day('2024-03-01 23:59:59') == pd.Timestamp('2024-03-01')
    assert to_day(pd.Timestamp('2024-03-01T10:00:00', tz='UTC')) == pd.Timestamp('2024-03-01')
    assert to_day(date(2024, 3, 1)) == pd.Timestamp('2024-03-01')


def test_parse_profitability_date_accepts_strings_and_datetimes() -> None:
    assert parse_profitability_date('2024-01-15') == pd.Timestamp('2024-01-15')
    assert parse_profitability_date(' 2024-01-15T08:30:00Z ') == pd.Timestamp('2024-01-15')
    assert parse_profitability_date(datetime(2024, 1, 15, 12, 0)) == pd.Timestamp('2024-01-15')
    assert parse_profitability_date(date(2024, 1, 15)) == pd.Timestamp('2024-01-15')


@pytest.mark.parametrize('value', ['not-a-date', '', 20240115, True, ['2024-01-15']])
def test_parse_profitability_date_rejects_unreadable_values(value) -> None:
    with pytest.raises(InvalidDateError):
        parse_profitability_date(value)
