"""Read-compute-write revaluation of stored offers."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

import pandas as pd

from token_accrual.calculations.accrual import compute
from token_accrual.config import DEFAULT_MAX_ATTEMPTS
from token_accrual.data.offer_store import OfferStore
from token_accrual.data.validator import parse_instrument_terms
from token_accrual.models.errors import StaleOfferError, TokenAccrualError
from token_accrual.models.instrument import AccrualResult
from token_accrual.utils.date_utils import to_day
from token_accrual.utils.date_utils import today as current_day
from token_accrual.utils.logging import get_logger

LOGGER = get_logger(__name__)

SUCCESS_MESSAGE = 'Token values calculated and updated successfully.'

BATCH_COLUMNS = [
    'symbol',
    'current_value',
    'daily_income',
    'days_passed',
    'days_in_period',
    'last_maturity_date',
    'next_maturity_date',
    'error',
]


def build_response(symbol: str, result: AccrualResult) -> dict[str, Any]:
    """Response body returned to the HTTP caller."""
    return {
        'message': SUCCESS_MESSAGE,
        'tokenSymbol': symbol,
        'updatedInitialPrice': result.current_value,
        'updatedMinInvestiment': result.current_value,
        'dailyIncomeCalculated': result.daily_income,
        'daysPassedSinceLastMaturity': result.days_passed_since_last_maturity,
        'daysInPeriodCalculated': result.days_in_current_period,
    }


def _revalue(store: OfferStore, symbol: str, as_of: pd.Timestamp, max_attempts: int) -> tuple[str, AccrualResult]:
    if max_attempts < 1:
        raise ValueError('max_attempts must be at least 1.')
    attempt = 1
    while True:
        snapshot = store.find_by_symbol(symbol)
        record = dict(snapshot.record)
        record.setdefault('symbol', snapshot.symbol)
        result = compute(parse_instrument_terms(record), as_of)
        try:
            store.update_values(
                snapshot.symbol,
                {'initialPrice': result.current_value, 'minInvestiment': result.current_value},
                expected_revision=snapshot.revision,
            )
        except StaleOfferError:
            if attempt >= max_attempts:
                raise
            LOGGER.warning('[%s] Concurrent update detected, retrying (%d/%d).', symbol, attempt, max_attempts)
            attempt += 1
            continue
        LOGGER.info('[%s] initialPrice and minInvestiment updated to %.2f.', symbol, result.current_value)
        return snapshot.symbol, result


def revalue_offer(
    store: OfferStore,
    symbol: str,
    today: pd.Timestamp | datetime | date | str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> dict[str, Any]:
    """Recompute an offer's current value and persist it as initialPrice and minInvestiment.

    A concurrent write to the same offer between read and write restarts the
    cycle, up to `max_attempts` times.
    """
    as_of = current_day() if today is None else to_day(today)
    stored_symbol, result = _revalue(store, symbol, as_of, max_attempts)
    return build_response(stored_symbol, result)


def revalue_all(
    store: OfferStore,
    today: pd.Timestamp | datetime | date | str | None = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> pd.DataFrame:
    """Revalue every stored offer. Per-offer failures are reported in the error column."""
    as_of = current_day() if today is None else to_day(today)
    rows = []
    for offer in store.list_offers():
        symbol = str(offer['symbol'])
        try:
            _, result = _revalue(store, symbol, as_of, max_attempts)
        except TokenAccrualError as exc:
            LOGGER.warning('[%s] Revaluation failed: %s', symbol, exc)
            rows.append({'symbol': symbol, 'error': str(exc)})
            continue
        rows.append(
            {
                'symbol': symbol,
                'current_value': result.current_value,
                'daily_income': result.daily_income,
                'days_passed': result.days_passed_since_last_maturity,
                'days_in_period': result.days_in_current_period,
                'last_maturity_date': result.last_maturity_date,
                'next_maturity_date': result.next_maturity_date,
                'error': None,
            }
        )
    return pd.DataFrame(rows, columns=BATCH_COLUMNS)
