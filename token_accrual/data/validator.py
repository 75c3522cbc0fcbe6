"""Validation of offer records and offer tables."""

from __future__ import annotations

from collections.abc import Mapping
import math
from numbers import Integral, Real
from typing import Any

import pandas as pd

from token_accrual.models.errors import InvalidTermsError
from token_accrual.models.instrument import InstrumentTerms
from token_accrual.utils.date_utils import parse_profitability_date
from token_accrual.utils.logging import get_logger

LOGGER = get_logger(__name__)

REQUIRED_FIELDS = [
    'futureValue',
    'originalPrice',
    'totalInstallments',
    'startProfitabilityDate',
]

OFFER_REQUIRED_COLUMNS = ['symbol'] + REQUIRED_FIELDS


def _missing_fields(record: Mapping[str, Any], required: list[str]) -> list[str]:
    missing = []
    for field in required:
        value = record.get(field)
        if value is None or (isinstance(value, float) and math.isnan(value)):
            missing.append(field)
    return missing


def _as_number(field: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidTermsError(f'Field {field} must be a number, got {value!r}.')
    number = float(value)
    if not math.isfinite(number):
        raise InvalidTermsError(f'Field {field} must be a finite number, got {value!r}.')
    return number


def _as_installments(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidTermsError(f'totalInstallments must be a positive integer, got {value!r}.')
    if isinstance(value, Integral):
        count = int(value)
    elif isinstance(value, Real) and math.isfinite(float(value)) and float(value).is_integer():
        count = int(value)
    else:
        raise InvalidTermsError(f'totalInstallments must be a positive integer, got {value!r}.')
    if count <= 0:
        raise InvalidTermsError(f'totalInstallments must be a positive integer, got {value!r}.')
    return count


def parse_instrument_terms(record: Mapping[str, Any]) -> InstrumentTerms:
    """Build typed terms from a stored offer record.

    Raises InvalidTermsError for missing or non-numeric fields and
    InvalidDateError for an unreadable startProfitabilityDate.
    """
    if not isinstance(record, Mapping):
        raise InvalidTermsError(f'Offer record must be a mapping, got {type(record).__name__}.')
    missing = _missing_fields(record, REQUIRED_FIELDS)
    if missing:
        raise InvalidTermsError(f'Missing required offer fields: {missing}')

    future_value = _as_number('futureValue', record['futureValue'])
    original_price = _as_number('originalPrice', record['originalPrice'])
    installments = _as_installments(record['totalInstallments'])
    start = parse_profitability_date(record['startProfitabilityDate'])
    symbol = record.get('symbol')

    if original_price >= future_value:
        LOGGER.warning(
            'Offer %s has originalPrice %s >= futureValue %s; income is not positive.',
            symbol,
            original_price,
            future_value,
        )

    return InstrumentTerms(
        future_value=future_value,
        original_price=original_price,
        total_installments=installments,
        profitability_start_date=start,
        symbol=None if symbol is None else str(symbol),
    )


def validate_offers(df: pd.DataFrame) -> list[str]:
    """Validate a normalized offers table and return non-fatal warnings."""
    missing = [col for col in OFFER_REQUIRED_COLUMNS if col not in set(df.columns)]
    if missing:
        raise ValueError(f'Missing required offer columns: {missing}')

    warnings: list[str] = []

    if df['symbol'].duplicated().any():
        raise ValueError('Duplicate symbol values found.')

    if not pd.api.types.is_datetime64_any_dtype(df['startProfitabilityDate']):
        raise ValueError('Column startProfitabilityDate must be datetime64 dtype.')

    for col in ['futureValue', 'originalPrice', 'totalInstallments']:
        if not pd.api.types.is_numeric_dtype(df[col]):
            raise ValueError(f'Column {col} must be numeric dtype.')

    if df[OFFER_REQUIRED_COLUMNS].isna().any().any():
        raise ValueError('Offers contain nulls in required columns.')

    installments = df['totalInstallments'].astype(float)
    bad_installments = int(((installments <= 0) | (installments % 1 != 0)).sum())
    if bad_installments:
        raise ValueError(f'{bad_installments} offers have totalInstallments that is not a positive integer.')

    non_positive_income = int((df['futureValue'] <= df['originalPrice']).sum())
    if non_positive_income:
        warnings.append(f'{non_positive_income} offers have futureValue <= originalPrice.')

    long_month_anchor = int((df['startProfitabilityDate'].dt.day > 28).sum())
    if long_month_anchor:
        warnings.append(
            f'{long_month_anchor} offers mature after day 28 and will snap to month end in short months.'
        )

    return warnings


def validate_terms(terms: InstrumentTerms) -> InstrumentTerms:
    """Re-check directly constructed terms with the same rules as stored records."""
    return parse_instrument_terms(
        {
            'symbol': terms.symbol,
            'futureValue': terms.future_value,
            'originalPrice': terms.original_price,
            'totalInstallments': terms.total_installments,
            'startProfitabilityDate': terms.profitability_start_date,
        }
    )
