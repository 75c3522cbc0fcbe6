"""Excel offers loader and schema normalization."""

from __future__ import annotations

from typing import Any

import pandas as pd

from token_accrual.data.validator import validate_offers
from token_accrual.utils.logging import get_logger

LOGGER = get_logger(__name__)

OFFERS_SHEET = 'Offers'

OFFER_COLUMN_MAP = {
    'symbol': 'symbol',
    'token_symbol': 'symbol',
    'futurevalue': 'futureValue',
    'future_value': 'futureValue',
    'originalprice': 'originalPrice',
    'original_price': 'originalPrice',
    'totalinstallments': 'totalInstallments',
    'total_installments': 'totalInstallments',
    'startprofitabilitydate': 'startProfitabilityDate',
    'start_profitability_date': 'startProfitabilityDate',
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    out = df.copy()
    out.columns = [str(c).strip().lower() for c in out.columns]
    return out


def load_offers_workbook(path: str) -> pd.DataFrame:
    """Load, normalize, and validate the offers sheet from a workbook."""
    raw = pd.read_excel(path, sheet_name=OFFERS_SHEET)
    offers = _normalize_columns(raw).rename(columns=OFFER_COLUMN_MAP)

    if 'symbol' in offers.columns:
        offers['symbol'] = offers['symbol'].astype(str).str.strip()
    if 'startProfitabilityDate' in offers.columns:
        offers['startProfitabilityDate'] = pd.to_datetime(offers['startProfitabilityDate']).dt.normalize()
    for col in ['futureValue', 'originalPrice', 'totalInstallments']:
        if col in offers.columns:
            offers[col] = pd.to_numeric(offers[col])

    for warning in validate_offers(offers):
        LOGGER.warning(warning)

    offers['totalInstallments'] = offers['totalInstallments'].astype(int)
    return offers.reset_index(drop=True)


def offers_to_records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a loaded offers table into store records with ISO start dates."""
    records = []
    for row in df.to_dict(orient='records'):
        record = dict(row)
        record['futureValue'] = float(record['futureValue'])
        record['originalPrice'] = float(record['originalPrice'])
        record['totalInstallments'] = int(record['totalInstallments'])
        record['startProfitabilityDate'] = pd.Timestamp(record['startProfitabilityDate']).date().isoformat()
        records.append(record)
    return records
