"""Excel export of a token valuation."""

from __future__ import annotations

from datetime import datetime
from io import BytesIO
import re
from typing import Any

import numpy as np
import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from token_accrual.calculations.accrual import accrual_path
from token_accrual.calculations.maturity import maturity_schedule
from token_accrual.models.instrument import AccrualResult, InstrumentTerms

SHEET_SUMMARY = 'Summary'
SHEET_PATH = 'Accrual_Path'
SHEET_SCHEDULE = 'Maturity_Schedule'


def default_export_filename(symbol: str | None, as_of: pd.Timestamp) -> str:
    """Return a deterministic export filename."""
    safe_symbol = re.sub(r'[^A-Za-z0-9_-]+', '_', str(symbol or 'token')).strip('_') or 'token'
    return f'token_value_{safe_symbol}_{pd.Timestamp(as_of).date().isoformat()}.xlsx'


def build_export_context(
    terms: InstrumentTerms,
    result: AccrualResult,
    as_of: pd.Timestamp,
) -> dict[str, pd.DataFrame]:
    """Build the dataframes behind each export sheet.

    The accrual path covers the previous and the current maturity cycle.
    """
    path_start = result.last_maturity_date - pd.DateOffset(months=1)
    summary = pd.DataFrame(
        [
            ('symbol', terms.symbol or ''),
            ('as_of_date', pd.Timestamp(as_of)),
            ('future_value', terms.future_value),
            ('original_price', terms.original_price),
            ('total_installments', terms.total_installments),
            ('profitability_start_date', terms.profitability_start_date),
            ('maturity_day', terms.maturity_day),
            ('monthly_income', result.monthly_income),
            ('daily_income', result.daily_income),
            ('days_passed', result.days_passed_since_last_maturity),
            ('days_in_period', result.days_in_current_period),
            ('accrued_income', result.accrued_income),
            ('last_maturity_date', result.last_maturity_date),
            ('next_maturity_date', result.next_maturity_date),
            ('current_value', result.current_value),
        ],
        columns=['metric', 'value'],
    )
    return {
        SHEET_SUMMARY: summary,
        SHEET_PATH: accrual_path(terms, path_start, result.next_maturity_date),
        SHEET_SCHEDULE: maturity_schedule(terms),
    }


def _format_worksheet(ws, *, freeze_panes: str = 'A2') -> None:
    ws.freeze_panes = freeze_panes
    max_row = ws.max_row
    max_col = ws.max_column
    if max_row <= 0 or max_col <= 0:
        return

    headers: dict[int, str] = {}
    for col_idx in range(1, max_col + 1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = Font(bold=True)
        headers[col_idx] = str(cell.value or '').strip().lower()

    for row_idx in range(2, max_row + 1):
        for col_idx in range(1, max_col + 1):
            cell = ws.cell(row=row_idx, column=col_idx)
            if isinstance(cell.value, (pd.Timestamp, datetime)):
                cell.number_format = 'YYYY-MM-DD'
                continue
            if isinstance(cell.value, bool):
                continue
            if isinstance(cell.value, (int, float, np.integer, np.floating)):
                header = headers.get(col_idx, '')
                if 'daily_income' in header:
                    cell.number_format = '#,##0.000000'
                elif header.startswith('days') or header == 'installment':
                    cell.number_format = '#,##0'
                else:
                    cell.number_format = '#,##0.00'

    for col_idx in range(1, max_col + 1):
        max_len = 0
        for row_idx in range(1, min(max_row, 200) + 1):
            val = ws.cell(row=row_idx, column=col_idx).value
            text = '' if val is None else str(val)
            max_len = max(max_len, len(text))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max(10, max_len + 2), 60)


def build_export_workbook_bytes(context: dict[str, Any], *, workbook_title: str) -> bytes:
    """Serialize export context into an Excel workbook."""
    output = BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        for sheet in (SHEET_SUMMARY, SHEET_PATH, SHEET_SCHEDULE):
            pd.DataFrame(context.get(sheet, pd.DataFrame())).to_excel(writer, sheet_name=sheet, index=False)
        writer.book.properties.title = str(workbook_title)
        for sheet in (SHEET_SUMMARY, SHEET_PATH, SHEET_SCHEDULE):
            _format_worksheet(writer.sheets[sheet])
    return output.getvalue()
