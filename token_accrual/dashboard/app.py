"""Streamlit app entrypoint for the token valuation viewer."""

from __future__ import annotations

from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pandas as pd
import streamlit as st

from token_accrual.calculations.accrual import accrual_path, compute
from token_accrual.calculations.maturity import maturity_schedule
from token_accrual.config import get_settings
from token_accrual.dashboard.components.formatting import style_numeric_table
from token_accrual.dashboard.components.summary_cards import render_summary_cards
from token_accrual.dashboard.plots.accrual_plots import render_accrual_path_chart
from token_accrual.dashboard.reporting.export_pack import (
    build_export_context,
    build_export_workbook_bytes,
    default_export_filename,
)
from token_accrual.data.loader import load_offers_workbook, offers_to_records
from token_accrual.data.offer_store import OfferStore
from token_accrual.data.validator import parse_instrument_terms
from token_accrual.models.errors import TokenAccrualError
from token_accrual.service.revaluation import revalue_all, revalue_offer
from token_accrual.utils.logging import configure_logging


def _import_workbook(store: OfferStore) -> None:
    upload = st.sidebar.file_uploader('Import offers workbook', type=['xlsx'])
    if upload is None:
        return
    if not st.sidebar.button('Import offers'):
        return
    try:
        offers = load_offers_workbook(upload)
    except ValueError as exc:
        st.sidebar.error(f'Import failed: {exc}')
        return
    for record in offers_to_records(offers):
        store.upsert_offer(record)
    st.sidebar.success(f'Imported {len(offers):,d} offers.')


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    st.set_page_config(page_title='Token Value', layout='wide')
    st.title('Token Daily Value')

    store = OfferStore(settings.store_path)
    _import_workbook(store)

    offers = store.list_offers()
    if not offers:
        st.info(f'No offers found in {settings.store_path}. Import a workbook from the sidebar.')
        return

    symbols = sorted(str(o['symbol']) for o in offers)
    symbol = st.sidebar.selectbox('Token symbol', symbols)
    as_of = pd.Timestamp(st.sidebar.date_input('As of date', value=pd.Timestamp.now().date()))

    snapshot = store.find_by_symbol(symbol)
    try:
        terms = parse_instrument_terms({**snapshot.record, 'symbol': symbol})
        result = compute(terms, as_of)
    except TokenAccrualError as exc:
        st.error(f'Offer {symbol} cannot be valued: {exc}')
        return

    render_summary_cards(result)

    path_df = accrual_path(
        terms,
        result.last_maturity_date - pd.DateOffset(months=1),
        result.next_maturity_date,
    )
    render_accrual_path_chart(path_df, as_of=as_of)

    with st.expander('Maturity schedule'):
        st.dataframe(style_numeric_table(maturity_schedule(terms)), use_container_width=True)

    c1, c2, c3 = st.columns(3)
    if c1.button('Persist value for this offer'):
        try:
            response = revalue_offer(store, symbol, today=as_of, max_attempts=settings.max_attempts)
        except TokenAccrualError as exc:
            st.error(str(exc))
        else:
            st.success(f"initialPrice updated to {response['updatedInitialPrice']:,.2f}.")
    if c2.button('Revalue all offers'):
        batch = revalue_all(store, today=as_of, max_attempts=settings.max_attempts)
        st.dataframe(style_numeric_table(batch), use_container_width=True)

    context = build_export_context(terms, result, as_of)
    c3.download_button(
        'Download Excel',
        data=build_export_workbook_bytes(context, workbook_title=f'Token value {symbol}'),
        file_name=default_export_filename(symbol, as_of),
        mime='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    )


if __name__ == '__main__':
    main()
