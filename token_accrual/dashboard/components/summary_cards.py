"""Summary card renderer for the token valuation KPIs."""

from __future__ import annotations

import streamlit as st

from token_accrual.models.instrument import AccrualResult


def render_summary_cards(result: AccrualResult, title: str = 'Current Valuation') -> None:
    """Render top-level KPI cards."""
    st.subheader(title)
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric('Current Value', f'{result.current_value:,.2f}')
    c2.metric('Accrued Income', f'{result.accrued_income:,.2f}')
    c3.metric('Daily Income', f'{result.daily_income:,.4f}')
    c4.metric('Monthly Income', f'{result.monthly_income:,.2f}')
    c5.metric(
        'Days Passed / In Period',
        f'{result.days_passed_since_last_maturity:,d} / {result.days_in_current_period:,d}',
    )
    st.caption(
        f'Last maturity {result.last_maturity_date.date().isoformat()}, '
        f'next maturity {result.next_maturity_date.date().isoformat()}.'
    )
