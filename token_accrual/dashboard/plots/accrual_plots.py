"""Plotly chart builders for token accrual paths."""

from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from token_accrual.dashboard.components.formatting import plot_axis_number_format


def build_accrual_path_figure(
    path_df: pd.DataFrame,
    *,
    as_of: pd.Timestamp | None = None,
    title: str = 'Token Value Accrual',
) -> go.Figure:
    """Line of daily current value with maturity resets marked."""
    fig = go.Figure()
    fig.add_scatter(
        x=path_df['date'],
        y=path_df['current_value'],
        name='Current Value',
        mode='lines',
        line=dict(shape='hv'),
    )
    resets = path_df[path_df['days_in_period'] == 0]
    if not resets.empty:
        fig.add_scatter(
            x=resets['date'],
            y=resets['current_value'],
            name='Maturity Reset',
            mode='markers',
            marker=dict(symbol='diamond', size=9),
        )
    if as_of is not None:
        match = path_df[path_df['date'] == pd.Timestamp(as_of)]
        if not match.empty:
            fig.add_scatter(
                x=match['date'],
                y=match['current_value'],
                name='As Of',
                mode='markers',
                marker=dict(size=12),
            )
    fig.update_layout(
        title=title,
        xaxis=dict(title='Date'),
        yaxis=dict(title='Current Value'),
    )
    return plot_axis_number_format(fig, y_axes=['yaxis'])


def render_accrual_path_chart(path_df: pd.DataFrame, as_of: pd.Timestamp | None = None) -> None:
    """Render the accrual path chart, or a notice when there is nothing to plot."""
    if path_df.empty:
        st.info('No accrual data available for plotting.')
        return
    st.plotly_chart(build_accrual_path_figure(path_df, as_of=as_of), use_container_width=True)
