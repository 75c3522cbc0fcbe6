import pandas as pd

from token_accrual.calculations.accrual import accrual_path
from token_accrual.dashboard.components.formatting import style_numeric_table
from token_accrual.dashboard.plots.accrual_plots import build_accrual_path_figure
from token_accrual.models.instrument import InstrumentTerms


def _path() -> pd.DataFrame:
    terms = InstrumentTerms(
        future_value=1200.0,
        original_price=1000.0,
        total_installments=12,
        profitability_start_date=pd.Timestamp('2024-01-15'),
    )
    return accrual_path(terms, '2024-01-15', '2024-03-15')


def test_accrual_figure_marks_maturity_resets() -> None:
    fig = build_accrual_path_figure(_path(), as_of=pd.Timestamp('2024-03-01'))
    names = [trace.name for trace in fig.data]
    assert names == ['Current Value', 'Maturity Reset', 'As Of']
    resets = fig.data[1]
    assert len(resets.x) == 3
    assert fig.layout.yaxis.separatethousands is True


def test_accrual_figure_without_as_of() -> None:
    fig = build_accrual_path_figure(_path())
    assert [trace.name for trace in fig.data] == ['Current Value', 'Maturity Reset']


def test_style_numeric_table_formats_by_column_kind() -> None:
    styled = style_numeric_table(_path())
    html = styled.to_html()
    assert '1,000.00' in html
    assert '0.574713' in html


def test_style_numeric_table_passes_through_empty_frames() -> None:
    empty = pd.DataFrame()
    assert style_numeric_table(empty) is empty
