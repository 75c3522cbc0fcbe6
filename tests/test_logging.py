import logging

from token_accrual.calculations.accrual import compute
from token_accrual.utils.logging import ROOT_LOGGER_NAME, get_logger


def test_get_logger_nests_under_package_root() -> None:
    assert get_logger('token_accrual.data.loader').name == 'token_accrual.data.loader'
    assert get_logger('scripts.batch').name == f'{ROOT_LOGGER_NAME}.scripts.batch'


def test_compute_logs_value_with_symbol(caplog) -> None:
    record = {
        'symbol': 'ISI02',
        'futureValue': 1200,
        'originalPrice': 1000,
        'totalInstallments': 12,
        'startProfitabilityDate': '2024-01-15',
    }
    with caplog.at_level(logging.DEBUG, logger=ROOT_LOGGER_NAME):
        compute(record, '2024-03-01')
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith('[ISI02] Current value 1008.62') for m in messages)
    assert any('last maturity 2024-02-15' in m for m in messages)
