import pytest

from token_accrual.data.offer_store import OfferStore
from token_accrual.models.errors import InvalidTermsError, OfferNotFoundError, StaleOfferError
from token_accrual.service.revaluation import SUCCESS_MESSAGE, revalue_all, revalue_offer


class RacingOfferStore(OfferStore):
    """Simulates another writer touching the offer right before each write."""

    def __init__(self, path, races: int):
        super().__init__(path)
        self.races = races

    def update_values(self, symbol, values, expected_revision):
        if self.races > 0:
            self.races -= 1
            self.upsert_offer(self.find_by_symbol(symbol).record)
        return super().update_values(symbol, values, expected_revision)


def _offer(symbol: str = 'ISI02', **overrides) -> dict:
    record = {
        'symbol': symbol,
        'futureValue': 1200,
        'originalPrice': 1000,
        'totalInstallments': 12,
        'startProfitabilityDate': '2024-01-15',
    }
    record.update(overrides)
    return record


def test_revalue_offer_persists_and_returns_breakdown(tmp_path) -> None:
    store = OfferStore(tmp_path / 'offers.json')
    store.upsert_offer(_offer())

    response = revalue_offer(store, 'ISI02', today='2024-03-01')

    assert response == {
        'message': SUCCESS_MESSAGE,
        'tokenSymbol': 'ISI02',
        'updatedInitialPrice': 1008.62,
        'updatedMinInvestiment': 1008.62,
        'dailyIncomeCalculated': response['dailyIncomeCalculated'],
        'daysPassedSinceLastMaturity': 15,
        'daysInPeriodCalculated': 29,
    }
    assert round(response['dailyIncomeCalculated'], 4) == 0.5747
    stored = store.find_by_symbol('ISI02')
    assert stored.record['initialPrice'] == 1008.62
    assert stored.record['minInvestiment'] == 1008.62
    assert stored.revision == 2


def test_revalue_offer_on_maturity_date_resets_price(tmp_path) -> None:
    store = OfferStore(tmp_path / 'offers.json')
    store.upsert_offer(_offer(initialPrice=1008.62))
    response = revalue_offer(store, 'ISI02', today='2024-03-15')
    assert response['updatedInitialPrice'] == 1000.0
    assert response['daysInPeriodCalculated'] == 0
    assert store.find_by_symbol('ISI02').record['initialPrice'] == 1000.0


def test_revalue_offer_retries_after_concurrent_write(tmp_path) -> None:
    store = RacingOfferStore(tmp_path / 'offers.json', races=1)
    store.upsert_offer(_offer())
    response = revalue_offer(store, 'ISI02', today='2024-03-01', max_attempts=3)
    assert response['updatedInitialPrice'] == 1008.62
    assert store.find_by_symbol('ISI02').revision == 3


def test_revalue_offer_gives_up_after_max_attempts(tmp_path) -> None:
    store = RacingOfferStore(tmp_path / 'offers.json', races=5)
    store.upsert_offer(_offer())
    with pytest.raises(StaleOfferError):
        revalue_offer(store, 'ISI02', today='2024-03-01', max_attempts=2)
    assert 'initialPrice' not in store.find_by_symbol('ISI02').record


def test_revalue_offer_unknown_symbol(tmp_path) -> None:
    with pytest.raises(OfferNotFoundError):
        revalue_offer(OfferStore(tmp_path / 'offers.json'), 'NOPE', today='2024-03-01')


def test_revalue_offer_invalid_terms_leave_record_untouched(tmp_path) -> None:
    store = OfferStore(tmp_path / 'offers.json')
    store.upsert_offer(_offer(totalInstallments=0))
    with pytest.raises(InvalidTermsError):
        revalue_offer(store, 'ISI02', today='2024-03-01')
    assert store.find_by_symbol('ISI02').revision == 1


def test_revalue_all_reports_errors_per_offer(tmp_path) -> None:
    store = OfferStore(tmp_path / 'offers.json')
    store.upsert_offer(_offer())
    store.upsert_offer(_offer('ISI31', startProfitabilityDate='2024-01-31'))
    store.upsert_offer(_offer('BROKEN', startProfitabilityDate='someday'))

    batch = revalue_all(store, today='2024-04-15')

    assert batch['symbol'].tolist() == ['ISI02', 'ISI31', 'BROKEN']
    by_symbol = batch.set_index('symbol')
    assert by_symbol.loc['ISI31', 'days_in_period'] == 30
    assert by_symbol.loc['ISI02', 'days_in_period'] == 0
    assert by_symbol.loc['ISI02', 'days_passed'] == 0
    assert by_symbol.loc['ISI02', 'current_value'] == 1000.0
    assert 'startProfitabilityDate' in by_symbol.loc['BROKEN', 'error']
    assert store.find_by_symbol('ISI31').record['initialPrice'] == by_symbol.loc['ISI31', 'current_value']
