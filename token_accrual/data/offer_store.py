"""JSON-file store for offer records keyed by symbol."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass
import json
import os
from pathlib import Path
import tempfile
import threading
from typing import Any

from token_accrual.models.errors import OfferNotFoundError, StaleOfferError
from token_accrual.utils.logging import get_logger

LOGGER = get_logger(__name__)

STORE_VERSION = 1


@dataclass(frozen=True)
class OfferSnapshot:
    """An offer record as read, with the revision it was read at."""

    symbol: str
    record: dict[str, Any]
    revision: int


def _default_payload() -> dict[str, Any]:
    return {'version': STORE_VERSION, 'offers': []}


def _normalize_payload(payload: Any) -> dict[str, Any]:
    out = _default_payload()
    if not isinstance(payload, dict):
        return out
    out['version'] = int(payload.get('version', STORE_VERSION))
    offers = payload.get('offers', [])
    out['offers'] = [o for o in offers if isinstance(o, dict) and o.get('symbol')] if isinstance(offers, list) else []
    for offer in out['offers']:
        offer['revision'] = int(offer.get('revision', 0))
    return out


class OfferStore:
    """Offer records persisted as a single JSON document.

    Writes carry the revision they were computed from and are rejected when
    the record has moved on in the meantime.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return _default_payload()
        with self.path.open('r', encoding='utf-8') as f:
            raw = json.load(f)
        return _normalize_payload(raw)

    def _save(self, payload: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f'.{self.path.name}.', dir=str(self.path.parent))
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(_normalize_payload(payload), f, indent=2, ensure_ascii=True, default=str)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    @staticmethod
    def _index(payload: dict[str, Any], symbol: str) -> int:
        for i, offer in enumerate(payload['offers']):
            if str(offer.get('symbol')) == symbol:
                return i
        raise OfferNotFoundError(f'Offer with symbol "{symbol}" not found.')

    def list_offers(self) -> list[dict[str, Any]]:
        with self._lock:
            return deepcopy(self._load()['offers'])

    def find_by_symbol(self, symbol: str) -> OfferSnapshot:
        """Return the first offer whose symbol matches."""
        sid = str(symbol)
        with self._lock:
            payload = self._load()
            record = deepcopy(payload['offers'][self._index(payload, sid)])
        return OfferSnapshot(symbol=sid, record=record, revision=int(record.get('revision', 0)))

    def upsert_offer(self, record: dict[str, Any]) -> int:
        """Insert or replace an offer by symbol. Returns the new revision."""
        sid = str(record.get('symbol', '')).strip()
        if not sid:
            raise ValueError('Offer record requires a non-empty symbol.')
        with self._lock:
            payload = self._load()
            new = deepcopy(record)
            new['symbol'] = sid
            try:
                i = self._index(payload, sid)
            except OfferNotFoundError:
                new['revision'] = 1
                payload['offers'].append(new)
            else:
                new['revision'] = int(payload['offers'][i].get('revision', 0)) + 1
                payload['offers'][i] = new
            self._save(payload)
        return new['revision']

    def update_values(self, symbol: str, values: dict[str, Any], expected_revision: int) -> int:
        """Merge `values` into the offer if it is still at `expected_revision`."""
        sid = str(symbol)
        with self._lock:
            payload = self._load()
            i = self._index(payload, sid)
            current = int(payload['offers'][i].get('revision', 0))
            if current != int(expected_revision):
                raise StaleOfferError(
                    f'Offer "{sid}" is at revision {current}, expected {expected_revision}.'
                )
            payload['offers'][i].update(deepcopy(values))
            payload['offers'][i]['revision'] = current + 1
            self._save(payload)
        LOGGER.debug('Offer %s updated to revision %d: %s', sid, current + 1, sorted(values))
        return current + 1
