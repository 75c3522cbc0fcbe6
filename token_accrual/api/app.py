"""HTTP entry point: revalue a token by symbol.

Run with ``uvicorn token_accrual.api.app:app``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from token_accrual.config import get_settings
from token_accrual.data.offer_store import OfferStore
from token_accrual.models.errors import OfferNotFoundError, StaleOfferError, TokenAccrualError
from token_accrual.service.revaluation import revalue_offer
from token_accrual.utils.logging import configure_logging, get_logger

LOGGER = get_logger(__name__)


class TokenValueRequest(BaseModel):
    tokenSymbol: Optional[str] = None


class TokenValueResponse(BaseModel):
    message: str
    tokenSymbol: str
    updatedInitialPrice: float
    updatedMinInvestiment: float
    dailyIncomeCalculated: float
    daysPassedSinceLastMaturity: int
    daysInPeriodCalculated: int


def create_app(store: OfferStore | None = None, max_attempts: int | None = None) -> FastAPI:
    """Build the application around an explicitly owned offer store."""
    settings = get_settings()
    configure_logging(settings.log_level)
    offer_store = store if store is not None else OfferStore(settings.store_path)
    attempts = settings.max_attempts if max_attempts is None else max_attempts

    app = FastAPI(title='Token daily value')
    app.state.store = offer_store

    @app.exception_handler(RequestValidationError)
    async def bad_request_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={'detail': f'Invalid request body: {exc.errors()}'},
        )

    @app.post('/calculateTokenDailyValue', response_model=TokenValueResponse)
    def calculate_token_daily_value(req: Optional[TokenValueRequest] = None) -> dict:
        symbol = (req.tokenSymbol or '').strip() if req is not None else ''
        if not symbol:
            raise HTTPException(
                status_code=400,
                detail='Missing tokenSymbol in request body. Please provide a tokenSymbol (e.g., {"tokenSymbol": "ISI02"}).',
            )
        try:
            return revalue_offer(offer_store, symbol, max_attempts=attempts)
        except OfferNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StaleOfferError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        except TokenAccrualError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except Exception as exc:
            LOGGER.exception('Error calculating token daily value for %s', symbol)
            raise HTTPException(status_code=500, detail=f'Internal Server Error: {exc}') from exc

    return app


app = create_app()
