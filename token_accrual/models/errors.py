"""Error taxonomy for instrument valuation."""

from __future__ import annotations


class TokenAccrualError(ValueError):
    """Base class for domain errors surfaced to callers."""


class InvalidTermsError(TokenAccrualError):
    """Required instrument fields are missing or not usable numbers."""


class InvalidDateError(TokenAccrualError):
    """The profitability start date cannot be read as a calendar date."""


class OfferNotFoundError(TokenAccrualError, LookupError):
    """No stored offer matches the requested symbol."""


class StaleOfferError(TokenAccrualError):
    """The stored offer changed between read and write."""
