"""Runtime configuration with environment overrides."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_STORE_PATH = PROJECT_ROOT / 'offers.json'
DEFAULT_LOG_LEVEL = 'INFO'
DEFAULT_MAX_ATTEMPTS = 3

STORE_PATH_ENV = 'TOKEN_ACCRUAL_STORE_PATH'
LOG_LEVEL_ENV = 'TOKEN_ACCRUAL_LOG_LEVEL'
MAX_ATTEMPTS_ENV = 'TOKEN_ACCRUAL_MAX_ATTEMPTS'


@dataclass(frozen=True)
class Settings:
    store_path: Path
    log_level: str
    max_attempts: int


def get_settings() -> Settings:
    """Read settings from the environment, falling back to defaults."""
    raw_attempts = os.environ.get(MAX_ATTEMPTS_ENV, str(DEFAULT_MAX_ATTEMPTS))
    try:
        max_attempts = int(raw_attempts)
    except ValueError as exc:
        raise ValueError(f'{MAX_ATTEMPTS_ENV} must be an integer, got {raw_attempts!r}.') from exc
    if max_attempts < 1:
        raise ValueError(f'{MAX_ATTEMPTS_ENV} must be at least 1, got {max_attempts}.')
    return Settings(
        store_path=Path(os.environ.get(STORE_PATH_ENV, str(DEFAULT_STORE_PATH))),
        log_level=os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper(),
        max_attempts=max_attempts,
    )
