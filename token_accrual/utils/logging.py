"""Logging setup shared by library, API and dashboard layers."""

from __future__ import annotations

import logging

ROOT_LOGGER_NAME = 'token_accrual'
LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'

_configured = False


def configure_logging(level: str | int = 'INFO') -> None:
    """Install a single stream handler on the package root logger."""
    global _configured
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level if isinstance(level, int) else str(level).upper())
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the package root so one handler covers all modules."""
    if name == ROOT_LOGGER_NAME or name.startswith(f'{ROOT_LOGGER_NAME}.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
