from __future__ import annotations

import sys

import pytest
from loguru import logger

from currency_modules import CurrencyFormatter


@pytest.fixture
def formatter() -> CurrencyFormatter:
    """Formatierer mit Default-Konfiguration (USD, left, 2, ',', '.')."""
    return CurrencyFormatter()


@pytest.fixture
def restore_logger():
    """Config installiert eigene loguru-Sinks; nach dem Test wieder auf stderr zurücksetzen."""
    yield
    logger.remove()
    logger.add(sys.stderr)
