"""
Shared fixtures: synthetic candle series and a stubbed Binance client.
"""

import pytest

from cryptochart.schemas.market import Candle
from cryptochart.services.base import ExternalAPIError

DAY = 86_400
MONDAY_2024_01_01 = 1_704_067_200  # 2024-01-01 00:00 UTC


def build_candles(closes, start=MONDAY_2024_01_01, step=DAY):
    """One candle per close, ``step`` seconds apart."""
    return [
        Candle(time=start + i * step, open=close, high=close + 1, low=close - 1, close=close)
        for i, close in enumerate(closes)
    ]


class FakeBinanceClient:
    """Stands in for BinanceClient; returns canned candles or raises."""

    def __init__(self, candles=None, error=None):
        self.candles = candles or []
        self.error = error
        self.requests = []
        self.closed = False

    async def fetch_history(self, symbol, timeframe, start_ms=None, end_ms=None):
        self.requests.append((symbol, timeframe))
        if self.error is not None:
            raise self.error
        return list(self.candles)

    async def fetch_page(self, symbol, timeframe, start_ms):
        if self.error is not None:
            raise self.error
        return [[c.time * 1000, str(c.open), str(c.high), str(c.low), str(c.close)] for c in self.candles]

    async def close(self):
        self.closed = True


@pytest.fixture
def make_candles():
    return build_candles


@pytest.fixture
def linear_candles():
    """400 daily candles, closes 100..499."""
    return build_candles([100.0 + i for i in range(400)])


@pytest.fixture
def fake_client_factory():
    return FakeBinanceClient


@pytest.fixture
def api_error():
    return ExternalAPIError("Binance", "klines request failed with HTTP 500")
