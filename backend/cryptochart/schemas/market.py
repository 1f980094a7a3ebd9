"""
CONTRACT 1: Candle Series

Input:  Raw klines from the market data source
Output: Candle series consumed by the Indicator Engine and Risk Normalizer

All records are immutable values. A new fetch produces new records; nothing is
updated in place.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class Timeframe(str, Enum):
    """Dashboard intervals. Values are Binance kline intervals."""

    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"
    W1 = "1w"
    MN1 = "1M"


# =============================================================================
# CANDLES AND DERIVED POINTS
# =============================================================================


class Candle(BaseModel):
    """
    Single OHLC candle.

    OHLC consistency (high >= max(open, close), low <= min(open, close)) is
    assumed, not validated.
    """

    model_config = ConfigDict(frozen=True)

    time: int = Field(..., description="Open time, unix seconds (UTC)")
    open: float
    high: float
    low: float
    close: float


class IndicatorPoint(BaseModel):
    """One point of a derived series (SMA / EMA / risk)."""

    model_config = ConfigDict(frozen=True)

    time: int
    value: float


class RiskPoint(IndicatorPoint):
    """Risk oscillator point with the source close price for tooltips."""

    value: float = Field(..., description="Normalized risk in [0, 1]")
    price: float


def sort_candles(candles: list[Candle]) -> list[Candle]:
    """Return a new list sorted ascending by time."""
    return sorted(candles, key=lambda c: c.time)


# =============================================================================
# LIVE FEED
# =============================================================================


class PriceTick(BaseModel):
    """Single live trade price."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    price: float
    time: Optional[int] = Field(default=None, description="Trade time, unix ms")


# =============================================================================
# OUTPUT: Candle responses
# =============================================================================


class CandleSeries(BaseModel):
    """
    Candle series for one symbol and timeframe.
    Returned by: Market API
    Consumed by: Chart renderer
    """

    symbol: str
    timeframe: Timeframe
    candles: list[Candle]
    errors: list[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "symbol": "BTCUSDT",
                "timeframe": "1d",
                "candles": [
                    {
                        "time": 1704067200,
                        "open": 42283.58,
                        "high": 44184.1,
                        "low": 42180.77,
                        "close": 44179.55,
                    }
                ],
                "errors": [],
            }
        }
