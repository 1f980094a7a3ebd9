"""
Moving Average Calculations

Pure Python/NumPy implementations of the chart overlays.
All math is deterministic.

Array functions return only the defined part of the series: for ``n`` inputs
and period ``p`` the output has ``max(0, n - p + 1)`` values, aligned so that
``out[i]`` belongs to input ``i + p - 1``.
"""

from typing import Optional

import numpy as np

from cryptochart.core.diagnostics import DiagnosticsHook, emit
from cryptochart.schemas.market import Candle, IndicatorPoint, sort_candles


# =============================================================================
# MOVING AVERAGES
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """
    Simple Moving Average.

    Uses a running sum, so the whole series costs O(n) regardless of period.
    """
    data = np.asarray(data, dtype=float)
    if period <= 0 or len(data) < period:
        return np.empty(0)

    running = np.cumsum(data)
    window_sums = np.empty(len(data) - period + 1)
    window_sums[0] = running[period - 1]
    window_sums[1:] = running[period:] - running[:-period]
    return window_sums / period


def ema(data: np.ndarray, period: int) -> np.ndarray:
    """Exponential Moving Average, seeded with the SMA of the first window."""
    data = np.asarray(data, dtype=float)
    seed = sma(data[:period], period)
    if len(seed) == 0:
        return np.empty(0)

    multiplier = 2 / (period + 1)
    result = np.empty(len(data) - period + 1)
    result[0] = seed[0]

    prev = result[0]
    for i in range(period, len(data)):
        prev = (data[i] - prev) * multiplier + prev
        result[i - period + 1] = prev

    return result


# =============================================================================
# SERIES ADAPTERS
# =============================================================================


def closes_of(candles: list[Candle]) -> np.ndarray:
    """Close prices as a float array."""
    return np.fromiter((c.close for c in candles), dtype=float, count=len(candles))


def _to_points(candles: list[Candle], values: np.ndarray, period: int) -> list[IndicatorPoint]:
    offset = period - 1
    return [
        IndicatorPoint(time=candles[offset + i].time, value=float(value))
        for i, value in enumerate(values)
    ]


def simple_moving_average(
    series: list[Candle],
    period: int,
    on_event: Optional[DiagnosticsHook] = None,
) -> list[IndicatorPoint]:
    """
    SMA of closes as timestamped points.

    Returns an empty list when the series is shorter than the period; callers
    treat that as insufficient data.
    """
    candles = sort_candles(series)
    values = sma(closes_of(candles), period)
    if len(values) == 0:
        emit(on_event, "sma.insufficient_data", length=len(candles), period=period)
    return _to_points(candles, values, period)


def exponential_moving_average(
    series: list[Candle],
    period: int,
    on_event: Optional[DiagnosticsHook] = None,
) -> list[IndicatorPoint]:
    """EMA of closes as timestamped points. Empty when ``len(series) < period``."""
    candles = sort_candles(series)
    values = ema(closes_of(candles), period)
    if len(values) == 0:
        emit(on_event, "ema.insufficient_data", length=len(candles), period=period)
    return _to_points(candles, values, period)
