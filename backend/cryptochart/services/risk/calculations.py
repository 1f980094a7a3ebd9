"""
Risk Line Calculations

Long-horizon risk oscillator: log deviation of price from its 374-period SMA,
weighted by a power of the position in the series and min-max normalized to
[0, 1] over the whole output. Plus the colour helpers used to draw it.

Pure Python/NumPy - all math is deterministic.
"""

import math
from typing import Optional

import numpy as np

from cryptochart.core.diagnostics import DiagnosticsHook, emit
from cryptochart.schemas.market import Candle, RiskPoint, sort_candles
from cryptochart.schemas.risk import RiskLevel
from cryptochart.services.indicators.calculations import closes_of, sma

RISK_PERIOD = 374
RISK_EXPONENT = 0.395

# Values of the placeholder series returned for short input
PLACEHOLDER_VALUES = (0.3, 0.5, 0.7)

# Upper bound (exclusive) -> colour. Anything >= 0.9 is red.
RISK_COLORS = [
    (0.1, "#0000ff"),  # Deep Blue
    (0.2, "#000bff"),  # Blue
    (0.3, "#0090ff"),  # Light Blue
    (0.4, "#00fbff"),  # Cyan
    (0.5, "#00ff7e"),  # Teal
    (0.6, "#00ff37"),  # Light Green
    (0.7, "#94ff00"),  # Yellow-Green
    (0.8, "#ffff00"),  # Yellow
    (0.9, "#ffb200"),  # Orange
]
RISK_COLOR_MAX = "#ff0017"  # Red

RISK_LEVELS = [
    (0.2, RiskLevel.VERY_LOW),
    (0.4, RiskLevel.LOW),
    (0.6, RiskLevel.MEDIUM),
    (0.8, RiskLevel.HIGH),
]


# =============================================================================
# RISK LINE
# =============================================================================


def min_max_normalize(values: np.ndarray) -> np.ndarray:
    """
    Scale values to [0, 1] using the global min and max.

    A flat (or non-finite) range maps every point to 0.5.
    """
    if len(values) == 0:
        return np.empty(0)

    low = np.min(values)
    high = np.max(values)
    span = high - low
    if not span > 0:
        return np.full(len(values), 0.5)

    with np.errstate(invalid="ignore"):
        return np.clip((values - low) / span, 0.0, 1.0)


def scaled_deviation(closes: np.ndarray) -> np.ndarray:
    """
    ``ln(close / SMA374) * (i + 1) ** 0.395`` for each aligned position.

    ``i`` is the 0-based position within the aligned output, not the index in
    the input series.
    """
    trend = sma(closes, RISK_PERIOD)
    aligned = np.asarray(closes, dtype=float)[RISK_PERIOD - 1:]
    scale = np.arange(1, len(trend) + 1, dtype=float) ** RISK_EXPONENT

    # Non-positive closes give NaN/-inf; garbage in is tolerated, not rejected
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.log(aligned / trend) * scale


def placeholder_risk(candles: list[Candle]) -> list[RiskPoint]:
    """Three fixed points at the first, middle and last candle."""
    picks = (candles[0], candles[len(candles) // 2], candles[-1])
    return [
        RiskPoint(time=candle.time, value=value, price=candle.close)
        for candle, value in zip(picks, PLACEHOLDER_VALUES)
    ]


def is_placeholder(input_length: int) -> bool:
    """Whether ``compute_risk`` returns the placeholder for this many candles."""
    return 0 < input_length < RISK_PERIOD


def compute_risk(
    series: list[Candle],
    on_event: Optional[DiagnosticsHook] = None,
) -> list[RiskPoint]:
    """
    Risk oscillator for a candle series.

    Needs at least 374 candles. Shorter non-empty input returns a 3-point
    placeholder (0.3, 0.5, 0.7); empty input returns an empty list.
    """
    candles = sort_candles(series)

    if not candles:
        return []

    if len(candles) < RISK_PERIOD:
        emit(
            on_event,
            "risk.insufficient_data",
            length=len(candles),
            required=RISK_PERIOD,
        )
        return placeholder_risk(candles)

    scaled = scaled_deviation(closes_of(candles))
    values = min_max_normalize(scaled)

    emit(
        on_event,
        "risk.computed",
        points=len(values),
        min_scaled=float(np.min(scaled)),
        max_scaled=float(np.max(scaled)),
    )

    offset = RISK_PERIOD - 1
    return [
        RiskPoint(
            time=candles[offset + i].time,
            value=float(value),
            price=candles[offset + i].close,
        )
        for i, value in enumerate(values)
    ]


# =============================================================================
# COLOURS AND LABELS
# =============================================================================


def risk_color(value: float) -> str:
    """Decile colour for a normalized risk value."""
    for upper, color in RISK_COLORS:
        if value < upper:
            return color
    return RISK_COLOR_MAX


def risk_level(value: float) -> RiskLevel:
    """Human-readable risk band."""
    for upper, level in RISK_LEVELS:
        if value < upper:
            return level
    return RiskLevel.EXTREME


def fill_color(level: float) -> str:
    """Band fill: teal fading out towards 0.5, dark red fading in above it."""
    if level <= 0.5:
        opacity = 0.9 - (level * 0.6)
        return f"rgba(0, 85, 85, {opacity})"
    opacity = 0.9 - ((1 - level) * 0.6)
    return f"rgba(139, 0, 0, {opacity})"


def _parse_hex(color: str) -> tuple[int, int, int]:
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def color_lerp(
    value: float,
    minimum: float,
    maximum: float,
    color_start: str,
    color_end: str,
) -> str:
    """
    Linear RGB interpolation between two ``#rrggbb`` colours.

    ``value`` is placed on ``[minimum, maximum]`` and clamped to it. An empty
    range returns ``color_start``.
    """
    if maximum == minimum:
        ratio = 0.0
    else:
        ratio = min(1.0, max(0.0, (value - minimum) / (maximum - minimum)))

    start = _parse_hex(color_start)
    end = _parse_hex(color_end)

    # Round half up per channel
    channels = (math.floor(a + (b - a) * ratio + 0.5) for a, b in zip(start, end))
    return "#" + "".join(f"{channel:02x}" for channel in channels)
