"""
CONTRACT 2: Indicator Engine

Input: Candle series + IndicatorSettings
Output: ChartPayload

Pure Python/NumPy - all math is deterministic.
"""

from enum import Enum
from pydantic import BaseModel, Field

from cryptochart.schemas.market import Candle, IndicatorPoint, Timeframe


# =============================================================================
# ENUMS
# =============================================================================


class Overlay(str, Enum):
    """Named derived series drawn over the candles."""

    MA20 = "ma20"
    MA50 = "ma50"
    MA100 = "ma100"
    MA200 = "ma200"
    SMA20W = "sma20w"
    EMA21W = "ema21w"


# =============================================================================
# INPUT: IndicatorSettings
# =============================================================================


class IndicatorSettings(BaseModel):
    """
    Which optional overlays are active.

    Any combination is legal, including all off. Callers replace the whole
    record (``settings.model_copy(update=...)``) rather than patching it.
    """

    show_ma20: bool = True
    show_ma50: bool = True
    show_ma100: bool = True
    show_ma200: bool = True
    show_bull_band: bool = Field(
        default=True, description="20W SMA + 21W EMA support band"
    )


# =============================================================================
# OUTPUT: ChartPayload
# =============================================================================


class ChartPayload(BaseModel):
    """
    Candles plus the derived series requested by the settings.
    Returned by: Indicator Service
    Consumed by: Chart renderer
    """

    symbol: str
    timeframe: Timeframe
    candles: list[Candle]
    overlays: dict[Overlay, list[IndicatorPoint]] = Field(default_factory=dict)
    settings: IndicatorSettings
    errors: list[str] = Field(default_factory=list)
