"""
CryptoChart Schema Contracts

This module defines all JSON contracts between system components.
"""

from cryptochart.schemas.market import (
    Candle,
    CandleSeries,
    IndicatorPoint,
    PriceTick,
    RiskPoint,
    Timeframe,
)
from cryptochart.schemas.indicators import (
    ChartPayload,
    IndicatorSettings,
    Overlay,
)
from cryptochart.schemas.risk import (
    ColoredRiskPoint,
    RiskLevel,
    RiskLine,
)

__all__ = [
    # Market
    "Candle",
    "CandleSeries",
    "IndicatorPoint",
    "PriceTick",
    "RiskPoint",
    "Timeframe",
    # Indicators
    "ChartPayload",
    "IndicatorSettings",
    "Overlay",
    # Risk
    "ColoredRiskPoint",
    "RiskLevel",
    "RiskLine",
]
