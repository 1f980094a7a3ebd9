"""
Indicator Engine Service

CONTRACT:
    Input:  IndicatorRequest (candles + IndicatorSettings)
    Output: ChartPayload

RESPONSIBILITIES:
    - Simple and exponential moving averages
    - Weekly resampling for the bull market support band
    - Overlay gating by timeframe

PURE PYTHON - Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from cryptochart.services.indicators.calculations import (
    exponential_moving_average,
    simple_moving_average,
)
from cryptochart.services.indicators.interface import (
    IndicatorRequest,
    IndicatorServiceInterface,
)
from cryptochart.services.indicators.resample import resample_weekly
from cryptochart.services.indicators.service import IndicatorService, get_indicator_service

__all__ = [
    "IndicatorRequest",
    "IndicatorServiceInterface",
    "IndicatorService",
    "get_indicator_service",
    "exponential_moving_average",
    "resample_weekly",
    "simple_moving_average",
]
