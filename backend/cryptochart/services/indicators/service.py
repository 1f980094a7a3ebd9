"""
Indicator Engine Service Implementation

Builds the chart payload: sorted candles plus the requested overlays.
Pure Python/NumPy calculations.
"""

import logging
from typing import Optional

from cryptochart.core.diagnostics import logging_hook
from cryptochart.schemas.market import Candle, IndicatorPoint, Timeframe, sort_candles
from cryptochart.schemas.indicators import ChartPayload, IndicatorSettings, Overlay
from cryptochart.services.indicators.interface import (
    IndicatorRequest,
    IndicatorServiceInterface,
)
from cryptochart.services.indicators.calculations import (
    exponential_moving_average,
    simple_moving_average,
)
from cryptochart.services.indicators.resample import resample_weekly

logger = logging.getLogger(__name__)

# Timeframes that show the weekly bull market support band instead of MA20
BULL_BAND_TIMEFRAMES = frozenset({Timeframe.D1, Timeframe.W1})

# Simple moving averages over the displayed series
MA_PERIODS = {
    Overlay.MA20: 20,
    Overlay.MA50: 50,
    Overlay.MA100: 100,
    Overlay.MA200: 200,
}

BULL_BAND_SMA_WEEKS = 20
BULL_BAND_EMA_WEEKS = 21


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    Stateless: every call recomputes all requested overlays from the full
    series.
    """

    def __init__(self):
        self._hook = logging_hook(logger)

    @property
    def name(self) -> str:
        return "IndicatorService"

    async def execute(self, input_data: IndicatorRequest) -> ChartPayload:
        """Calculate the overlays requested by the settings."""
        candles = sort_candles(input_data.candles)
        overlays = self.calculate_overlays(
            candles, input_data.settings, input_data.timeframe
        )

        return ChartPayload(
            symbol=input_data.symbol,
            timeframe=input_data.timeframe,
            candles=candles,
            overlays=overlays,
            settings=input_data.settings,
            errors=list(input_data.errors),
        )

    def active_overlays(
        self, settings: IndicatorSettings, timeframe: Timeframe
    ) -> list[Overlay]:
        """Overlays to draw for these settings on this timeframe."""
        bull_band_frame = timeframe in BULL_BAND_TIMEFRAMES
        active = []

        if settings.show_ma20 and not bull_band_frame:
            active.append(Overlay.MA20)
        if settings.show_ma50:
            active.append(Overlay.MA50)
        if settings.show_ma100:
            active.append(Overlay.MA100)
        if settings.show_ma200:
            active.append(Overlay.MA200)
        if settings.show_bull_band and bull_band_frame:
            active.extend([Overlay.SMA20W, Overlay.EMA21W])

        return active

    def calculate_overlays(
        self,
        candles: list[Candle],
        settings: IndicatorSettings,
        timeframe: Timeframe,
    ) -> dict[Overlay, list[IndicatorPoint]]:
        """Compute every active overlay. Candles must already be sorted."""
        overlays: dict[Overlay, list[IndicatorPoint]] = {}
        weekly: Optional[list[Candle]] = None

        for overlay in self.active_overlays(settings, timeframe):
            if overlay in MA_PERIODS:
                overlays[overlay] = simple_moving_average(
                    candles, MA_PERIODS[overlay], on_event=self._hook
                )
                continue

            # Bull band is always computed on weekly candles
            if weekly is None:
                weekly = resample_weekly(candles)
            if overlay == Overlay.SMA20W:
                overlays[overlay] = simple_moving_average(
                    weekly, BULL_BAND_SMA_WEEKS, on_event=self._hook
                )
            else:
                overlays[overlay] = exponential_moving_average(
                    weekly, BULL_BAND_EMA_WEEKS, on_event=self._hook
                )

        logger.debug(
            f"Calculated {len(overlays)} overlays on {len(candles)} candles ({timeframe.value})"
        )
        return overlays

    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
