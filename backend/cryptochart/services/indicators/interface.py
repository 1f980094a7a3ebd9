"""
Indicator Engine Service Interface

Defines the contract for the indicator calculation layer.
"""

from abc import abstractmethod
from dataclasses import dataclass, field

from cryptochart.services.base import BaseService
from cryptochart.schemas.market import Candle, Timeframe
from cryptochart.schemas.indicators import ChartPayload, IndicatorSettings, Overlay


@dataclass
class IndicatorRequest:
    """Input for overlay calculation."""

    symbol: str
    timeframe: Timeframe
    candles: list[Candle]
    settings: IndicatorSettings = field(default_factory=IndicatorSettings)
    errors: list[str] = field(default_factory=list)


class IndicatorServiceInterface(BaseService[IndicatorRequest, ChartPayload]):
    """
    Indicator Engine Service Contract.

    INPUT: IndicatorRequest
        - candles: Raw candle series (any order)
        - timeframe: Displayed timeframe (drives overlay gating)
        - settings: Which overlays the user switched on

    OUTPUT: ChartPayload
        - candles: Sorted series
        - overlays: Requested derived series, keyed by Overlay

    GATING (by timeframe):
        - MA20 only below daily (hidden on 1d / 1w)
        - Bull market support band (20W SMA, 21W EMA) only on 1d / 1w
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    @abstractmethod
    async def execute(self, input_data: IndicatorRequest) -> ChartPayload:
        """Calculate the overlays requested by the settings."""
        pass

    @abstractmethod
    def active_overlays(
        self, settings: IndicatorSettings, timeframe: Timeframe
    ) -> list[Overlay]:
        """Overlays to draw for these settings on this timeframe."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Indicator service is always healthy (pure computation)."""
        pass
