"""
Risk Line Service Interface

Defines the contract for the risk oscillator layer.
"""

from abc import abstractmethod
from dataclasses import dataclass, field

from cryptochart.services.base import BaseService
from cryptochart.schemas.market import Candle, Timeframe
from cryptochart.schemas.risk import RiskLine


@dataclass
class RiskRequest:
    """Input for the risk line."""

    symbol: str
    timeframe: Timeframe
    candles: list[Candle]
    errors: list[str] = field(default_factory=list)


class RiskServiceInterface(BaseService[RiskRequest, RiskLine]):
    """
    Risk Line Service Contract.

    INPUT: RiskRequest
        - candles: Raw candle series (any order)

    OUTPUT: RiskLine
        - points: Normalized risk in [0, 1] with price and colour
        - current_risk / current_level: Latest point
        - degraded: Placeholder output because the series was too short

    Normalization is global over the returned series, so the lowest point is
    always 0.0 and the highest 1.0.
    """

    @property
    def name(self) -> str:
        return "RiskService"

    @abstractmethod
    async def execute(self, input_data: RiskRequest) -> RiskLine:
        """Compute the risk line for a candle series."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Risk service is always healthy (pure computation)."""
        pass
