"""
Risk Line Service Implementation

Wraps the risk oscillator with display data: per-point colours, the current
level and whether the output is a placeholder.
"""

import logging
from typing import Optional

from cryptochart.core.diagnostics import logging_hook
from cryptochart.schemas.risk import ColoredRiskPoint, RiskLine
from cryptochart.services.risk.interface import RiskRequest, RiskServiceInterface
from cryptochart.services.risk.calculations import (
    compute_risk,
    is_placeholder,
    risk_color,
    risk_level,
)

logger = logging.getLogger(__name__)


class RiskLineService(RiskServiceInterface):
    """
    Risk Line Service.

    Stateless: each call recomputes the full line, so historical values shift
    whenever new candles extend the series.
    """

    def __init__(self):
        self._hook = logging_hook(logger)

    @property
    def name(self) -> str:
        return "RiskLineService"

    async def execute(self, input_data: RiskRequest) -> RiskLine:
        """Compute the risk line for a candle series."""
        input_length = len(input_data.candles)
        points = compute_risk(input_data.candles, on_event=self._hook)
        degraded = is_placeholder(input_length)

        if degraded:
            logger.info(
                f"{input_data.symbol} ({input_data.timeframe.value}): "
                f"only {input_length} candles, risk line is a placeholder"
            )

        colored = [
            ColoredRiskPoint(
                time=p.time,
                value=p.value,
                price=p.price,
                color=risk_color(p.value),
            )
            for p in points
        ]

        current = colored[-1].value if colored else None

        return RiskLine(
            symbol=input_data.symbol,
            timeframe=input_data.timeframe,
            points=colored,
            current_risk=current,
            current_level=risk_level(current) if current is not None else None,
            degraded=degraded,
            input_length=input_length,
            errors=list(input_data.errors),
        )

    async def health_check(self) -> bool:
        """Risk service is always healthy (pure computation)."""
        return True


# Singleton instance
_service_instance: Optional[RiskLineService] = None


def get_risk_service() -> RiskLineService:
    """Get or create risk service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = RiskLineService()
    return _service_instance
