"""
CONTRACT 3: Risk Line

Input: Candle series
Output: RiskLine

The risk line is a display aid (how extended price is from its long-term
trend), not a trading signal.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field

from cryptochart.schemas.market import Timeframe


class RiskLevel(str, Enum):
    VERY_LOW = "Very Low"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    EXTREME = "Extreme"


class ColoredRiskPoint(BaseModel):
    """Risk point with its display colour."""

    time: int
    value: float
    price: float
    color: str = Field(..., description="Hex colour from the decile table")


class RiskLine(BaseModel):
    """
    Complete risk oscillator for one symbol.
    Returned by: Risk Service
    Consumed by: Risk panel renderer
    """

    symbol: str
    timeframe: Timeframe
    points: list[ColoredRiskPoint]
    current_risk: Optional[float] = None
    current_level: Optional[RiskLevel] = None
    degraded: bool = Field(
        default=False,
        description="True when the input was too short and points are a placeholder",
    )
    input_length: int = Field(..., ge=0)
    errors: list[str] = Field(default_factory=list)
