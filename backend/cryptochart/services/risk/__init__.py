"""
Risk Line Engine

CONTRACT:
    Input:  RiskRequest (candles)
    Output: RiskLine

RESPONSIBILITIES:
    - Log deviation from the 374-period SMA, power-law weighted
    - Global min-max normalization to [0, 1]
    - Placeholder output for series shorter than 374 candles
    - Colour and level lookup for display

PURE PYTHON - Uses NumPy for calculations.
"""

from cryptochart.services.risk.calculations import (
    color_lerp,
    compute_risk,
    fill_color,
    risk_color,
    risk_level,
)
from cryptochart.services.risk.interface import RiskRequest, RiskServiceInterface
from cryptochart.services.risk.service import RiskLineService, get_risk_service

__all__ = [
    "RiskRequest",
    "RiskServiceInterface",
    "RiskLineService",
    "get_risk_service",
    "color_lerp",
    "compute_risk",
    "fill_color",
    "risk_color",
    "risk_level",
]
