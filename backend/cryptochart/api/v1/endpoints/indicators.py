"""
Indicator API Endpoints

Endpoints for chart overlays and the risk line.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from cryptochart.core.config import settings
from cryptochart.schemas.market import Timeframe
from cryptochart.schemas.indicators import ChartPayload, IndicatorSettings
from cryptochart.schemas.risk import RiskLine
from cryptochart.services.data_ingestion import (
    DataIngestionService,
    get_data_ingestion_service,
)
from cryptochart.services.indicators import (
    IndicatorRequest,
    IndicatorService,
    get_indicator_service,
)
from cryptochart.services.risk import RiskLineService, RiskRequest, get_risk_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{symbol}/risk", response_model=RiskLine)
async def get_risk_line(
    symbol: str,
    timeframe: Optional[Timeframe] = None,
    data_service: DataIngestionService = Depends(get_data_ingestion_service),
    risk_service: RiskLineService = Depends(get_risk_service),
):
    """
    Risk oscillator for a symbol.

    Returns:
        - points: Risk in [0, 1] with close price and display colour
        - current_risk / current_level: Latest value and its band
        - degraded: True when fewer than 374 candles were available
    """
    if not data_service.is_supported(symbol):
        raise HTTPException(status_code=404, detail=f"Unknown symbol {symbol}")

    timeframe = timeframe or Timeframe(settings.default_timeframe)

    result = await data_service.fetch_candles(symbol, timeframe)
    return await risk_service.execute(
        RiskRequest(
            symbol=result.series.symbol,
            timeframe=timeframe,
            candles=result.series.candles,
            errors=result.errors,
        )
    )


@router.get("/{symbol}", response_model=ChartPayload)
async def get_chart(
    symbol: str,
    timeframe: Optional[Timeframe] = None,
    show_ma20: bool = Query(default=True),
    show_ma50: bool = Query(default=True),
    show_ma100: bool = Query(default=True),
    show_ma200: bool = Query(default=True),
    show_bull_band: bool = Query(default=True),
    data_service: DataIngestionService = Depends(get_data_ingestion_service),
    indicator_service: IndicatorService = Depends(get_indicator_service),
):
    """
    Candles plus the overlays switched on in the query.

    MA20 is only drawn below daily; the bull market support band
    (20W SMA, 21W EMA) only on 1d and 1w.
    """
    if not data_service.is_supported(symbol):
        raise HTTPException(status_code=404, detail=f"Unknown symbol {symbol}")

    timeframe = timeframe or Timeframe(settings.default_timeframe)

    selection = IndicatorSettings(
        show_ma20=show_ma20,
        show_ma50=show_ma50,
        show_ma100=show_ma100,
        show_ma200=show_ma200,
        show_bull_band=show_bull_band,
    )

    result = await data_service.fetch_candles(symbol, timeframe)
    if result.errors:
        logger.warning(f"Serving empty chart for {symbol}: {result.errors}")

    return await indicator_service.execute(
        IndicatorRequest(
            symbol=result.series.symbol,
            timeframe=timeframe,
            candles=result.series.candles,
            settings=selection,
            errors=result.errors,
        )
    )
