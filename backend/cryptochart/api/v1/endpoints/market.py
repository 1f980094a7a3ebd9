"""
Market Data API Endpoints

Endpoints for fetching candle history and live prices.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request

from cryptochart.core.config import settings
from cryptochart.schemas.market import CandleSeries, PriceTick, Timeframe
from cryptochart.services.data_ingestion import (
    DataIngestionService,
    get_data_ingestion_service,
)

router = APIRouter()


@router.get("/symbols", response_model=list[str])
async def get_symbols():
    """Configured trading pairs."""
    return settings.symbols


@router.get("/prices", response_model=dict[str, PriceTick])
async def get_latest_prices(request: Request):
    """
    Last live trade price per subscribed symbol.

    Empty when the live feed is disabled or has not received a trade yet.
    """
    session = getattr(request.app.state, "price_feed", None)
    if session is None:
        return {}
    return session.latest_prices


@router.get("/{symbol}/candles", response_model=CandleSeries)
async def get_candles(
    symbol: str,
    timeframe: Optional[Timeframe] = None,
    service: DataIngestionService = Depends(get_data_ingestion_service),
):
    """
    Full candle history for a symbol, sorted by time.

    Fetch failures return an empty series with the reason in ``errors``.
    """
    if not service.is_supported(symbol):
        raise HTTPException(status_code=404, detail=f"Unknown symbol {symbol}")

    timeframe = timeframe or Timeframe(settings.default_timeframe)

    result = await service.fetch_candles(symbol, timeframe)
    return result.series
