"""
Data Ingestion Service Implementation

Fetches candle history from Binance and normalizes it into a sorted series.
Fetch failures surface as an empty series plus an error message so the
renderer can show an empty state instead of crashing.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from cryptochart.core.config import settings
from cryptochart.schemas.market import CandleSeries, Timeframe, sort_candles
from cryptochart.services.base import RateLimitError, ServiceError
from cryptochart.services.data_ingestion.interface import (
    CandleRequest,
    DataIngestionResult,
    DataIngestionServiceInterface,
)
from cryptochart.services.data_ingestion.binance_adapter import (
    BinanceClient,
    normalize_symbol,
)

logger = logging.getLogger(__name__)


class DataIngestionService(DataIngestionServiceInterface):
    """
    Data Ingestion Service.

    Single source (Binance). Every request fetches the full history again;
    nothing is cached or persisted.
    """

    def __init__(self, client: Optional[BinanceClient] = None):
        self._client = client or BinanceClient()

    @property
    def name(self) -> str:
        return "DataIngestionService"

    def is_supported(self, symbol: str) -> bool:
        """Whether the symbol is one of the configured pairs."""
        return normalize_symbol(symbol) in {normalize_symbol(s) for s in settings.symbols}

    async def execute(self, input_data: CandleRequest) -> DataIngestionResult:
        """Fetch and normalize candle history."""
        symbol = normalize_symbol(input_data.symbol)
        errors: list[str] = []
        warnings: list[str] = []
        start_time = datetime.now(timezone.utc)

        try:
            candles = await self._client.fetch_history(
                symbol,
                input_data.timeframe,
                start_ms=input_data.start_ms,
                end_ms=input_data.end_ms,
            )
        except RateLimitError as e:
            logger.warning(f"Rate limited while fetching {symbol}: {e}")
            errors.append(f"Rate limited by {e.service_name}, try again later")
            candles = []
        except ServiceError as e:
            logger.error(f"Error fetching {symbol}: {e}")
            errors.append(f"Failed to fetch data for {symbol}: {e.message}")
            candles = []

        if not candles and not errors:
            warnings.append(f"No candles returned for {symbol} ({input_data.timeframe.value})")

        latency_ms = int((datetime.now(timezone.utc) - start_time).total_seconds() * 1000)
        logger.debug(f"{symbol} {input_data.timeframe.value}: {len(candles)} candles in {latency_ms}ms")

        return DataIngestionResult(
            series=CandleSeries(
                symbol=symbol,
                timeframe=input_data.timeframe,
                candles=sort_candles(candles),
                errors=errors,
            ),
            errors=errors,
            warnings=warnings,
        )

    async def fetch_candles(self, symbol: str, timeframe: Timeframe) -> DataIngestionResult:
        """Shortcut for a full-history request."""
        return await self.execute(CandleRequest(symbol=symbol, timeframe=timeframe))

    async def health_check(self) -> bool:
        """Check connectivity by fetching a single recent daily kline."""
        try:
            now_ms = int(datetime.now(timezone.utc).timestamp() * 1000)
            rows = await self._client.fetch_page(
                settings.symbols[0], Timeframe.D1, now_ms - 2 * 86_400_000
            )
            return len(rows) > 0
        except ServiceError as e:
            logger.warning(f"Binance health check failed: {e}")
            return False

    async def close(self) -> None:
        """Release the HTTP session."""
        await self._client.close()


# Singleton instance
_service_instance: Optional[DataIngestionService] = None


def get_data_ingestion_service() -> DataIngestionService:
    """Get or create data ingestion service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = DataIngestionService()
    return _service_instance
