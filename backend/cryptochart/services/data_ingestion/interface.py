"""
Data Ingestion Service Interface

Defines the contract for the data ingestion layer.
"""

from abc import abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from cryptochart.services.base import BaseService
from cryptochart.schemas.market import CandleSeries, Timeframe


@dataclass
class CandleRequest:
    """Request for one symbol's candle history."""

    symbol: str
    timeframe: Timeframe
    start_ms: Optional[int] = None  # Defaults to settings.history_start
    end_ms: Optional[int] = None  # Defaults to now


@dataclass
class DataIngestionResult:
    """Result from data ingestion including any warnings/errors."""

    series: CandleSeries
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class DataIngestionServiceInterface(BaseService[CandleRequest, DataIngestionResult]):
    """
    Data Ingestion Service Contract.

    INPUT: CandleRequest
        - symbol: Trading pair (e.g. BTCUSDT)
        - timeframe: Kline interval

    OUTPUT: DataIngestionResult
        - series: Sorted candle series (empty on failure)
        - errors: Fetch errors, never raised to the caller
        - warnings: Non-fatal warnings
    """

    @property
    def name(self) -> str:
        return "DataIngestionService"

    @abstractmethod
    async def execute(self, input_data: CandleRequest) -> DataIngestionResult:
        """Fetch and normalize candle history."""
        pass

    @abstractmethod
    def is_supported(self, symbol: str) -> bool:
        """Whether the symbol is one of the configured pairs."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check connectivity to the data source."""
        pass
