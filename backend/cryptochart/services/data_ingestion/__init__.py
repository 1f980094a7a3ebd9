"""
Data Ingestion Service

CONTRACT:
    Input:  CandleRequest
    Output: DataIngestionResult (CandleSeries + errors)

RESPONSIBILITIES:
    - Page through Binance klines from the configured start date
    - Normalize klines into sorted Candle series
    - Turn fetch failures into an empty series plus error messages
"""

from cryptochart.services.data_ingestion.interface import (
    CandleRequest,
    DataIngestionResult,
    DataIngestionServiceInterface,
)
from cryptochart.services.data_ingestion.service import (
    DataIngestionService,
    get_data_ingestion_service,
)

__all__ = [
    "CandleRequest",
    "DataIngestionResult",
    "DataIngestionServiceInterface",
    "DataIngestionService",
    "get_data_ingestion_service",
]
