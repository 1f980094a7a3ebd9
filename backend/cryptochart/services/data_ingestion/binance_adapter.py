"""
Binance Data Adapter

Fetches historical klines from the Binance public REST API.
No API key required. Up to 1000 klines per request; longer histories are
paged forward from a start date.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Optional

import aiohttp

from cryptochart.core.config import settings
from cryptochart.schemas.market import Candle, Timeframe
from cryptochart.services.base import ExternalAPIError, RateLimitError

logger = logging.getLogger(__name__)

SOURCE_NAME = "Binance"


def normalize_symbol(symbol: str) -> str:
    """``btc/usdt`` or ``BTC-USDT`` -> ``BTCUSDT``."""
    return symbol.upper().replace("/", "").replace("-", "").strip()


def date_to_ms(date_str: str) -> int:
    """``YYYY-MM-DD`` (UTC midnight) to unix milliseconds."""
    day = datetime.strptime(date_str, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    return int(day.timestamp() * 1000)


def parse_kline(row: list[Any]) -> Candle:
    """
    Convert one kline row to a Candle.

    Row layout: [open_time_ms, open, high, low, close, volume, close_time, ...]
    with prices as strings.
    """
    return Candle(
        time=int(row[0]) // 1000,
        open=float(row[1]),
        high=float(row[2]),
        low=float(row[3]),
        close=float(row[4]),
    )


class BinanceClient:
    """
    Binance REST client for klines.

    Usage:
        client = BinanceClient()
        candles = await client.fetch_history("BTCUSDT", Timeframe.D1)
        await client.close()
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        page_limit: Optional[int] = None,
        page_delay: Optional[float] = None,
        timeout: Optional[float] = None,
    ):
        self._base_url = (base_url or settings.binance_rest_url).rstrip("/")
        self._page_limit = page_limit or settings.kline_page_limit
        self._page_delay = settings.kline_page_delay if page_delay is None else page_delay
        self._timeout = timeout or settings.request_timeout
        self._session: Optional[aiohttp.ClientSession] = None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers={"Accept": "application/json"},
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def fetch_page(
        self, symbol: str, timeframe: Timeframe, start_ms: int
    ) -> list[list[Any]]:
        """
        Fetch one page of raw klines starting at ``start_ms``.

        Raises:
            RateLimitError: Binance answered 429 / 418
            ExternalAPIError: Any other HTTP or network failure, or a body
                that is not JSON
        """
        params = {
            "symbol": normalize_symbol(symbol),
            "interval": timeframe.value,
            "limit": self._page_limit,
            "startTime": start_ms,
        }

        try:
            session = await self._ensure_session()
            async with session.get(f"{self._base_url}/klines", params=params) as resp:
                if resp.status in (418, 429):
                    raise RateLimitError(
                        SOURCE_NAME,
                        "Rate limit exceeded",
                        {"status": resp.status, "retry_after": resp.headers.get("Retry-After")},
                    )
                if resp.status != 200:
                    body = await resp.text()
                    raise ExternalAPIError(
                        SOURCE_NAME,
                        f"klines request failed with HTTP {resp.status}",
                        {"status": resp.status, "body": body[:200]},
                    )
                try:
                    return await resp.json()
                except ValueError as e:
                    raise ExternalAPIError(SOURCE_NAME, f"klines response is not valid JSON: {e}") from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ExternalAPIError(SOURCE_NAME, f"klines request failed: {e}") from e

    async def fetch_history(
        self,
        symbol: str,
        timeframe: Timeframe,
        start_ms: Optional[int] = None,
        end_ms: Optional[int] = None,
    ) -> list[Candle]:
        """
        Page forward from ``start_ms`` until ``end_ms`` (default: now).

        Each page starts 1 ms after the last open time of the previous one.
        An empty page ends the loop.
        """
        current = date_to_ms(settings.history_start) if start_ms is None else start_ms
        end = int(datetime.now(timezone.utc).timestamp() * 1000) if end_ms is None else end_ms
        candles: list[Candle] = []
        pages = 0

        while current < end:
            rows = await self.fetch_page(symbol, timeframe, current)
            if not rows:
                break

            try:
                candles.extend(parse_kline(row) for row in rows)
                current = int(rows[-1][0]) + 1
            except (IndexError, TypeError, ValueError) as e:
                raise ExternalAPIError(SOURCE_NAME, f"malformed kline row: {e}") from e
            pages += 1

            # Small delay to stay under the request weight limit
            if self._page_delay:
                await asyncio.sleep(self._page_delay)

        logger.info(
            f"Fetched {len(candles)} {timeframe.value} candles for "
            f"{normalize_symbol(symbol)} in {pages} pages"
        )
        return candles
