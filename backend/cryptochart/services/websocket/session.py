"""
Live price feed session.

One explicit session per subscriber set: constructed with the symbols and a
price callback, opened and closed by its owner. There is no module-level
instance; the API keeps its session on ``app.state``.

Features:
- Auto-reconnect with exponential backoff while open
- Latest price per symbol
- Fan-out to per-client queues for SSE
"""

import asyncio
import json
import logging
from enum import Enum
from typing import Any, Callable, Optional, Union

import aiohttp

from cryptochart.core.config import settings
from cryptochart.schemas.market import PriceTick
from cryptochart.services.data_ingestion.binance_adapter import normalize_symbol

logger = logging.getLogger(__name__)

PriceCallback = Callable[[str, float], Any]


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"
    ERROR = "error"


class PriceFeedSession:
    """
    Trade-price stream for a fixed set of symbols.

    Usage:
        session = PriceFeedSession(["BTCUSDT", "ETHUSDT"], on_price)
        await session.open()
        ...
        await session.close()
    """

    def __init__(
        self,
        symbols: list[str],
        on_price: Optional[PriceCallback] = None,
        url: Optional[str] = None,
        reconnect_delay: Optional[float] = None,
        max_reconnect_delay: Optional[float] = None,
        queue_size: Optional[int] = None,
    ):
        self._symbols = [normalize_symbol(s) for s in symbols]
        self._on_price = on_price
        self._url = url or settings.binance_ws_url
        self._initial_delay = settings.reconnect_delay if reconnect_delay is None else reconnect_delay
        self._reconnect_delay = self._initial_delay
        self._max_reconnect_delay = (
            settings.max_reconnect_delay if max_reconnect_delay is None else max_reconnect_delay
        )
        self._queue_size = settings.sse_queue_size if queue_size is None else queue_size

        self._state = ConnectionState.DISCONNECTED
        self._task: Optional[asyncio.Task] = None
        self._http: Optional[aiohttp.ClientSession] = None
        self._ws: Optional[aiohttp.ClientWebSocketResponse] = None
        self._latest: dict[str, PriceTick] = {}
        self._queues: dict[str, asyncio.Queue] = {}

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def symbols(self) -> list[str]:
        return list(self._symbols)

    @property
    def latest_prices(self) -> dict[str, PriceTick]:
        return dict(self._latest)

    def subscribe_message(self) -> dict[str, Any]:
        """SUBSCRIBE request for every symbol's trade stream."""
        return {
            "method": "SUBSCRIBE",
            "params": [f"{s.lower()}@trade" for s in self._symbols],
            "id": 1,
        }

    # ============ Lifecycle ============

    async def open(self) -> None:
        """Start streaming in a background task."""
        if self.is_open:
            logger.warning("Price feed session already open")
            return

        self._state = ConnectionState.CONNECTING
        self._reconnect_delay = self._initial_delay
        self._task = asyncio.create_task(self._connection_loop())
        logger.info(f"Price feed opened for {self._symbols}")

    async def close(self) -> None:
        """Stop streaming and release the connection."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        await self._disconnect()
        self._state = ConnectionState.DISCONNECTED
        logger.info("Price feed closed")

    # ============ Client Queues ============

    def create_queue(self, client_id: str) -> asyncio.Queue:
        """Create a tick queue for an SSE client."""
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._queues[client_id] = queue
        return queue

    def remove_queue(self, client_id: str) -> None:
        """Remove an SSE client queue."""
        self._queues.pop(client_id, None)

    def _broadcast(self, tick: PriceTick) -> None:
        for queue in self._queues.values():
            if queue.full():
                # Drop the oldest tick to make room
                queue.get_nowait()
            queue.put_nowait(tick)

    # ============ Message Handling ============

    def handle_message(self, message: Union[str, dict[str, Any]]) -> Optional[PriceTick]:
        """
        Process one stream message.

        Trade events update the latest price, reach the callback and every
        client queue. Anything else (subscription acks, other events) is
        ignored.
        """
        if isinstance(message, str):
            try:
                message = json.loads(message)
            except json.JSONDecodeError:
                logger.debug(f"Ignoring non-JSON message: {message[:100]}")
                return None

        if not isinstance(message, dict) or message.get("e") != "trade":
            return None

        try:
            tick = PriceTick(
                symbol=message["s"],
                price=float(message["p"]),
                time=message.get("T"),
            )
        except (KeyError, TypeError, ValueError) as e:
            logger.debug(f"Malformed trade message: {e}")
            return None

        self._latest[tick.symbol] = tick
        self._broadcast(tick)

        if self._on_price is not None:
            try:
                self._on_price(tick.symbol, tick.price)
            except Exception as e:
                logger.debug(f"Price callback error: {e}")

        return tick

    # ============ Connection Loop ============

    async def _connection_loop(self) -> None:
        """Main connection loop with auto-reconnect."""
        while True:
            try:
                await self._connect()
                self._state = ConnectionState.CONNECTED
                self._reconnect_delay = self._initial_delay
                await self._listen()
            except asyncio.CancelledError:
                raise
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                logger.warning(f"Price feed connection error: {e}")
                self._state = ConnectionState.ERROR
            except Exception as e:
                logger.error(f"Price feed loop error: {e}")
                self._state = ConnectionState.ERROR

            await self._disconnect()
            self._state = ConnectionState.RECONNECTING
            logger.info(f"Reconnecting price feed in {self._reconnect_delay}s...")
            await asyncio.sleep(self._reconnect_delay)
            self._reconnect_delay = min(self._reconnect_delay * 2, self._max_reconnect_delay)

    async def _connect(self) -> None:
        if self._http is None or self._http.closed:
            self._http = aiohttp.ClientSession()
        self._ws = await self._http.ws_connect(self._url, heartbeat=30)
        await self._ws.send_json(self.subscribe_message())
        logger.info(f"Connected to {self._url}")

    async def _listen(self) -> None:
        """Read messages until the socket closes."""
        async for msg in self._ws:
            if msg.type == aiohttp.WSMsgType.TEXT:
                self.handle_message(msg.data)
            elif msg.type == aiohttp.WSMsgType.ERROR:
                logger.warning(f"Price feed socket error: {self._ws.exception()}")
                break
        logger.info("Price feed socket closed")

    async def _disconnect(self) -> None:
        if self._ws is not None and not self._ws.closed:
            await self._ws.close()
        self._ws = None
        if self._http is not None and not self._http.closed:
            await self._http.close()
        self._http = None
