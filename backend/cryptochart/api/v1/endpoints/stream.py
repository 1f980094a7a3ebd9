"""
Server-Sent Events (SSE) endpoint for real-time price streaming.

Provides push-based price updates to the frontend without polling.
"""

import asyncio
import logging
import uuid

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from cryptochart.services.data_ingestion.binance_adapter import normalize_symbol

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/price/{symbol}")
async def stream_price(
    request: Request,
    symbol: str,
    heartbeat: int = Query(default=15, ge=1, le=60, description="Heartbeat interval in s"),
):
    """
    Stream live trade prices for a symbol via SSE.

    Usage (JavaScript):
    ```js
    const eventSource = new EventSource('/api/v1/stream/price/BTCUSDT');
    eventSource.onmessage = (event) => {
      const data = JSON.parse(event.data);
      console.log('Price:', data.price);
    };
    ```
    """
    session = getattr(request.app.state, "price_feed", None)
    if session is None:
        raise HTTPException(status_code=503, detail="Live price feed is disabled")

    symbol = normalize_symbol(symbol)
    if symbol not in session.symbols:
        raise HTTPException(status_code=404, detail=f"{symbol} is not on the live feed")

    async def event_generator():
        client_id = str(uuid.uuid4())
        queue = session.create_queue(client_id)

        try:
            # Start with the last known price, if any
            latest = session.latest_prices.get(symbol)
            if latest is not None:
                yield f"data: {latest.model_dump_json()}\n\n"

            while True:
                try:
                    tick = await asyncio.wait_for(queue.get(), timeout=heartbeat)
                except asyncio.TimeoutError:
                    # Keep the connection alive
                    yield ": heartbeat\n\n"
                    continue

                if tick.symbol == symbol:
                    yield f"data: {tick.model_dump_json()}\n\n"

        except asyncio.CancelledError:
            logger.debug(f"SSE client {client_id} disconnected")
        finally:
            session.remove_queue(client_id)

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable buffering for nginx
        },
    )
