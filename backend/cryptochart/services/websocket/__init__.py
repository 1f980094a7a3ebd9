"""
WebSocket module for real-time trade prices.

Provides an explicit session over the Binance trade stream.
"""

from cryptochart.services.websocket.session import (
    ConnectionState,
    PriceFeedSession,
)

__all__ = [
    "ConnectionState",
    "PriceFeedSession",
]
