"""
Price Feed Session Tests

Message handling, client queues, the open/close lifecycle and the SSE stream.
"""

import asyncio
import json
from types import SimpleNamespace

import aiohttp
import pytest
from fastapi import HTTPException

from cryptochart.api.v1.endpoints.stream import stream_price
from cryptochart.services.websocket import ConnectionState, PriceFeedSession


def trade(symbol="BTCUSDT", price="42000.50", trade_time=1704067200123):
    return json.dumps({"e": "trade", "E": trade_time, "s": symbol, "p": price, "q": "0.01", "T": trade_time})


class TestMessageHandling:
    def test_subscribe_message(self):
        session = PriceFeedSession(["BTCUSDT", "eth/usdt"])

        assert session.subscribe_message() == {
            "method": "SUBSCRIBE",
            "params": ["btcusdt@trade", "ethusdt@trade"],
            "id": 1,
        }

    def test_trade_reaches_callback(self):
        received = []
        session = PriceFeedSession(["BTCUSDT"], lambda s, p: received.append((s, p)))

        tick = session.handle_message(trade())

        assert received == [("BTCUSDT", 42000.5)]
        assert tick.price == 42000.5
        assert tick.time == 1704067200123
        assert session.latest_prices["BTCUSDT"] == tick

    def test_latest_price_is_last_trade(self):
        session = PriceFeedSession(["ETHUSDT"])

        session.handle_message(trade("ETHUSDT", "2200.0"))
        session.handle_message(trade("ETHUSDT", "2201.5"))

        assert session.latest_prices["ETHUSDT"].price == 2201.5

    def test_non_trade_messages_ignored(self):
        received = []
        session = PriceFeedSession(["BTCUSDT"], lambda s, p: received.append((s, p)))

        assert session.handle_message('{"result": null, "id": 1}') is None
        assert session.handle_message("not json") is None
        assert session.handle_message({"e": "trade", "s": "BTCUSDT"}) is None
        assert received == []
        assert session.latest_prices == {}

    def test_callback_error_does_not_propagate(self):
        def explode(symbol, price):
            raise RuntimeError("boom")

        session = PriceFeedSession(["BTCUSDT"], explode)

        assert session.handle_message(trade()) is not None


class TestClientQueues:
    def test_ticks_fan_out(self):
        session = PriceFeedSession(["BTCUSDT"])
        first = session.create_queue("a")
        second = session.create_queue("b")

        session.handle_message(trade())

        assert first.get_nowait().symbol == "BTCUSDT"
        assert second.get_nowait().symbol == "BTCUSDT"

    def test_full_queue_drops_oldest(self):
        session = PriceFeedSession(["BTCUSDT"], queue_size=2)
        queue = session.create_queue("a")

        for price in ("1", "2", "3"):
            session.handle_message(trade(price=price))

        assert [queue.get_nowait().price for _ in range(2)] == [2.0, 3.0]

    def test_removed_queue_stops_receiving(self):
        session = PriceFeedSession(["BTCUSDT"])
        queue = session.create_queue("a")
        session.remove_queue("a")

        session.handle_message(trade())

        assert queue.empty()


class TestLifecycle:
    def test_open_retries_and_close(self, monkeypatch):
        attempts = []

        async def scenario():
            session = PriceFeedSession(["BTCUSDT"], reconnect_delay=0.01, max_reconnect_delay=0.02)

            async def refuse():
                attempts.append(1)
                raise aiohttp.ClientConnectionError("connection refused")

            monkeypatch.setattr(session, "_connect", refuse)

            await session.open()
            assert session.is_open
            await asyncio.sleep(0.1)
            assert session.state in (ConnectionState.ERROR, ConnectionState.RECONNECTING)

            await session.close()
            return session

        session = asyncio.run(scenario())

        assert len(attempts) >= 2
        assert not session.is_open
        assert session.state == ConnectionState.DISCONNECTED

    def test_close_without_open(self):
        session = PriceFeedSession(["BTCUSDT"])
        asyncio.run(session.close())
        assert session.state == ConnectionState.DISCONNECTED

    def test_zero_reconnect_delay_is_honoured(self, monkeypatch):
        attempts = []

        async def scenario():
            session = PriceFeedSession(["BTCUSDT"], reconnect_delay=0, max_reconnect_delay=0)

            async def refuse():
                attempts.append(1)
                raise aiohttp.ClientConnectionError("connection refused")

            monkeypatch.setattr(session, "_connect", refuse)

            await session.open()
            await asyncio.sleep(0.05)
            await session.close()

        asyncio.run(scenario())

        # The configured default of 1s would allow a single attempt here
        assert len(attempts) >= 5


def feed_request(session):
    return SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace(price_feed=session)))


class TestPriceStream:
    """SSE generator behind /stream/price/{symbol}"""

    def test_last_price_then_matching_ticks(self):
        async def scenario():
            session = PriceFeedSession(["BTCUSDT", "ETHUSDT"])
            session.handle_message(trade("BTCUSDT", "41000.0"))

            response = await stream_price(feed_request(session), "btc/usdt", heartbeat=5)
            events = response.body_iterator

            first = await events.__anext__()

            session.handle_message(trade("ETHUSDT", "2200.0"))
            session.handle_message(trade("BTCUSDT", "41500.0"))
            second = await events.__anext__()

            await events.aclose()
            return session, first, second

        session, first, second = asyncio.run(scenario())

        assert first.startswith("data: ")
        assert json.loads(first[len("data: "):])["price"] == 41000.0
        tick = json.loads(second[len("data: "):])
        assert tick["symbol"] == "BTCUSDT"
        assert tick["price"] == 41500.0
        assert session._queues == {}

    def test_heartbeat_when_idle(self):
        async def scenario():
            session = PriceFeedSession(["BTCUSDT"])
            response = await stream_price(feed_request(session), "BTCUSDT", heartbeat=1)
            events = response.body_iterator
            line = await events.__anext__()
            await events.aclose()
            return line

        assert asyncio.run(scenario()) == ": heartbeat\n\n"

    def test_symbol_not_on_feed(self):
        session = PriceFeedSession(["BTCUSDT"])

        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(stream_price(feed_request(session), "SOLUSDT", heartbeat=5))

        assert exc_info.value.status_code == 404
