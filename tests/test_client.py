"""Tests for the strategy service client against an in-process aiohttp server."""

import asyncio

import pytest
from aiohttp import ClientTimeout, web
from aiohttp import test_utils

from strategy_core.client import StrategyServiceClient, build_run_request
from strategy_core.exceptions import GENERIC_NETWORK_MESSAGE, NetworkError
from strategy_core.validation import validate_strategy


@pytest.fixture
def strategy(ema_crossover):
    return validate_strategy(ema_crossover)


def run_against(handler, strategy, timeout=None):
    """POST strategy to a throwaway server using handler; returns the client result."""
    async def scenario():
        app = web.Application()
        app.router.add_post("/run_strategy", handler)
        async with test_utils.TestServer(app) as server:
            client = StrategyServiceClient(str(server.make_url("/run_strategy")), timeout=timeout)
            return await client.run_strategy(strategy)

    return asyncio.run(scenario())


def test_build_run_request(strategy, ema_crossover):
    assert build_run_request(strategy) == {
        "strategy_name": "EMA Crossover",
        "rules": ema_crossover["conditions"],
    }


def test_success_returns_results(strategy, ema_crossover):
    received = []

    async def handler(request):
        received.append(await request.json())
        return web.json_response({"results": {"signals": 3, "symbols": ["AAPL"]}})

    assert run_against(handler, strategy) == {"signals": 3, "symbols": ["AAPL"]}
    assert received == [{"strategy_name": "EMA Crossover", "rules": ema_crossover["conditions"]}]


def test_error_detail_shown_verbatim(strategy):
    async def handler(request):
        return web.json_response({"detail": "Indicator Supertrend is not available"}, status=422)

    with pytest.raises(NetworkError) as exc_info:
        run_against(handler, strategy)
    assert exc_info.value.user_message == "Indicator Supertrend is not available"
    assert exc_info.value.status == 422


def test_error_without_detail_is_generic(strategy):
    async def handler(request):
        return web.Response(status=500, text="Internal Server Error")

    with pytest.raises(NetworkError) as exc_info:
        run_against(handler, strategy)
    assert exc_info.value.user_message == GENERIC_NETWORK_MESSAGE
    assert exc_info.value.status == 500


def test_unreadable_success_body(strategy):
    async def handler(request):
        return web.Response(status=200, text="<html>ok</html>")

    with pytest.raises(NetworkError) as exc_info:
        run_against(handler, strategy)
    assert exc_info.value.user_message == GENERIC_NETWORK_MESSAGE


def test_connection_failure(strategy):
    client = StrategyServiceClient(f"http://127.0.0.1:{test_utils.unused_port()}/run_strategy")
    with pytest.raises(NetworkError) as exc_info:
        asyncio.run(client.run_strategy(strategy))
    assert exc_info.value.user_message == GENERIC_NETWORK_MESSAGE
    assert exc_info.value.status is None


def test_url_from_config(monkeypatch):
    monkeypatch.setenv("STRATEGY_SERVICE_URL", "http://strategies.internal/run_strategy")
    assert StrategyServiceClient().url == "http://strategies.internal/run_strategy"


def test_timeout_is_network_error(strategy):
    async def handler(request):
        await asyncio.sleep(1)
        return web.json_response({"results": []})

    with pytest.raises(NetworkError) as exc_info:
        run_against(handler, strategy, timeout=ClientTimeout(total=0.2))
    assert exc_info.value.user_message == GENERIC_NETWORK_MESSAGE
    assert exc_info.value.status is None
