import asyncio
import logging
from typing import Any

import pytest
from eth_abi import encode

from nethermind.narrator.exceptions import TokenMetadataError
from nethermind.narrator.tokens import TokenMetadataCache
from nethermind.narrator.tokens.metadata import DECIMALS_SELECTOR

USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


def fake_rpc(cache: TokenMetadataCache, response: Any) -> list[dict]:
    requests: list[dict] = []

    async def _post(request):
        requests.append(request)
        if isinstance(response, Exception):
            raise response
        return response

    cache._post = _post  # type: ignore[method-assign]
    return requests


def test_decimals_selector():
    assert DECIMALS_SELECTOR == "0x313ce567"


def test_without_rpc_returns_default():
    cache = TokenMetadataCache()

    assert asyncio.run(cache.get_decimals(USDC)) == 18
    assert asyncio.run(cache.get_decimals(USDC, default=6)) == 6
    assert cache.cache_size == 0


def test_preloaded_decimals():
    cache = TokenMetadataCache()
    cache.set_decimals(USDC, 6)

    assert asyncio.run(cache.get_decimals(USDC.lower(), default=18)) == 6


def test_queries_once_and_caches():
    cache = TokenMetadataCache(json_rpc="http://localhost:8545")
    requests = fake_rpc(cache, {"jsonrpc": "2.0", "id": 1, "result": "0x" + encode(["uint8"], [6]).hex()})

    async def _query_twice():
        return [await cache.get_decimals(USDC), await cache.get_decimals(USDC)]

    assert asyncio.run(_query_twice()) == [6, 6]
    assert len(requests) == 1
    assert requests[0]["method"] == "eth_call"
    assert requests[0]["params"][0] == {"to": USDC.lower(), "data": "0x313ce567"}
    assert cache.cache_size == 1


def test_rpc_error_falls_back_to_default(caplog):
    cache = TokenMetadataCache(json_rpc="http://localhost:8545")
    requests = fake_rpc(cache, {"jsonrpc": "2.0", "id": 1, "error": {"code": -32000, "message": "execution reverted"}})

    with caplog.at_level(logging.WARNING, logger="nethermind"):
        assert asyncio.run(cache.get_decimals(USDC, default=6)) == 6

    assert any("execution reverted" in record.message for record in caplog.records)
    assert asyncio.run(cache.get_decimals(USDC)) == 6
    assert len(requests) == 1


@pytest.mark.parametrize(
    "response",
    [
        None,
        [],
        {"jsonrpc": "2.0", "id": 1, "error": "rate limited"},
        {"jsonrpc": "2.0", "id": 1, "error": None},
        {"jsonrpc": "2.0", "id": 1, "result": 6},
        {"jsonrpc": "2.0", "id": 1, "result": ["0x06"]},
    ],
)
def test_malformed_rpc_response_falls_back_to_default(response):
    cache = TokenMetadataCache(json_rpc="http://localhost:8545")
    fake_rpc(cache, response)

    assert asyncio.run(cache.get_decimals(USDC, default=6)) == 6
    assert cache.cache_size == 1


def test_empty_result_falls_back_to_default():
    cache = TokenMetadataCache(json_rpc="http://localhost:8545")
    fake_rpc(cache, {"jsonrpc": "2.0", "id": 1, "result": "0x"})

    assert asyncio.run(cache.get_decimals(USDC)) == 18


def test_connection_failure_falls_back_to_default():
    cache = TokenMetadataCache(json_rpc="http://localhost:8545", default_decimals=8)
    fake_rpc(cache, TokenMetadataError("ClientConnectorError: connection refused"))

    assert asyncio.run(cache.get_decimals(USDC)) == 8
