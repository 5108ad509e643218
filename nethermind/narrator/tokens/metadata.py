import asyncio
import logging
from typing import Any

import aiohttp
from aiohttp.client_exceptions import ClientError
from eth_abi import decode as eth_abi_decode
from eth_abi.exceptions import DecodingError as EthAbiDecodingError
from eth_utils import function_signature_to_4byte_selector

from nethermind.narrator.exceptions import TokenMetadataError

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("tokens")

DEFAULT_HEADERS = {"Content-Type": "application/json"}

DECIMALS_SELECTOR = "0x" + function_signature_to_4byte_selector("decimals()").hex()


class TokenMetadataCache:
    """
    Cache for ERC20 token decimals.  Decimals are immutable on-chain, so each token is queried at most once and
    cached indefinitely.

    If the token does not implement ``decimals()``, or the RPC call fails, the default decimals are returned and
    cached.  If no JSON RPC url is configured, the default is returned without any network calls.
    """

    json_rpc: str | None
    """ JSON RPC url used for ``eth_call`` requests """

    default_decimals: int
    """ Decimals returned when the token cannot be queried.  Defaults to the ERC20 standard of 18 """

    request_timeout: float

    _decimals: dict[str, int]

    def __init__(self, json_rpc: str | None = None, default_decimals: int = 18, request_timeout: float = 10.0):
        self.json_rpc = json_rpc
        self.default_decimals = default_decimals
        self.request_timeout = request_timeout
        self._decimals = {}

    def set_decimals(self, token_address: str, decimals: int):
        """Preloads decimals for a token, ie from a static token list"""
        self._decimals[token_address.lower()] = decimals

    async def get_decimals(self, token_address: str, default: int | None = None) -> int:
        """
        Returns decimals for a token, querying the token contract on the first request

        :param token_address: token contract address
        :param default: decimals to fall back to.  Uses ``default_decimals`` if not provided
        """
        key = token_address.lower()
        fallback = self.default_decimals if default is None else default

        if key in self._decimals:
            logger.debug(f"Token decimals cache hit for {key}: {self._decimals[key]}")
            return self._decimals[key]

        if not self.json_rpc:
            return fallback

        logger.debug(f"Token decimals cache miss for {key}, querying contract")
        try:
            decimals = await self._query_decimals(key)
        except TokenMetadataError as e:
            logger.warning(f"Failed to query decimals for {key} ({e}), falling back to {fallback}")
            decimals = fallback

        self._decimals[key] = decimals
        return decimals

    @property
    def cache_size(self) -> int:
        """Number of tokens with cached decimals"""
        return len(self._decimals)

    async def _query_decimals(self, token_address: str) -> int:
        request = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "eth_call",
            "params": [{"to": token_address, "data": DECIMALS_SELECTOR}, "latest"],
        }
        response_json = await self._post(request)

        if not isinstance(response_json, dict):
            raise TokenMetadataError(f"Invalid RPC response: {response_json!r}")

        if "error" in response_json:
            error = response_json["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise TokenMetadataError(f"Error in RPC response: {message}")

        result = response_json.get("result") or "0x"
        if not isinstance(result, str):
            raise TokenMetadataError(f"Invalid decimals() result {result!r}")
        try:
            (decimals,) = eth_abi_decode(["uint8"], bytes.fromhex(result.removeprefix("0x")))
        except (EthAbiDecodingError, ValueError) as e:
            raise TokenMetadataError(f"Invalid decimals() result {result}") from e

        return decimals

    async def _post(self, request: dict[str, Any]) -> dict[str, Any]:
        timeout = aiohttp.ClientTimeout(total=self.request_timeout)
        try:
            async with aiohttp.ClientSession(headers=DEFAULT_HEADERS, timeout=timeout) as session:
                async with session.post(self.json_rpc, json=request) as response:  # type: ignore[arg-type]
                    return await response.json(content_type=None)
        except (ClientError, asyncio.TimeoutError, ValueError) as e:
            raise TokenMetadataError(f"{e.__class__.__name__}: {e}") from e
