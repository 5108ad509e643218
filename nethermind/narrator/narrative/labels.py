import logging
from typing import Mapping, Protocol

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("labels")

KNOWN_MAINNET_LABELS: dict[str, str] = {
    # Stablecoins
    "0xdac17f958d2ee523a2206206994597c13d831ec7": "USDT",
    "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48": "USDC",
    "0x6b175474e89094c44da98b954eedeac495271d0f": "DAI",
    # Wrapped native
    "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2": "WETH",
    # DEX routers
    "0x7a250d5630b4cf539739df2c5dacb4c659f2488d": "Uniswap V2 Router",
    "0xd9e1ce17f2641f24ae83637ab66a2cca9c378b9f": "SushiSwap Router",
}
""" Well known Ethereum mainnet addresses.  Keys are lowercase """


class AddressLabelResolver(Protocol):
    """Resolves addresses into human readable labels.  Returns None if no label is known"""

    async def resolve(self, address: str) -> str | None:
        """Return label for address, or None"""
        ...


class StaticLabelResolver:
    """Resolves labels from a fixed mapping of addresses.  Never performs I/O"""

    labels: dict[str, str]

    def __init__(self, labels: Mapping[str, str] | None = None):
        self.labels = {address.lower(): label for address, label in (labels or {}).items()}

    @classmethod
    def mainnet(cls, extra_labels: Mapping[str, str] | None = None) -> "StaticLabelResolver":
        """Resolver preloaded with well known mainnet tokens and routers"""
        return cls({**KNOWN_MAINNET_LABELS, **(extra_labels or {})})

    async def resolve(self, address: str) -> str | None:
        return self.labels.get(address.lower())


class CachingLabelResolver:
    """
    Wraps another resolver, and caches its results per address.  Both hits and misses are cached, so each address
    is looked up at most once.  Lookups that raise are not cached, and the error is propagated to the caller.
    """

    resolver: AddressLabelResolver
    _cache: dict[str, str | None]

    def __init__(self, resolver: AddressLabelResolver):
        self.resolver = resolver
        self._cache = {}

    async def resolve(self, address: str) -> str | None:
        key = address.lower()
        if key in self._cache:
            return self._cache[key]

        label = await self.resolver.resolve(key)
        self._cache[key] = label
        return label

    @property
    def cache_size(self) -> int:
        """Number of cached addresses"""
        return len(self._cache)


async def safe_resolve(resolver: AddressLabelResolver | None, address: str) -> str | None:
    """
    Resolves a label, treating every resolver failure as "no label available"

    :param resolver: label resolver.  If None, no label is returned
    :param address: address to resolve
    """
    if resolver is None:
        return None
    try:
        return await resolver.resolve(address)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.debug(f"Label resolution failed for {address}: {e.__class__.__name__}({e})")
        return None
