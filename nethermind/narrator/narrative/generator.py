import asyncio
import logging
from dataclasses import dataclass

from eth_utils import is_address, to_normalized_address

from nethermind.narrator.config import NarrativeConfig
from nethermind.narrator.tokens import TokenMetadataCache
from nethermind.narrator.types import DecodedCall

from .formatting import abbreviate
from .labels import AddressLabelResolver, safe_resolve
from .templates import NarrativeContext, select_template

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("narrative")

FAILED_SUFFIX = " (transaction failed)"
UNKNOWN_CONTRACT = "unknown contract"
NO_TRANSACTIONS = "No transactions found."


@dataclass(frozen=True)
class NarrativeRequest:
    """Inputs for a single narrative in a batch"""

    decoded: DecodedCall
    from_address: str
    to_address: str | None
    tx_hash: str | bytes
    is_local_wallet: bool = True
    success: bool = True


def format_tx_hash(tx_hash: str | bytes) -> str:
    """Abbreviated 0x prefixed form of a transaction hash"""
    if isinstance(tx_hash, (bytes, bytearray)):
        tx_hash = "0x" + tx_hash.hex()
    elif not tx_hash.startswith("0x"):
        tx_hash = "0x" + tx_hash
    return abbreviate(tx_hash.lower())


class NarrativeGenerator:
    """
    Renders decoded calls into human readable sentences.

    The generator holds no mutable state of its own.  Address labels and token decimals are looked up through
    the resolver and token metadata cache passed in, and any caching belongs to those collaborators.  Narrative
    generation never raises: label failures render the abbreviated address, and token metadata failures render
    amounts with default decimals.

    With ``0x1111...1111`` as the active wallet, an ERC20 ``transfer`` of ``1.5 * 10**18`` units to
    ``0x3333...3333``, sent to the token at ``0x4444...4444``, renders as::

        you transferred 1.5 tokens to 0x3333...3333 via contract at 0x4444...4444 [tx: 0xabcd...1234]

    """

    config: NarrativeConfig
    label_resolver: AddressLabelResolver | None
    token_metadata: TokenMetadataCache | None

    def __init__(
        self,
        config: NarrativeConfig | None = None,
        label_resolver: AddressLabelResolver | None = None,
        token_metadata: TokenMetadataCache | None = None,
    ):
        self.config = config or NarrativeConfig()
        self.label_resolver = label_resolver
        self.token_metadata = token_metadata

    async def display_address(self, address: str, is_local_wallet: bool = True) -> str:
        """
        Display form of an address.  The active wallet renders as ``you``, addresses with a resolved label render
        as the label, and every other address renders in lowercase, abbreviated unless ``show_full_addresses``
        is configured.

        :param address: address to render
        :param is_local_wallet: if False, the active wallet is rendered like any other address
        """
        normalized = to_normalized_address(address) if is_address(address) else address.lower()

        if is_local_wallet and self.config.active_wallet and normalized == self.config.active_wallet:
            return "you"

        label = await safe_resolve(self.label_resolver, normalized)
        if label:
            return label

        return normalized if self.config.show_full_addresses else abbreviate(normalized)

    async def token_decimals(self, token_address: str | None, default: int) -> int:
        """Decimals for a token, or the default if no token metadata cache is configured"""
        if self.token_metadata is None or not token_address or not is_address(token_address):
            return default
        return await self.token_metadata.get_decimals(token_address, default=default)

    async def generate_narrative(
        self,
        decoded: DecodedCall,
        from_address: str,
        to_address: str | None,
        tx_hash: str | bytes,
        is_local_wallet: bool = True,
        success: bool = True,
    ) -> str:
        """
        Generates a narrative for a decoded call

        :param decoded: decoded transaction call
        :param from_address: transaction sender
        :param to_address: transaction destination.  None for contract creations
        :param tx_hash: transaction hash, as hex string or bytes
        :param is_local_wallet: whether the configured active wallet should render as ``you``
        :param success: receipt status.  Failed transactions are marked in the narrative
        :return: narrative string, ending with the abbreviated transaction hash
        """

        async def _display(address: str) -> str:
            return await self.display_address(address, is_local_wallet)

        context = NarrativeContext(
            decoded=decoded,
            sender=await _display(from_address),
            contract=await _display(to_address) if to_address else UNKNOWN_CONTRACT,
            contract_address=to_address.lower() if to_address else None,
            display_address=_display,
            token_decimals=self.token_decimals,
        )

        template = select_template(decoded)
        sentence = await template(context)
        logger.debug(
            f"Rendered {decoded.contract_type.value}.{decoded.function_name} with template {template.__name__}"
        )

        status = "" if success else FAILED_SUFFIX
        return f"{sentence}{status} [tx: {format_tx_hash(tx_hash)}]"

    async def generate_batch(self, requests: list[NarrativeRequest]) -> list[str]:
        """
        Generates narratives for a batch of requests.  Each request runs as an independent task, and the results
        are returned in the order of the requests.
        """
        return await asyncio.gather(
            *[
                self.generate_narrative(
                    request.decoded,
                    request.from_address,
                    request.to_address,
                    request.tx_hash,
                    is_local_wallet=request.is_local_wallet,
                    success=request.success,
                )
                for request in requests
            ]
        )


def generate_sequential_narrative(narratives: list[str]) -> str:
    """
    Joins narratives into a single chronological description

    >>> print(generate_sequential_narrative(["alice sent 1", "bob sent 2", "carol sent 3"]))
    First. alice sent 1
    Then. bob sent 2
    Finally. carol sent 3

    """
    if not narratives:
        return NO_TRANSACTIONS
    if len(narratives) == 1:
        return narratives[0]

    parts = []
    for index, narrative in enumerate(narratives):
        if index == 0:
            connector = "First"
        elif index == len(narratives) - 1:
            connector = "Finally"
        else:
            connector = "Then"
        parts.append(f"{connector}. {narrative}")
    return "\n".join(parts)
