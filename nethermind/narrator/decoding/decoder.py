import logging
from typing import Sequence

from nethermind.narrator.exceptions import DecodingError, MalformedInput
from nethermind.narrator.types import (
    NATIVE_ASSET,
    ZERO_SELECTOR,
    ContractType,
    DecodedCall,
    RawTransaction,
)

from .classifier import classify
from .registry import SelectorRegistry, default_registry

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("decoding")


class TransactionDecoder:
    """

    Decodes raw EVM transaction input into :class:`DecodedCall` objects using a :class:`SelectorRegistry`.
    Unknown selectors are not errors, and still produce a best-effort result so narratives can be generated for
    every transaction.

    Decoding holds no mutable state, so a single decoder can be shared across threads.

    """

    registry: SelectorRegistry

    def __init__(self, registry: SelectorRegistry | None = None):
        self.registry = registry if registry is not None else default_registry()

    def decode(self, input_data: bytes, destination: str | None) -> DecodedCall:
        """
        Decodes transaction input

        :param input_data: Transaction input, including the 4 byte function selector
        :param destination: ``to`` address of the transaction.  None for contract creations
        :return: DecodedCall
        :raises MalformedInput: input is shorter than a function selector
        :raises AbiMismatch: selector is known, but arguments do not match the registered signature
        """
        if destination is None:
            return DecodedCall(
                function_name="constructor",
                contract_type=ContractType.contract_creation,
                selector=ZERO_SELECTOR,
                parameters={},
                raw_input=bytes(input_data),
            )

        if len(input_data) == 0:
            return DecodedCall(
                function_name="transfer",
                contract_type=ContractType.generic,
                selector=ZERO_SELECTOR,
                parameters={"asset": NATIVE_ASSET},
                raw_input=b"",
            )

        if len(input_data) < 4:
            raise MalformedInput(
                f"Input data too short for function selector: 0x{input_data.hex()}",
                selector="0x" + input_data.hex(),
                input_length=len(input_data),
            )

        selector = "0x" + input_data[:4].hex()
        entry = self.registry.lookup(input_data[:4])
        if entry is None:
            logger.debug(f"Unknown function selector {selector} called on {destination}")
            return DecodedCall(
                function_name="unknown",
                contract_type=classify(None, destination),
                selector=selector,
                parameters={},
                raw_input=bytes(input_data),
            )

        parameters = entry.decode(bytes(input_data[4:]))
        return DecodedCall(
            function_name=entry.name,
            contract_type=classify(entry, destination),
            selector=selector,
            parameters=parameters,
            raw_input=bytes(input_data),
        )

    def decode_transaction(self, tx: RawTransaction) -> DecodedCall:
        """
        Decodes a full transaction record.  Native transfers additionally carry the transferred ``value`` in wei.

        :param tx: transaction from the fetch service
        """
        decoded = self.decode(tx.input, tx.to_address)
        if decoded.is_native_transfer:
            return decoded.with_parameters(value=str(tx.value))
        return decoded

    def decode_batch(self, transactions: Sequence[RawTransaction]) -> list[DecodedCall | DecodingError]:
        """
        Decodes a batch of transactions.  Returns one result per transaction in input order.  Decoding failures
        are returned in place of the failed transaction, and never affect the other results.

        :param transactions:
        :return: list of DecodedCall, or the DecodingError raised for that transaction
        """
        results: list[DecodedCall | DecodingError] = []
        for tx in transactions:
            try:
                results.append(self.decode_transaction(tx))
            except DecodingError as e:
                logger.debug(f"Failed to decode transaction {tx.hash}: {e}")
                results.append(e)

        return results
