from nethermind.narrator.types import ContractType

from .function_decoders import SelectorEntry


def classify(selector_entry: SelectorEntry | None, destination: str | None) -> ContractType:
    """
    Assigns a contract category to a call.  Transactions without a destination are always contract creations,
    regardless of the input.  Otherwise the family of the registry's chosen entry is used, so classification can
    never disagree with the entry the decoder picked on a selector collision.

    :param selector_entry: entry returned by :meth:`SelectorRegistry.lookup`, or None if the selector is unknown
    :param destination: ``to`` address of the transaction
    """
    if destination is None:
        return ContractType.contract_creation
    if selector_entry is not None:
        return selector_entry.family
    return ContractType.unknown
