import json
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from nethermind.narrator.types.utils import HexEnabledJsonEncoder

ZERO_SELECTOR = "0x00000000"
""" Sentinel selector used for contract creations and native transfers, which carry no function selector """

NATIVE_ASSET = "native"
""" Value of the ``asset`` parameter on native-currency transfers """

CONTRACT_ADDRESS_KEY = "contract_address"
""" Parameter key under which the deployed address of a contract creation is carried """


class ContractType(str, Enum):
    """Closed set of contract categories a decoded call can be assigned to"""

    fungible_token = "FungibleToken"
    non_fungible_token = "NonFungibleToken"
    pool_manager = "PoolManager"
    primary_sale = "PrimarySale"
    contract_creation = "ContractCreation"
    generic = "Generic"
    unknown = "Unknown"


@dataclass(frozen=True)
class DecodedCall:
    """Decoded Transaction Call"""

    function_name: str
    """ Name of the called function.  ``constructor`` for creations, ``unknown`` for unmatched selectors """

    contract_type: ContractType
    """ Category of the call, taken from the family of the matched selector """

    selector: str
    """ 0x prefixed hex of the 4 byte selector.  ``0x00000000`` if the call has no selector """

    parameters: Mapping[str, Any] = field(default_factory=dict)
    """ Decoded arguments in ABI declaration order.  Integers are decimal strings, addresses lowercase hex.
    Read-only, copied on construction """

    raw_input: bytes = b""
    """ Full transaction input, including the selector """

    def __post_init__(self):
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    @property
    def is_native_transfer(self) -> bool:
        """True if the call moves native currency without calling a contract function"""
        return self.contract_type == ContractType.generic and self.parameters.get("asset") == NATIVE_ASSET

    def to_dict(self) -> dict[str, Any]:
        """
        Returns dictionary form of the decoded call.  Used for passing decoded calls to tool dispatchers as JSON

        :return:
        """
        return {
            "function_name": self.function_name,
            "contract_type": self.contract_type.value,
            "selector": self.selector,
            "parameters": dict(self.parameters),
            "raw_input": "0x" + self.raw_input.hex(),
        }

    def to_json(self, indent: int | None = None) -> str:
        """Serializes the decoded call to a JSON string"""
        return json.dumps(self.to_dict(), cls=HexEnabledJsonEncoder, indent=indent)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DecodedCall":
        """Inverse of :meth:`to_dict`"""
        raw_input = data.get("raw_input") or "0x"
        return cls(
            function_name=data["function_name"],
            contract_type=ContractType(data["contract_type"]),
            selector=data["selector"],
            parameters=dict(data.get("parameters") or {}),
            raw_input=bytes.fromhex(raw_input.removeprefix("0x")),
        )

    def with_parameters(self, **extra: Any) -> "DecodedCall":
        """Returns a copy of the call with additional parameters appended after the decoded ones"""
        return replace(self, parameters={**self.parameters, **extra})


def with_deployed_address(decoded: DecodedCall, contract_address: str | None) -> DecodedCall:
    """
    Attaches the address of a deployed contract to a contract creation call.  The address comes from the
    transaction receipt.  Calls that are not creations, or receipts without an address, are returned unchanged.

    :param decoded: decoded contract creation
    :param contract_address: ``contractAddress`` field of the receipt
    """
    if decoded.contract_type != ContractType.contract_creation or not contract_address:
        return decoded
    return decoded.with_parameters(**{CONTRACT_ADDRESS_KEY: contract_address.lower()})


@dataclass(frozen=True)
class RawTransaction:
    """Transaction fields consumed from the transaction fetch service"""

    hash: str
    from_address: str
    to_address: str | None
    input: bytes = b""
    value: int = 0


@dataclass(frozen=True)
class TransactionReceipt:
    """Receipt fields consumed from the transaction fetch service"""

    status: bool
    contract_address: str | None = None
