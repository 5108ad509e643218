import logging
from dataclasses import dataclass
from typing import Any

from eth_typing import ABIFunction
from eth_utils.abi import function_signature_to_4byte_selector, get_abi_input_types

from nethermind.narrator.exceptions import AbiMismatch
from nethermind.narrator.types import ContractType

from .utils import abi_to_signature, decode_evm_abi_from_types, normalize_abi_value

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("decoding")


@dataclass(frozen=True)
class SelectorEntry:
    """
    Represents a single registered EVM function selector.  Parses input types once, so calldata for the selector
    can be decoded without touching the ABI again.
    """

    selector: bytes
    """ 4 byte function selector """

    name: str
    """ Function name, ie ``transfer`` """

    signature: str
    """ Canonical function signature, ie ``transfer(address,uint256)`` """

    input_types: tuple[str, ...]
    input_names: tuple[str, ...]

    family: ContractType
    """ Contract family that registered the selector """

    interface: str
    """ Name of the interface the function was loaded from, ie ``ERC20`` """

    @classmethod
    def from_abi(cls, abi_function: ABIFunction, interface: str, family: ContractType) -> "SelectorEntry":
        """
        Builds a selector entry from a JSON ABI function fragment

        :param abi_function: ABI dict with ``name`` and ``inputs``
        :param interface: name of the interface containing the function
        :param family: contract family to classify calls to this selector as
        """
        signature = abi_to_signature(abi_function)
        return cls(
            selector=function_signature_to_4byte_selector(signature),
            name=abi_function["name"],
            signature=signature,
            input_types=tuple(get_abi_input_types(abi_function)),
            input_names=tuple(param["name"] for param in abi_function.get("inputs", [])),
            family=family,
            interface=interface,
        )

    @property
    def selector_hex(self) -> str:
        """0x prefixed selector hex string"""
        return "0x" + self.selector.hex()

    def decode(self, calldata: bytes) -> dict[str, Any]:
        """
        Decodes the argument bytes that follow the selector.  Returns parameters in declaration order, with values
        normalized for JSON interchange.

        :param calldata: transaction input with the 4 byte selector already removed
        :raises AbiMismatch: if calldata does not conform to the input types
        """
        if not self.input_types:
            return {}

        decoded_input = decode_evm_abi_from_types(list(self.input_types), calldata)
        if decoded_input is None:
            logger.debug(f"Error Decoding {self.signature} For Input 0x{calldata.hex()}")
            raise AbiMismatch(
                f"Calldata does not match {self.signature} ({self.interface})",
                selector=self.selector_hex,
                signature=self.signature,
                input_length=len(calldata) + 4,
            )

        return {
            name: normalize_abi_value(value, typ)
            for name, value, typ in zip(self.input_names, decoded_input, self.input_types, strict=True)
        }

    def id_str(self, full_signature: bool = True) -> str:
        """
        Returns ID string for function.  If full_signature is True, returns the function name & parameter types.
        If full_signature is false, returns function name
        """
        if full_signature:
            return self.signature
        return self.name
