import logging
from typing import Any

from eth_abi import decode as eth_abi_decode
from eth_abi.exceptions import DecodingError as EthAbiDecodingError
from eth_abi.exceptions import InsufficientDataBytes, NonEmptyPaddingBytes
from eth_typing import ABIFunction
from eth_utils import is_address, to_normalized_address

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("decoding")


def abi_to_signature(abi: ABIFunction) -> str:
    """
    Converts ABI to signature.

    >>> abi_to_signature({"name": "transfer", "type": "function", "inputs": [
    ...     {"name": "to", "type": "address"}, {"name": "amount", "type": "uint256"}
    ... ]})
    'transfer(address,uint256)'

    """
    collapsed = [collapse_if_tuple(abi_input) for abi_input in abi.get("inputs", [])]
    return f"{abi['name']}({','.join(collapsed)})"


def collapse_if_tuple(abi_params: dict[str, Any]) -> str:
    """
    Converts a tuple from a dict to a parenthesized list of its types.

    >>> collapse_if_tuple(
    ...     {
    ...         'components': [
    ...             {'name': 'anAddress', 'type': 'address'},
    ...             {'name': 'anInt', 'type': 'uint256'},
    ...             {'name': 'someBytes', 'type': 'bytes'},
    ...         ],
    ...         'type': 'tuple',
    ...     }
    ... )
    '(address,uint256,bytes)'
    """

    typ = abi_params["type"]
    if not isinstance(typ, str):
        raise TypeError(f"The 'type' must be a string, but got {typ} of type {type(typ)}")

    if not typ.startswith("tuple"):
        return typ

    delimited = ",".join(collapse_if_tuple(c) for c in abi_params["components"])
    # Whatever comes after "tuple" is the array dims.  Solidity ABI JSON defines that
    # this will have the form "", "[]", or "[k]".
    array_dim = typ[5:]
    return f"({delimited}){array_dim}"


def filter_functions(contract_abi: list[dict[str, Any]]) -> list[ABIFunction]:
    """Filters out all non-function ABIs"""
    return [abi for abi in contract_abi if abi["type"] == "function"]  # type: ignore[misc]


def decode_evm_abi_from_types(types: list[str], data: bytes | bytearray) -> tuple[Any, ...] | None:
    """
    Decodes ABI data from types and data bytes.  Properly Handles various decoding errors by logging and
    returning none.

    :param types:
    :param data:
    :return:
    """
    try:
        return eth_abi_decode(types, data)
    except InsufficientDataBytes:
        logger.debug(f"Insufficient data bytes while decoding {data.hex()} for types {types}")
        return None
    except NonEmptyPaddingBytes:
        logger.debug(f"Non-empty padding bytes while decoding {data.hex()} for types {types}")
        return None
    except OverflowError:
        logger.debug(f"Overflow error while decoding {data.hex()} for types {types}")
        return None
    except EthAbiDecodingError as e:
        logger.debug(f"{e.__class__.__name__} while decoding {data.hex()} for types {types}: {e}")
        return None


def normalize_abi_value(value: Any, abi_type: str) -> Any:
    """
    Normalizes a decoded ABI value into its interchange form.  Integers become decimal strings to avoid
    precision loss in JSON consumers, addresses become lowercase hex, and byte strings become 0x prefixed hex.
    Arrays and tuples are normalized element-wise into lists.

    >>> normalize_abi_value(10**30, "uint256")
    '1000000000000000000000000000000'
    >>> normalize_abi_value(b"\\x01\\x02", "bytes")
    '0x0102'
    """
    if abi_type.endswith("]"):
        element_type = abi_type[: abi_type.rfind("[")]
        return [normalize_abi_value(item, element_type) for item in value]

    if abi_type.startswith("("):
        component_types = split_tuple_types(abi_type)
        return [normalize_abi_value(item, typ) for item, typ in zip(value, component_types, strict=True)]

    match value:
        case bool():
            return value
        case int():
            return str(value)
        case bytes() | bytearray():
            return "0x" + bytes(value).hex()
        case str() if abi_type == "address":
            return to_normalized_address(value) if is_address(value) else value.lower()
        case _:
            return value


def split_tuple_types(tuple_type: str) -> list[str]:
    """
    Splits a collapsed tuple type into its component types, respecting nested tuples

    >>> split_tuple_types("(address,(uint256,bool)[],bytes)")
    ['address', '(uint256,bool)[]', 'bytes']
    """
    inner = tuple_type[1 : tuple_type.rfind(")")]
    components, depth, current = [], 0, ""
    for char in inner:
        if char == "," and depth == 0:
            components.append(current)
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    if current:
        components.append(current)
    return components
