import random

import pytest
from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address


@pytest.fixture(name="random_address")
def fixture_random_address():
    def _generate_random_address():
        return to_checksum_address(random.randbytes(20).hex())

    return _generate_random_address


@pytest.fixture(name="encode_call")
def fixture_encode_call():
    """Builds calldata for a function signature, ie ``encode_call("transfer(address,uint256)", [to, 100])``"""

    def _encode_call(signature: str, args: list, types: list[str] | None = None) -> bytes:
        if types is None:
            inner = signature[signature.find("(") + 1 : signature.rfind(")")]
            types = [typ for typ in inner.split(",") if typ]
        return function_signature_to_4byte_selector(signature) + encode(types, args)

    return _encode_call


@pytest.fixture(name="sample_value")
def fixture_sample_value(random_address):
    """Returns a valid sample argument for a simple ABI type"""

    def _sample_value(abi_type: str):
        if abi_type.endswith("[]"):
            element_type = abi_type[:-2]
            return [_sample_value(element_type) for _ in range(3)]
        if abi_type == "address":
            return random_address()
        if abi_type == "bool":
            return bool(random.randint(0, 1))
        if abi_type.startswith("uint"):
            return random.randint(0, 2**64)
        if abi_type == "bytes":
            return random.randbytes(random.randint(1, 70))
        raise ValueError(f"No sample value for {abi_type}")

    return _sample_value
