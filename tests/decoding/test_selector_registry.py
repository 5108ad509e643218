import logging

import pytest

from nethermind.narrator.decoding import SelectorRegistry, classify, default_registry
from nethermind.narrator.decoding.interfaces import ERC20_ABI, ERC721_ABI, KNOWN_INTERFACES
from nethermind.narrator.types import ContractType


def test_default_registry_contents():
    registry = default_registry()

    assert len(registry) == 34
    assert len(registry.shadowed) == 2
    assert registry is default_registry()

    for selector, signature in [
        ("0xa9059cbb", "transfer(address,uint256)"),
        ("0x42842e0e", "safeTransferFrom(address,address,uint256)"),
        ("0xb88d4fde", "safeTransferFrom(address,address,uint256,bytes)"),
        ("0x38ed1739", "swapExactTokensForTokens(uint256,uint256,address[],address,uint256)"),
        ("0xd0e30db0", "deposit()"),
        ("0xf2fde38b", "transferOwnership(address)"),
        ("0xac9650d8", "multicall(bytes[])"),
    ]:
        assert registry.lookup(selector).signature == signature


def test_lookup_accepts_bytes_and_hex():
    registry = default_registry()

    assert registry.lookup(bytes.fromhex("a9059cbb")) is registry.lookup("0xa9059cbb")
    assert registry.lookup("a9059cbb") is registry.lookup("0xa9059cbb")
    assert registry.lookup("0xdeadbeef") is None
    assert "0xa9059cbb" in registry
    assert "0xdeadbeef" not in registry


def test_shared_selectors_resolve_to_first_interface():
    registry = default_registry()

    transfer_from = registry.lookup("0x23b872dd")
    assert transfer_from.interface == "ERC20"
    assert transfer_from.family == ContractType.fungible_token

    approve = registry.lookup("0x095ea7b3")
    assert approve.interface == "ERC20"
    assert approve.family == ContractType.fungible_token

    assert {(e.interface, e.name) for e in registry.shadowed} == {("ERC721", "transferFrom"), ("ERC721", "approve")}


def test_registration_order_controls_precedence():
    registry = SelectorRegistry(
        [
            ("ERC721", ERC721_ABI, ContractType.non_fungible_token),
            ("ERC20", ERC20_ABI, ContractType.fungible_token),
        ]
    )

    assert registry.lookup("0x23b872dd").family == ContractType.non_fungible_token
    assert registry.lookup("0xa9059cbb").family == ContractType.fungible_token
    assert {e.interface for e in registry.shadowed} == {"ERC20"}


def test_duplicate_signature_is_shadowed(caplog):
    first = [{"type": "function", "name": "burn", "inputs": [{"name": "amount", "type": "uint256"}]}]
    second = [{"type": "function", "name": "burn", "inputs": [{"name": "value", "type": "uint256"}]}]

    with caplog.at_level(logging.DEBUG, logger="nethermind"):
        registry = SelectorRegistry(
            [("First", first, ContractType.fungible_token), ("Second", second, ContractType.generic)]
        )

    assert registry.lookup("0x42966c68").interface == "First"
    assert any("already registered by First" in record.message for record in caplog.records)


def test_registry_is_read_only():
    registry = default_registry()

    with pytest.raises(TypeError):
        registry._entries[b"\x00\x00\x00\x00"] = registry.lookup("0xa9059cbb")  # type: ignore[index]

    assert not hasattr(registry, "register")


def test_entries_for_family_follow_registration_order():
    registry = default_registry()

    primary_sale = registry.entries_for(ContractType.primary_sale)
    assert primary_sale[0].name == "activate"
    assert primary_sale[-1].name == "setAllowedBatch"
    assert registry.entries_for(ContractType.unknown) == []


def test_interfaces_registered_fungible_before_non_fungible():
    names = [name for name, _, _ in KNOWN_INTERFACES]
    assert names.index("ERC20") < names.index("ERC721")


def test_decoder_table_lists_families():
    table = default_registry().decoder_table(full_signatures=False)

    assert table.row_count == 5
    assert [column.header for column in table.columns] == ["Family", "Interfaces", "Functions"]


def test_classify_precedence(random_address):
    entry = default_registry().lookup("0x38ed1739")

    assert classify(entry, None) == ContractType.contract_creation
    assert classify(None, None) == ContractType.contract_creation
    assert classify(entry, random_address()) == ContractType.pool_manager
    assert classify(None, random_address()) == ContractType.unknown


def test_classify_agrees_with_registry_on_collisions(random_address):
    registry = default_registry()

    for selector in ("0x23b872dd", "0x095ea7b3"):
        entry = registry.lookup(selector)
        assert classify(entry, random_address()) == entry.family == ContractType.fungible_token


@pytest.mark.parametrize("family", [ContractType.contract_creation, ContractType.unknown])
def test_registry_rejects_families_reserved_for_classification(family):
    with pytest.raises(ValueError, match=family.value):
        SelectorRegistry([("Deployer", ERC20_ABI, family)])
