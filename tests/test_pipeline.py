import asyncio

import pytest

from nethermind.narrator.config import NarrativeConfig
from nethermind.narrator.narrative import NarrativeGenerator
from nethermind.narrator.pipeline import narrate_transactions
from nethermind.narrator.types import RawTransaction, TransactionReceipt

WALLET = "0x1111111111111111111111111111111111111111"
RECIPIENT = "0x3333333333333333333333333333333333333333"
CONTRACT = "0x4444444444444444444444444444444444444444"
DEPLOYED = "0x5555555555555555555555555555555555555555"


def tx_hash(index: int) -> str:
    return "0xabcd" + f"{index:060x}"


@pytest.fixture(name="generator")
def fixture_generator():
    return NarrativeGenerator(NarrativeConfig(active_wallet=WALLET))


@pytest.fixture(name="transactions")
def fixture_transactions(encode_call):
    return [
        RawTransaction(
            hash=tx_hash(1),
            from_address=WALLET,
            to_address=CONTRACT,
            input=encode_call("transfer(address,uint256)", [RECIPIENT, 10**18]),
        ),
        RawTransaction(hash=tx_hash(2), from_address=WALLET, to_address=RECIPIENT, value=5 * 10**17),
        RawTransaction(hash=tx_hash(3), from_address=WALLET, to_address=None, input=b"\x60\x80\x60\x40"),
    ]


def test_narrates_in_order(generator, transactions):
    report = asyncio.run(narrate_transactions(transactions, generator=generator))

    assert report.narrative == (
        "First. you transferred 1 tokens to 0x3333...3333 via contract at 0x4444...4444 [tx: 0xabcd...0001]\n"
        "Then. you sent 0.5 native tokens to 0x3333...3333 [tx: 0xabcd...0002]\n"
        "Finally. you deployed contract [tx: 0xabcd...0003]"
    )
    assert report.errors == []
    assert report.transactions_analyzed == 3
    assert [detail.status for detail in report.transactions] == ["success"] * 3


def test_receipts_attach_status_and_deployed_address(generator, transactions):
    receipts = [
        TransactionReceipt(status=True),
        TransactionReceipt(status=False),
        TransactionReceipt(status=True, contract_address=DEPLOYED),
    ]

    report = asyncio.run(narrate_transactions(transactions, receipts, generator=generator))

    assert [detail.hash for detail in report.transactions] == [tx_hash(1), tx_hash(3)]
    assert report.narrative.endswith("Finally. you deployed contract at 0x5555...5555 [tx: 0xabcd...0003]")
    assert report.transactions[1].decoded.parameters == {"contract_address": DEPLOYED}


def test_include_failed(generator, transactions):
    receipts = [TransactionReceipt(status=True), TransactionReceipt(status=False), None]

    report = asyncio.run(narrate_transactions(transactions, receipts, generator=generator, include_failed=True))

    assert [detail.status for detail in report.transactions] == ["success", "failed", "pending"]
    assert "Then. you sent 0.5 native tokens to 0x3333...3333 (transaction failed) [tx: 0xabcd...0002]" in (
        report.narrative
    )
    assert report.narrative.endswith("Finally. you deployed contract (transaction failed) [tx: 0xabcd...0003]")


def test_decode_failures_are_reported(generator, transactions):
    broken = RawTransaction(
        hash=tx_hash(4), from_address=WALLET, to_address=CONTRACT, input=bytes.fromhex("a9059cbb") + b"\x01"
    )

    report = asyncio.run(narrate_transactions([transactions[0], broken], generator=generator))

    assert report.narrative == (
        "First. you transferred 1 tokens to 0x3333...3333 via contract at 0x4444...4444 [tx: 0xabcd...0001]\n"
        "Finally. 0x1111...1111 called contract at 0x4444...4444 [tx: 0xabcd...0004]"
        "\n\nNote: 1 transaction(s) failed to process."
    )
    assert report.errors == [
        {
            "hash": tx_hash(4),
            "type": "AbiMismatch",
            "message": "Calldata does not match transfer(address,uint256) (ERC20)",
        }
    ]
    assert report.transactions_analyzed == 1

    as_dict = report.to_dict()
    assert as_dict["transactions_failed"] == 1
    assert as_dict["transactions"][0]["function"] == "transfer"
    assert as_dict["transactions"][0]["contract_type"] == "FungibleToken"
    assert as_dict["transactions"][1]["decoded"] is False


def test_no_transactions():
    report = asyncio.run(narrate_transactions([]))

    assert report.narrative == "No transactions found."
    assert report.transactions == []


def test_receipt_count_must_match(transactions):
    with pytest.raises(ValueError):
        asyncio.run(narrate_transactions(transactions, [TransactionReceipt(status=True)]))
