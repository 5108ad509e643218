import json

from click.testing import CliRunner
from eth_abi import encode

from nethermind.narrator.cli import narrator_cli

TOKEN = "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"
WALLET = "0x1111111111111111111111111111111111111111"
RECIPIENT = "0x3333333333333333333333333333333333333333"

TRANSFER_CALLDATA = "0xa9059cbb" + encode(["address", "uint256"], [RECIPIENT, 2_500_000]).hex()


def test_cli_decode():
    runner = CliRunner()
    result = runner.invoke(narrator_cli, ["decode", TRANSFER_CALLDATA, "--to", TOKEN])

    assert result.exit_code == 0, result.output
    decoded = json.loads(result.output)
    assert decoded["function_name"] == "transfer"
    assert decoded["contract_type"] == "FungibleToken"
    assert decoded["parameters"] == {"to": RECIPIENT, "amount": "2500000"}


def test_cli_decode_contract_creation():
    runner = CliRunner()
    result = runner.invoke(narrator_cli, ["decode", "0x60806040"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["contract_type"] == "ContractCreation"


def test_cli_decode_malformed_input():
    runner = CliRunner()
    result = runner.invoke(narrator_cli, ["decode", "0xa905", "--to", TOKEN])

    assert result.exit_code == 1


def test_cli_decode_invalid_hex():
    runner = CliRunner()
    result = runner.invoke(narrator_cli, ["decode", "0xnothex", "--to", TOKEN])

    assert result.exit_code == 2
    assert "Invalid hex string" in result.output


def test_cli_narrate():
    runner = CliRunner()
    result = runner.invoke(
        narrator_cli,
        [
            "narrate",
            TRANSFER_CALLDATA,
            "--from",
            WALLET,
            "--to",
            TOKEN,
            "--wallet",
            WALLET,
            "--hash",
            "0x" + "ab" * 32,
        ],
        env={"JSON_RPC": ""},
    )

    assert result.exit_code == 0, result.output
    assert result.output.strip() == (
        "you transferred 0.0000000000025 tokens to 0x3333...3333 via contract at USDC [tx: 0xabab...abab]"
    )


def test_cli_narrate_native_transfer():
    runner = CliRunner()
    result = runner.invoke(
        narrator_cli,
        ["narrate", "0x", "--from", WALLET, "--to", RECIPIENT, "--value", str(10**18), "--full-addresses"],
        env={"JSON_RPC": "", "NARRATOR_ACTIVE_WALLET": ""},
    )

    assert result.exit_code == 0, result.output
    assert result.output.startswith(f"{WALLET} sent 1 native tokens to {RECIPIENT}")


def test_cli_narrate_invalid_wallet():
    runner = CliRunner()
    result = runner.invoke(narrator_cli, ["narrate", TRANSFER_CALLDATA, "--from", WALLET, "--wallet", "0x1234"])

    assert result.exit_code == 2


def test_cli_list_selectors():
    runner = CliRunner()
    result = runner.invoke(narrator_cli, ["list-selectors"])

    assert result.exit_code == 0, result.output
    assert "34 selectors registered, 2 shadowed by earlier interfaces" in result.output
