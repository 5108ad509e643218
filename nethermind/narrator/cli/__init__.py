import logging

import click

from nethermind.narrator.cli.utils import (
    from_address_option,
    full_addresses_option,
    group_options,
    json_rpc_option,
    to_address_option,
    tx_hash_option,
    value_option,
    verbose_option,
    wallet_option,
)

# isort: skip_file
# pylint: disable=too-many-arguments,import-outside-toplevel

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("cli")


def _parse_calldata(calldata: str) -> bytes:
    from nethermind.narrator.utils import hex_to_bytes

    try:
        return hex_to_bytes(calldata)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="CALLDATA") from e


@click.group()
def narrator_cli():
    """Command Line Interface for decoding and narrating EVM transactions"""


@narrator_cli.command()
@click.argument("calldata")
@group_options(to_address_option, value_option, verbose_option)
def decode(calldata: str, to_address: str | None, value: int, verbose: bool):
    """Decodes transaction calldata, and prints the decoded call as JSON"""
    from nethermind.narrator.cli.utils import cli_logger_config
    from nethermind.narrator.decoding import TransactionDecoder
    from nethermind.narrator.exceptions import DecodingError
    from nethermind.narrator.types import RawTransaction

    cli_logger_config(root_logger)
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    tx = RawTransaction(
        hash="0x", from_address="0x" + "00" * 20, to_address=to_address, input=_parse_calldata(calldata), value=value
    )

    try:
        decoded = TransactionDecoder().decode_transaction(tx)
    except DecodingError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        raise SystemExit(1) from e

    click.echo(decoded.to_json(indent=2))


@narrator_cli.command()
@click.argument("calldata")
@group_options(
    from_address_option,
    to_address_option,
    tx_hash_option,
    value_option,
    wallet_option,
    json_rpc_option,
    full_addresses_option,
    verbose_option,
)
def narrate(
    calldata: str,
    from_address: str,
    to_address: str | None,
    tx_hash: str,
    value: int,
    wallet: str | None,
    json_rpc: str | None,
    full_addresses: bool,
    verbose: bool,
):
    """Decodes transaction calldata, and prints a human readable narrative of the transaction"""
    import asyncio
    from nethermind.narrator.cli.utils import cli_logger_config
    from nethermind.narrator.config import NarrativeConfig
    from nethermind.narrator.narrative import CachingLabelResolver, NarrativeGenerator, StaticLabelResolver
    from nethermind.narrator.pipeline import narrate_transactions
    from nethermind.narrator.tokens import TokenMetadataCache
    from nethermind.narrator.types import RawTransaction

    cli_logger_config(root_logger)
    root_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    try:
        config = NarrativeConfig(
            active_wallet=wallet or None, show_full_addresses=full_addresses, json_rpc=json_rpc or None
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--wallet") from e

    generator = NarrativeGenerator(
        config=config,
        label_resolver=CachingLabelResolver(StaticLabelResolver.mainnet()),
        token_metadata=TokenMetadataCache(json_rpc=config.json_rpc),
    )
    tx = RawTransaction(
        hash=tx_hash,
        from_address=from_address,
        to_address=to_address,
        input=_parse_calldata(calldata),
        value=value,
    )

    report = asyncio.run(narrate_transactions([tx], generator=generator))
    click.echo(report.narrative)


@narrator_cli.command(name="list-selectors")
@click.option("--full-signatures", is_flag=True, default=False, help="Print full function signatures")
def list_selectors(full_signatures: bool):
    """Lists every registered function selector, grouped by contract family"""
    from nethermind.narrator.cli.utils import cli_logger_config
    from nethermind.narrator.decoding import default_registry

    console = cli_logger_config(root_logger)
    root_logger.setLevel(logging.WARNING)

    registry = default_registry()
    console.print(registry.decoder_table(full_signatures=full_signatures))
    console.print(f"{len(registry)} selectors registered, {len(registry.shadowed)} shadowed by earlier interfaces")
