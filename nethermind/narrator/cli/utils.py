import logging
import os
from logging import Logger

import click
from rich.console import Console
from rich.logging import RichHandler

root_logger = logging.getLogger("nethermind")
logger = root_logger.getChild("narrator").getChild("cli")


def cli_logger_config(instrument_logger: Logger) -> Console:
    rich_console = Console()
    instrument_logger.handlers.clear()

    instrument_logger.addHandler(RichHandler(show_path=False, console=rich_console))
    instrument_logger.setLevel(logging.INFO)
    return rich_console


def group_options(*options):
    """Decorator to group multiple click options together"""

    def wrapper(function):
        for option in reversed(options):
            function = option(function)
        return function

    return wrapper


# -------------------------------------------------------
#    CLI Connections and Configurations
# -------------------------------------------------------
json_rpc_option = click.option(
    "--json-rpc",
    "-rpc",
    "json_rpc",
    default=lambda: os.environ.get("JSON_RPC"),
    help="RPC url used to query token decimals.  If not provided, will use the JSON_RPC environment variable.  "
    "Without an RPC, default decimals are used",
)
wallet_option = click.option(
    "--wallet",
    "-w",
    "wallet",
    default=lambda: os.environ.get("NARRATOR_ACTIVE_WALLET"),
    help="Address of the local wallet, rendered as 'you' in narratives.  If not provided, will use the "
    "NARRATOR_ACTIVE_WALLET environment variable",
)
full_addresses_option = click.option(
    "--full-addresses",
    is_flag=True,
    default=False,
    help="If provided, render full addresses instead of the abbreviated 0x1234...5678 form",
)
verbose_option = click.option(
    "--verbose",
    "-v",
    is_flag=True,
    default=False,
    help="Log decoding and narrative details",
)

# -------------------------------------------------------
#    Transaction Parameters
# -------------------------------------------------------
to_address_option = click.option(
    "--to",
    "to_address",
    type=str,
    default=None,
    help="Destination address of the transaction.  If not provided, the transaction is a contract creation",
)
from_address_option = click.option(
    "--from",
    "from_address",
    type=str,
    required=True,
    help="Sender address of the transaction",
)
tx_hash_option = click.option(
    "--hash",
    "tx_hash",
    type=str,
    default="0x" + "00" * 32,
    help="Transaction hash to include in the narrative",
)
value_option = click.option(
    "--value",
    "value",
    type=int,
    default=0,
    show_default=True,
    help="Native value of the transaction in wei",
)
