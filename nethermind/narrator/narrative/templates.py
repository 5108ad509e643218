"""
Narrative templates for decoded calls.

Templates are keyed by contract family, then by function name.  A function name that has no template within its
family renders with the family fallback, so every decoded call produces a sentence.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from eth_utils import is_address

from nethermind.narrator.types import CONTRACT_ADDRESS_KEY, ContractType, DecodedCall

from .formatting import format_amount, is_unlimited, is_zero

ERC20_DECIMALS = 18
PRIMARY_SALE_DECIMALS = 6
NATIVE_DECIMALS = 18


@dataclass
class NarrativeContext:
    """Per-call rendering context handed to every template"""

    decoded: DecodedCall

    sender: str
    """ Display form of the transaction sender """

    contract: str
    """ Display form of the destination contract, or ``unknown contract`` """

    contract_address: str | None
    """ Raw destination address """

    display_address: Callable[[str], Awaitable[str]]
    """ Renders an address as ``you``, a resolved label, or its abbreviated form """

    token_decimals: Callable[[str | None, int], Awaitable[int]]
    """ Returns decimals for a token address, with a fallback """

    @property
    def function_name(self) -> str:
        return self.decoded.function_name

    def param(self, name: str, default: Any = "unknown") -> Any:
        return self.decoded.parameters.get(name, default)

    def list_param(self, name: str) -> list:
        """Array parameter, or an empty list if the value is missing or not a list"""
        value = self.decoded.parameters.get(name)
        return value if isinstance(value, list) else []

    async def address(self, name: str) -> str:
        """Display form of an address parameter"""
        value = self.param(name)
        if not isinstance(value, str) or not is_address(value):
            return str(value)
        return await self.display_address(value)

    async def token(self, address: Any) -> str:
        """Display form of a token address"""
        if not isinstance(address, str) or not is_address(address):
            return "unknown token"
        return await self.display_address(address)

    async def amount(self, name: str, token: str | None, default_decimals: int) -> str:
        """Amount parameter scaled by the decimals of token"""
        decimals = await self.token_decimals(token, default_decimals)
        return format_amount(self.param(name, "0"), decimals)


Template = Callable[[NarrativeContext], Awaitable[str]]


# -------------------------------------------------------
#    Fungible Tokens
# -------------------------------------------------------
async def _erc20_transfer(ctx: NarrativeContext) -> str:
    amount = await ctx.amount("amount", ctx.contract_address, ERC20_DECIMALS)
    return f"{ctx.sender} transferred {amount} tokens to {await ctx.address('to')} via contract at {ctx.contract}"


async def _erc20_approve(ctx: NarrativeContext) -> str:
    spender = await ctx.address("spender")
    if is_unlimited(ctx.param("amount")):
        return f"{ctx.sender} approved {spender} to spend unlimited tokens from contract at {ctx.contract}"
    if is_zero(ctx.param("amount")):
        return f"{ctx.sender} revoked approval for {spender} to spend tokens from contract at {ctx.contract}"

    amount = await ctx.amount("amount", ctx.contract_address, ERC20_DECIMALS)
    return f"{ctx.sender} approved {spender} to spend {amount} tokens from contract at {ctx.contract}"


async def _erc20_transfer_from(ctx: NarrativeContext) -> str:
    amount = await ctx.amount("amount", ctx.contract_address, ERC20_DECIMALS)
    return (
        f"{ctx.sender} transferred {amount} tokens from {await ctx.address('from')} to {await ctx.address('to')} "
        f"via contract at {ctx.contract}"
    )


async def _erc20_mint(ctx: NarrativeContext) -> str:
    amount = await ctx.amount("amount", ctx.contract_address, ERC20_DECIMALS)
    return f"{ctx.sender} minted {amount} tokens to {await ctx.address('to')} via contract at {ctx.contract}"


async def _erc20_burn(ctx: NarrativeContext) -> str:
    amount = await ctx.amount("amount", ctx.contract_address, ERC20_DECIMALS)
    return f"{ctx.sender} burned {amount} tokens via contract at {ctx.contract}"


async def _erc20_increase_allowance(ctx: NarrativeContext) -> str:
    amount = await ctx.amount("addedValue", ctx.contract_address, ERC20_DECIMALS)
    return (
        f"{ctx.sender} increased the allowance of {await ctx.address('spender')} by {amount} tokens "
        f"at {ctx.contract}"
    )


async def _erc20_decrease_allowance(ctx: NarrativeContext) -> str:
    amount = await ctx.amount("subtractedValue", ctx.contract_address, ERC20_DECIMALS)
    return (
        f"{ctx.sender} decreased the allowance of {await ctx.address('spender')} by {amount} tokens "
        f"at {ctx.contract}"
    )


async def _erc20_deposit(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} wrapped native tokens at {ctx.contract}"


async def _erc20_withdraw(ctx: NarrativeContext) -> str:
    amount = await ctx.amount("amount", ctx.contract_address, ERC20_DECIMALS)
    return f"{ctx.sender} unwrapped {amount} tokens at {ctx.contract}"


async def _erc20_fallback(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} called ERC-20 function '{ctx.function_name}' at {ctx.contract}"


# -------------------------------------------------------
#    Non-Fungible Tokens
# -------------------------------------------------------
async def _erc721_transfer(ctx: NarrativeContext) -> str:
    return (
        f"{ctx.sender} transferred NFT #{ctx.param('tokenId')} from {await ctx.address('from')} "
        f"to {await ctx.address('to')} at {ctx.contract}"
    )


async def _erc721_approve(ctx: NarrativeContext) -> str:
    return (
        f"{ctx.sender} approved {await ctx.address('to')} to transfer NFT #{ctx.param('tokenId')} "
        f"at {ctx.contract}"
    )


async def _erc721_set_approval_for_all(ctx: NarrativeContext) -> str:
    operator = await ctx.address("operator")
    if ctx.param("approved", False) is True:
        return f"{ctx.sender} approved {operator} to manage all NFTs at {ctx.contract}"
    return f"{ctx.sender} revoked approval for {operator} to manage all NFTs at {ctx.contract}"


async def _erc721_fallback(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} called ERC-721 function '{ctx.function_name}' at {ctx.contract}"


# -------------------------------------------------------
#    Pool Managers
# -------------------------------------------------------
def _path_ends(ctx: NarrativeContext) -> tuple[str | None, str | None]:
    path = ctx.list_param("path")
    if not path:
        return None, None
    return path[0], path[-1]


async def _swap_exact_tokens_for_tokens(ctx: NarrativeContext) -> str:
    token_in, token_out = _path_ends(ctx)
    amount_in = await ctx.amount("amountIn", token_in, ERC20_DECIMALS)
    amount_out = await ctx.amount("amountOutMin", token_out, ERC20_DECIMALS)
    return (
        f"{ctx.sender} swapped {amount_in} {await ctx.token(token_in)} for at least {amount_out} "
        f"{await ctx.token(token_out)} via {ctx.contract}"
    )


async def _swap_tokens_for_exact_tokens(ctx: NarrativeContext) -> str:
    token_in, token_out = _path_ends(ctx)
    amount_in = await ctx.amount("amountInMax", token_in, ERC20_DECIMALS)
    amount_out = await ctx.amount("amountOut", token_out, ERC20_DECIMALS)
    return (
        f"{ctx.sender} swapped at most {amount_in} {await ctx.token(token_in)} for {amount_out} "
        f"{await ctx.token(token_out)} via {ctx.contract}"
    )


async def _swap_exact_eth_for_tokens(ctx: NarrativeContext) -> str:
    _, token_out = _path_ends(ctx)
    amount_out = await ctx.amount("amountOutMin", token_out, ERC20_DECIMALS)
    return (
        f"{ctx.sender} swapped native tokens for at least {amount_out} {await ctx.token(token_out)} "
        f"via {ctx.contract}"
    )


async def _swap_exact_tokens_for_eth(ctx: NarrativeContext) -> str:
    token_in, _ = _path_ends(ctx)
    amount_in = await ctx.amount("amountIn", token_in, ERC20_DECIMALS)
    amount_out = format_amount(ctx.param("amountOutMin", "0"), NATIVE_DECIMALS)
    return (
        f"{ctx.sender} swapped {amount_in} {await ctx.token(token_in)} for at least {amount_out} native tokens "
        f"via {ctx.contract}"
    )


async def _add_liquidity(ctx: NarrativeContext) -> str:
    token_a, token_b = ctx.param("tokenA", None), ctx.param("tokenB", None)
    amount_a = await ctx.amount("amountADesired", token_a, ERC20_DECIMALS)
    amount_b = await ctx.amount("amountBDesired", token_b, ERC20_DECIMALS)
    return (
        f"{ctx.sender} added liquidity of {amount_a} {await ctx.token(token_a)} and {amount_b} "
        f"{await ctx.token(token_b)} via {ctx.contract}"
    )


async def _remove_liquidity(ctx: NarrativeContext) -> str:
    liquidity = format_amount(ctx.param("liquidity", "0"), ERC20_DECIMALS)
    pair = f"{await ctx.token(ctx.param('tokenA', None))}/{await ctx.token(ctx.param('tokenB', None))}"
    return f"{ctx.sender} removed {liquidity} liquidity tokens from the {pair} pool via {ctx.contract}"


async def _pool_fallback(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} called pool function '{ctx.function_name}' at {ctx.contract}"


# -------------------------------------------------------
#    Primary Sales
# -------------------------------------------------------
async def _invest(ctx: NarrativeContext) -> str:
    token = ctx.param("token", None)
    amount = await ctx.amount("amount", token, PRIMARY_SALE_DECIMALS)
    return f"{ctx.sender} invested {amount} tokens ({await ctx.token(token)}) in primary sale at {ctx.contract}"


async def _initialize_settlement(ctx: NarrativeContext) -> str:
    return (
        f"{ctx.sender} initialized settlement with asset token {await ctx.address('assetToken')} "
        f"from owner {await ctx.address('assetOwner')} at {ctx.contract}"
    )


async def _settle_batch(ctx: NarrativeContext) -> str:
    batch_size = ctx.param("batchSize", "0")
    restricted = len(ctx.list_param("restrictedWallets"))
    if restricted == 0:
        return f"{ctx.sender} settled batch of {batch_size} investors at {ctx.contract}"
    return (
        f"{ctx.sender} settled batch of {batch_size} investors (excluded {restricted} restricted wallets) "
        f"at {ctx.contract}"
    )


async def _top_up_refunds(ctx: NarrativeContext) -> str:
    token = ctx.param("token", None)
    amount = await ctx.amount("amount", token, PRIMARY_SALE_DECIMALS)
    return f"{ctx.sender} topped up refund pool with {amount} tokens ({await ctx.token(token)}) at {ctx.contract}"


async def _emergency_withdraw(ctx: NarrativeContext) -> str:
    token = ctx.param("token", None)
    amount = await ctx.amount("amount", token, PRIMARY_SALE_DECIMALS)
    return (
        f"{ctx.sender} emergency withdrew {amount} tokens ({await ctx.token(token)}) to "
        f"{await ctx.address('recipient')} from {ctx.contract}"
    )


async def _set_allowed_batch(ctx: NarrativeContext) -> str:
    flags = ctx.list_param("flags")
    added = sum(1 for flag in flags if flag is True)
    removed = len(flags) - added
    total = len(ctx.list_param("addrs"))

    if removed == 0:
        counts = f"added: {added}"
    elif added == 0:
        counts = f"removed: {removed}"
    else:
        counts = f"added: {added}, removed: {removed}"
    return f"{ctx.sender} updated allowlist for {total} addresses ({counts}) at {ctx.contract}"


def _sale_action(action: str) -> Template:
    async def _render(ctx: NarrativeContext) -> str:
        return f"{ctx.sender} {action} at {ctx.contract}"

    return _render


async def _primary_sale_fallback(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} called PrimarySale function '{ctx.function_name}' at {ctx.contract}"


# -------------------------------------------------------
#    Generic Contracts & Native Transfers
# -------------------------------------------------------
async def _native_transfer(ctx: NarrativeContext) -> str:
    if not ctx.decoded.is_native_transfer:
        return await _generic_fallback(ctx)
    value = ctx.param("value", None)
    if value is None:
        return f"{ctx.sender} sent native tokens to {ctx.contract}"
    return f"{ctx.sender} sent {format_amount(value, NATIVE_DECIMALS)} native tokens to {ctx.contract}"


async def _transfer_ownership(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} transferred ownership of {ctx.contract} to {await ctx.address('newOwner')}"


async def _renounce_ownership(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} renounced ownership of {ctx.contract}"


async def _multicall(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} executed {len(ctx.list_param('data'))} batched calls at {ctx.contract}"


async def _generic_fallback(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} called function '{ctx.function_name}' ({ctx.decoded.selector}) at {ctx.contract}"


# -------------------------------------------------------
#    Unknown Calls & Deployments
# -------------------------------------------------------
async def _unknown(ctx: NarrativeContext) -> str:
    return f"{ctx.sender} called unknown function {ctx.decoded.selector} at {ctx.contract}"


async def _contract_creation(ctx: NarrativeContext) -> str:
    deployed = ctx.param(CONTRACT_ADDRESS_KEY, None)
    if deployed is None:
        return f"{ctx.sender} deployed contract"
    return f"{ctx.sender} deployed contract at {await ctx.address(CONTRACT_ADDRESS_KEY)}"


TEMPLATES: dict[ContractType, dict[str, Template]] = {
    ContractType.fungible_token: {
        "transfer": _erc20_transfer,
        "approve": _erc20_approve,
        "transferFrom": _erc20_transfer_from,
        "mint": _erc20_mint,
        "burn": _erc20_burn,
        "increaseAllowance": _erc20_increase_allowance,
        "decreaseAllowance": _erc20_decrease_allowance,
        "deposit": _erc20_deposit,
        "withdraw": _erc20_withdraw,
    },
    ContractType.non_fungible_token: {
        "transferFrom": _erc721_transfer,
        "safeTransferFrom": _erc721_transfer,
        "approve": _erc721_approve,
        "setApprovalForAll": _erc721_set_approval_for_all,
    },
    ContractType.pool_manager: {
        "swapExactTokensForTokens": _swap_exact_tokens_for_tokens,
        "swapTokensForExactTokens": _swap_tokens_for_exact_tokens,
        "swapExactETHForTokens": _swap_exact_eth_for_tokens,
        "swapExactTokensForETH": _swap_exact_tokens_for_eth,
        "addLiquidity": _add_liquidity,
        "removeLiquidity": _remove_liquidity,
    },
    ContractType.primary_sale: {
        "invest": _invest,
        "activate": _sale_action("activated primary sale"),
        "endSale": _sale_action("ended primary sale"),
        "initializeSettlement": _initialize_settlement,
        "settleBatch": _settle_batch,
        "finalizeSettlement": _sale_action("finalized settlement"),
        "topUpRefunds": _top_up_refunds,
        "claimRefund": _sale_action("claimed refund from primary sale"),
        "cancel": _sale_action("cancelled primary sale"),
        "pause": _sale_action("paused primary sale"),
        "unpause": _sale_action("unpaused primary sale"),
        "emergencyWithdrawERC20": _emergency_withdraw,
        "setAllowedBatch": _set_allowed_batch,
    },
    ContractType.generic: {
        "transfer": _native_transfer,
        "transferOwnership": _transfer_ownership,
        "renounceOwnership": _renounce_ownership,
        "multicall": _multicall,
    },
}

FAMILY_FALLBACKS: dict[ContractType, Template] = {
    ContractType.fungible_token: _erc20_fallback,
    ContractType.non_fungible_token: _erc721_fallback,
    ContractType.pool_manager: _pool_fallback,
    ContractType.primary_sale: _primary_sale_fallback,
    ContractType.generic: _generic_fallback,
    ContractType.unknown: _unknown,
    ContractType.contract_creation: _contract_creation,
}


def select_template(decoded: DecodedCall) -> Template:
    """Returns the template for a decoded call, falling back to the template of its contract family"""
    return TEMPLATES.get(decoded.contract_type, {}).get(decoded.function_name) or FAMILY_FALLBACKS[
        decoded.contract_type
    ]
