"""
ABI fragments for the contract interfaces the narrator understands.

Each interface is stored in standard JSON ABI form, so the same definitions can be handed to web3 or any other
ABI tooling.  Only state-changing functions are listed, since view calls are never sent as transactions.
"""
from typing import Any

from nethermind.narrator.types import ContractType


def _function(name: str, *inputs: tuple[str, str]) -> dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": [{"name": param_name, "type": param_type} for param_type, param_name in inputs],
        "outputs": [],
        "stateMutability": "nonpayable",
    }


ERC20_ABI = [
    _function("transfer", ("address", "to"), ("uint256", "amount")),
    _function("approve", ("address", "spender"), ("uint256", "amount")),
    _function("transferFrom", ("address", "from"), ("address", "to"), ("uint256", "amount")),
    _function("mint", ("address", "to"), ("uint256", "amount")),
    _function("burn", ("uint256", "amount")),
    _function("increaseAllowance", ("address", "spender"), ("uint256", "addedValue")),
    _function("decreaseAllowance", ("address", "spender"), ("uint256", "subtractedValue")),
    # Wrapped native token (WETH9 style)
    _function("deposit"),
    _function("withdraw", ("uint256", "amount")),
]

ERC721_ABI = [
    _function("transferFrom", ("address", "from"), ("address", "to"), ("uint256", "tokenId")),
    _function("approve", ("address", "to"), ("uint256", "tokenId")),
    _function("safeTransferFrom", ("address", "from"), ("address", "to"), ("uint256", "tokenId")),
    _function(
        "safeTransferFrom",
        ("address", "from"),
        ("address", "to"),
        ("uint256", "tokenId"),
        ("bytes", "data"),
    ),
    _function("setApprovalForAll", ("address", "operator"), ("bool", "approved")),
]

UNISWAP_V2_ROUTER_ABI = [
    _function(
        "swapExactTokensForTokens",
        ("uint256", "amountIn"),
        ("uint256", "amountOutMin"),
        ("address[]", "path"),
        ("address", "to"),
        ("uint256", "deadline"),
    ),
    _function(
        "swapTokensForExactTokens",
        ("uint256", "amountOut"),
        ("uint256", "amountInMax"),
        ("address[]", "path"),
        ("address", "to"),
        ("uint256", "deadline"),
    ),
    _function(
        "swapExactETHForTokens",
        ("uint256", "amountOutMin"),
        ("address[]", "path"),
        ("address", "to"),
        ("uint256", "deadline"),
    ),
    _function(
        "swapExactTokensForETH",
        ("uint256", "amountIn"),
        ("uint256", "amountOutMin"),
        ("address[]", "path"),
        ("address", "to"),
        ("uint256", "deadline"),
    ),
    _function(
        "addLiquidity",
        ("address", "tokenA"),
        ("address", "tokenB"),
        ("uint256", "amountADesired"),
        ("uint256", "amountBDesired"),
        ("uint256", "amountAMin"),
        ("uint256", "amountBMin"),
        ("address", "to"),
        ("uint256", "deadline"),
    ),
    _function(
        "removeLiquidity",
        ("address", "tokenA"),
        ("address", "tokenB"),
        ("uint256", "liquidity"),
        ("uint256", "amountAMin"),
        ("uint256", "amountBMin"),
        ("address", "to"),
        ("uint256", "deadline"),
    ),
]

PRIMARY_SALE_ABI = [
    _function("activate"),
    _function("invest", ("address", "token"), ("uint256", "amount")),
    _function("endSale"),
    _function("initializeSettlement", ("address", "assetToken"), ("address", "assetOwner")),
    _function("settleBatch", ("uint256", "batchSize"), ("address[]", "restrictedWallets")),
    _function("finalizeSettlement"),
    _function("topUpRefunds", ("address", "token"), ("uint256", "amount")),
    _function("claimRefund"),
    _function("cancel"),
    _function("pause"),
    _function("unpause"),
    _function("emergencyWithdrawERC20", ("address", "token"), ("address", "recipient"), ("uint256", "amount")),
]

ALLOWLIST_ABI = [
    _function("setAllowedBatch", ("address[]", "addrs"), ("bool[]", "flags")),
]

OWNABLE_ABI = [
    _function("transferOwnership", ("address", "newOwner")),
    _function("renounceOwnership"),
]

MULTICALL_ABI = [
    _function("multicall", ("bytes[]", "data")),
]

KNOWN_INTERFACES: list[tuple[str, list[dict[str, Any]], ContractType]] = [
    ("ERC20", ERC20_ABI, ContractType.fungible_token),
    ("ERC721", ERC721_ABI, ContractType.non_fungible_token),
    ("UniswapV2Router", UNISWAP_V2_ROUTER_ABI, ContractType.pool_manager),
    ("PrimarySale", PRIMARY_SALE_ABI, ContractType.primary_sale),
    ("Allowlist", ALLOWLIST_ABI, ContractType.primary_sale),
    ("Ownable", OWNABLE_ABI, ContractType.generic),
    ("Multicall", MULTICALL_ABI, ContractType.generic),
]
"""
Interfaces in registration order.  When two interfaces share a selector, the interface listed first wins.
ERC20 is listed ahead of ERC721, so ``transferFrom(address,address,uint256)`` and ``approve(address,uint256)``
decode as fungible token calls.
"""
