import os
from dataclasses import dataclass

from eth_utils import is_address, to_normalized_address


@dataclass(frozen=True)
class NarrativeConfig:
    """Configuration for narrative generation"""

    active_wallet: str | None = None
    """ Locally controlled wallet.  Rendered as ``you`` in narratives.  Stored as lowercase hex """

    show_full_addresses: bool = False
    """ If True, render full addresses instead of the abbreviated ``0x1234...5678`` form """

    json_rpc: str | None = None
    """ JSON RPC url used to query token decimals.  If None, default decimals are used """

    def __post_init__(self):
        if self.active_wallet is not None:
            if not is_address(self.active_wallet):
                raise ValueError(f"Invalid active wallet address: {self.active_wallet}")
            object.__setattr__(self, "active_wallet", to_normalized_address(self.active_wallet))

    @classmethod
    def from_env(cls) -> "NarrativeConfig":
        """
        Loads configuration from environment variables:

            * ``NARRATOR_ACTIVE_WALLET``: address of the local wallet
            * ``NARRATOR_FULL_ADDRESSES``: set to ``1`` or ``true`` to disable address abbreviation
            * ``JSON_RPC``: RPC url for token metadata queries

        """
        return cls(
            active_wallet=os.environ.get("NARRATOR_ACTIVE_WALLET") or None,
            show_full_addresses=os.environ.get("NARRATOR_FULL_ADDRESSES", "").lower() in ("1", "true", "yes"),
            json_rpc=os.environ.get("JSON_RPC") or None,
        )
