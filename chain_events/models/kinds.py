from __future__ import annotations

from enum import StrEnum


class EventKind(StrEnum):
    """Discriminant of every event stored by the indexer."""

    NFT_MINT = "nft_mint"
    NFT_TRANSFER = "nft_transfer"
    NFT_BURN = "nft_burn"
    POTLOCK_DONATION = "potlock_donation"
    POTLOCK_POT_PROJECT_DONATION = "potlock_pot_project_donation"
    POTLOCK_POT_DONATION = "potlock_pot_donation"
    TRADE_POOL = "trade_pool"
    TRADE_SWAP = "trade_swap"
    TRADE_POOL_CHANGE = "trade_pool_change"


__all__ = ["EventKind"]
