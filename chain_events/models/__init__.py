"""Event kinds and their public representations."""

from .kinds import EventKind
from .events import (
    EVENT_MODELS,
    NftBurnEvent,
    NftMintEvent,
    NftTransferEvent,
    PotlockDonationEvent,
    PotlockPotDonationEvent,
    PotlockPotProjectDonationEvent,
    TradePoolChangeEvent,
    TradePoolEvent,
    TradeSwapEvent,
)

__all__ = [
    "EventKind",
    "EVENT_MODELS",
    "NftMintEvent",
    "NftTransferEvent",
    "NftBurnEvent",
    "PotlockDonationEvent",
    "PotlockPotProjectDonationEvent",
    "PotlockPotDonationEvent",
    "TradePoolEvent",
    "TradeSwapEvent",
    "TradePoolChangeEvent",
]
