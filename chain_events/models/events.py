"""Public JSON shapes of each event kind.

Amounts are arbitrary precision and travel as decimal strings, block
timestamps as integer nanoseconds and ``donated_at`` as integer milliseconds.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, PlainSerializer

from .kinds import EventKind


def plain_decimal(value: Any) -> str:
    """Positional notation, never exponent form (``1E+24`` becomes 24 digits)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return format(value, "f")


Balance = Annotated[Decimal, PlainSerializer(plain_decimal, return_type=str, when_used="json")]

_ROW_CONFIG = ConfigDict(from_attributes=True, frozen=True)


class NftMintEvent(BaseModel):
    model_config = _ROW_CONFIG

    owner_id: str
    token_ids: List[str]
    memo: Optional[str] = None

    transaction_id: str
    receipt_id: str
    block_height: int
    block_timestamp_nanosec: int
    contract_id: str


class NftTransferEvent(BaseModel):
    model_config = _ROW_CONFIG

    old_owner_id: str
    new_owner_id: str
    token_ids: List[str]
    memo: Optional[str] = None
    token_prices_near: List[Balance]

    transaction_id: str
    receipt_id: str
    block_height: int
    block_timestamp_nanosec: int
    contract_id: str


class NftBurnEvent(BaseModel):
    model_config = _ROW_CONFIG

    owner_id: str
    token_ids: List[str]
    memo: Optional[str] = None

    transaction_id: str
    receipt_id: str
    block_height: int
    block_timestamp_nanosec: int
    contract_id: str


class PotlockDonationEvent(BaseModel):
    model_config = _ROW_CONFIG

    transaction_id: str
    receipt_id: str
    block_height: int
    block_timestamp_nanosec: int

    donation_id: int
    donor_id: str
    total_amount: Balance
    message: Optional[str] = None
    donated_at: int
    project_id: str
    protocol_fee: Balance
    referrer_id: Optional[str] = None
    referrer_fee: Optional[Balance] = None


class PotlockPotProjectDonationEvent(BaseModel):
    model_config = _ROW_CONFIG

    transaction_id: str
    receipt_id: str
    block_height: int
    block_timestamp_nanosec: int

    donation_id: int
    pot_id: str
    donor_id: str
    total_amount: Balance
    net_amount: Balance
    message: Optional[str] = None
    donated_at: int
    project_id: str
    referrer_id: Optional[str] = None
    referrer_fee: Optional[Balance] = None
    protocol_fee: Balance
    chef_id: Optional[str] = None
    chef_fee: Optional[Balance] = None


class PotlockPotDonationEvent(BaseModel):
    model_config = _ROW_CONFIG

    transaction_id: str
    receipt_id: str
    block_height: int
    block_timestamp_nanosec: int

    donation_id: int
    pot_id: str
    donor_id: str
    total_amount: Balance
    net_amount: Balance
    message: Optional[str] = None
    donated_at: int
    referrer_id: Optional[str] = None
    referrer_fee: Optional[Balance] = None
    protocol_fee: Balance
    chef_id: Optional[str] = None
    chef_fee: Optional[Balance] = None


class TradePoolEvent(BaseModel):
    model_config = _ROW_CONFIG

    trader: str
    block_height: int
    block_timestamp_nanosec: int
    transaction_id: str
    receipt_id: str

    pool: str
    token_in: str
    token_out: str
    amount_in: Balance
    amount_out: Balance


class TradeSwapEvent(BaseModel):
    model_config = _ROW_CONFIG

    trader: str
    block_height: int
    block_timestamp_nanosec: int
    transaction_id: str
    receipt_id: str

    balance_changes: Dict[str, Balance]  # token account id -> signed change


class TradePoolChangeEvent(BaseModel):
    model_config = _ROW_CONFIG

    pool_id: str
    receipt_id: str
    block_timestamp_nanosec: int
    block_height: int
    pool: Any


EVENT_MODELS: Dict[EventKind, type[BaseModel]] = {
    EventKind.NFT_MINT: NftMintEvent,
    EventKind.NFT_TRANSFER: NftTransferEvent,
    EventKind.NFT_BURN: NftBurnEvent,
    EventKind.POTLOCK_DONATION: PotlockDonationEvent,
    EventKind.POTLOCK_POT_PROJECT_DONATION: PotlockPotProjectDonationEvent,
    EventKind.POTLOCK_POT_DONATION: PotlockPotDonationEvent,
    EventKind.TRADE_POOL: TradePoolEvent,
    EventKind.TRADE_SWAP: TradeSwapEvent,
    EventKind.TRADE_POOL_CHANGE: TradePoolChangeEvent,
}


__all__ = [
    "Balance",
    "plain_decimal",
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
