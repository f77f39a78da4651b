"""ORM tables of the event store, one per event kind.

Rows are written by the ingestion pipeline and never updated. Every table is
keyed by ``(block_timestamp_nanosec, block_height, intra_block_sequence)`` so
the leading primary-key column doubles as the timestamp index the block
window query scans.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional

from sqlalchemy import (
    JSON,
    BigInteger,
    ForeignKeyConstraint,
    Integer,
    Numeric,
    String,
    TypeDecorator,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from chain_events.models.events import plain_decimal
from chain_events.models.kinds import EventKind


class Base(DeclarativeBase):
    pass


class DecimalAmount(TypeDecorator):
    """Exact decimal: NUMERIC on PostgreSQL, text everywhere else."""

    impl = String
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(Numeric(asdecimal=True))
        return dialect.type_descriptor(String())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = Decimal(str(value))
        if dialect.name == "postgresql":
            return value
        return plain_decimal(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(str(value))


class BlockKeyMixin:
    block_timestamp_nanosec: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    block_height: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    intra_block_sequence: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False
    )


# ------------------------------------------------------------------
# NFT
# ------------------------------------------------------------------
class NftMintTbl(BlockKeyMixin, Base):
    __tablename__ = "nft_mint"
    owner_id: Mapped[str] = mapped_column(String, index=True)
    token_ids: Mapped[List[str]] = mapped_column(JSON, default=list)
    memo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    transaction_id: Mapped[str] = mapped_column(String)
    receipt_id: Mapped[str] = mapped_column(String)
    contract_id: Mapped[str] = mapped_column(String, index=True)


class NftTransferTbl(BlockKeyMixin, Base):
    __tablename__ = "nft_transfer"
    old_owner_id: Mapped[str] = mapped_column(String, index=True)
    new_owner_id: Mapped[str] = mapped_column(String, index=True)
    token_ids: Mapped[List[str]] = mapped_column(JSON, default=list)
    memo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    # decimal strings, one per token id
    token_prices_near: Mapped[List[str]] = mapped_column(JSON, default=list)
    transaction_id: Mapped[str] = mapped_column(String)
    receipt_id: Mapped[str] = mapped_column(String)
    contract_id: Mapped[str] = mapped_column(String, index=True)


class NftBurnTbl(BlockKeyMixin, Base):
    __tablename__ = "nft_burn"
    owner_id: Mapped[str] = mapped_column(String, index=True)
    token_ids: Mapped[List[str]] = mapped_column(JSON, default=list)
    memo: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    transaction_id: Mapped[str] = mapped_column(String)
    receipt_id: Mapped[str] = mapped_column(String)
    contract_id: Mapped[str] = mapped_column(String, index=True)


# ------------------------------------------------------------------
# Potlock
# ------------------------------------------------------------------
class PotlockDonationTbl(BlockKeyMixin, Base):
    __tablename__ = "potlock_donation"
    transaction_id: Mapped[str] = mapped_column(String)
    receipt_id: Mapped[str] = mapped_column(String)
    donation_id: Mapped[int] = mapped_column(BigInteger)
    donor_id: Mapped[str] = mapped_column(String, index=True)
    total_amount: Mapped[Decimal] = mapped_column(DecimalAmount)
    message: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    donated_at: Mapped[int] = mapped_column(BigInteger)  # epoch millis
    project_id: Mapped[str] = mapped_column(String, index=True)
    protocol_fee: Mapped[Decimal] = mapped_column(DecimalAmount)
    referrer_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    referrer_fee: Mapped[Optional[Decimal]] = mapped_column(DecimalAmount, nullable=True)


class PotlockPotProjectDonationTbl(BlockKeyMixin, Base):
    __tablename__ = "potlock_pot_project_donation"
    transaction_id: Mapped[str] = mapped_column(String)
    receipt_id: Mapped[str] = mapped_column(String)
    donation_id: Mapped[int] = mapped_column(BigInteger)
    pot_id: Mapped[str] = mapped_column(String, index=True)
    donor_id: Mapped[str] = mapped_column(String, index=True)
    total_amount: Mapped[Decimal] = mapped_column(DecimalAmount)
    net_amount: Mapped[Decimal] = mapped_column(DecimalAmount)
    message: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    donated_at: Mapped[int] = mapped_column(BigInteger)
    project_id: Mapped[str] = mapped_column(String, index=True)
    referrer_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    referrer_fee: Mapped[Optional[Decimal]] = mapped_column(DecimalAmount, nullable=True)
    protocol_fee: Mapped[Decimal] = mapped_column(DecimalAmount)
    chef_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    chef_fee: Mapped[Optional[Decimal]] = mapped_column(DecimalAmount, nullable=True)


class PotlockPotDonationTbl(BlockKeyMixin, Base):
    __tablename__ = "potlock_pot_donation"
    transaction_id: Mapped[str] = mapped_column(String)
    receipt_id: Mapped[str] = mapped_column(String)
    donation_id: Mapped[int] = mapped_column(BigInteger)
    pot_id: Mapped[str] = mapped_column(String, index=True)
    donor_id: Mapped[str] = mapped_column(String, index=True)
    total_amount: Mapped[Decimal] = mapped_column(DecimalAmount)
    net_amount: Mapped[Decimal] = mapped_column(DecimalAmount)
    message: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    donated_at: Mapped[int] = mapped_column(BigInteger)
    referrer_id: Mapped[Optional[str]] = mapped_column(String, nullable=True, index=True)
    referrer_fee: Mapped[Optional[Decimal]] = mapped_column(DecimalAmount, nullable=True)
    protocol_fee: Mapped[Decimal] = mapped_column(DecimalAmount)
    chef_id: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    chef_fee: Mapped[Optional[Decimal]] = mapped_column(DecimalAmount, nullable=True)


# ------------------------------------------------------------------
# Trade
# ------------------------------------------------------------------
class TradePoolTbl(BlockKeyMixin, Base):
    __tablename__ = "trade_pool"
    trader: Mapped[str] = mapped_column(String, index=True)
    transaction_id: Mapped[str] = mapped_column(String)
    receipt_id: Mapped[str] = mapped_column(String)
    pool: Mapped[str] = mapped_column(String, index=True)
    token_in: Mapped[str] = mapped_column(String)
    token_out: Mapped[str] = mapped_column(String)
    amount_in: Mapped[Decimal] = mapped_column(DecimalAmount)
    amount_out: Mapped[Decimal] = mapped_column(DecimalAmount)


class TradeSwapTbl(BlockKeyMixin, Base):
    __tablename__ = "trade_swap"
    trader: Mapped[str] = mapped_column(String, index=True)
    transaction_id: Mapped[str] = mapped_column(String)
    receipt_id: Mapped[str] = mapped_column(String)
    # token account id -> decimal string
    balance_changes: Mapped[Dict[str, str]] = mapped_column(JSON, default=dict)

    involved_tokens: Mapped[List["TradeSwapTokenTbl"]] = relationship(
        back_populates="swap", cascade="all, delete-orphan"
    )

    @classmethod
    def from_balance_changes(
        cls, balance_changes: Mapping[str, Any], **columns: Any
    ) -> "TradeSwapTbl":
        """Build a swap row whose involved tokens are the balance-change keys."""
        changes = {token: plain_decimal(amount) for token, amount in balance_changes.items()}
        row = cls(balance_changes=changes, **columns)
        row.involved_tokens = [TradeSwapTokenTbl(token_account_id=token) for token in changes]
        return row


class TradeSwapTokenTbl(Base):
    """One row per token whose balance a swap touched."""

    __tablename__ = "trade_swap_token"
    __table_args__ = (
        ForeignKeyConstraint(
            ["block_timestamp_nanosec", "block_height", "intra_block_sequence"],
            [
                "trade_swap.block_timestamp_nanosec",
                "trade_swap.block_height",
                "trade_swap.intra_block_sequence",
            ],
            ondelete="CASCADE",
        ),
    )

    block_timestamp_nanosec: Mapped[int] = mapped_column(
        BigInteger, primary_key=True, autoincrement=False
    )
    block_height: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    intra_block_sequence: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=False
    )
    token_account_id: Mapped[str] = mapped_column(String, primary_key=True, index=True)

    swap: Mapped[TradeSwapTbl] = relationship(back_populates="involved_tokens")


class TradePoolChangeTbl(BlockKeyMixin, Base):
    __tablename__ = "trade_pool_change"
    pool_id: Mapped[str] = mapped_column(String, index=True)
    receipt_id: Mapped[str] = mapped_column(String)
    pool: Mapped[Any] = mapped_column(JSON)


EVENT_TABLES: Dict[EventKind, type[Base]] = {
    EventKind.NFT_MINT: NftMintTbl,
    EventKind.NFT_TRANSFER: NftTransferTbl,
    EventKind.NFT_BURN: NftBurnTbl,
    EventKind.POTLOCK_DONATION: PotlockDonationTbl,
    EventKind.POTLOCK_POT_PROJECT_DONATION: PotlockPotProjectDonationTbl,
    EventKind.POTLOCK_POT_DONATION: PotlockPotDonationTbl,
    EventKind.TRADE_POOL: TradePoolTbl,
    EventKind.TRADE_SWAP: TradeSwapTbl,
    EventKind.TRADE_POOL_CHANGE: TradePoolChangeTbl,
}


def table_for(kind: EventKind) -> type[Base]:
    return EVENT_TABLES[EventKind(kind)]


__all__ = [
    "Base",
    "DecimalAmount",
    "EVENT_TABLES",
    "table_for",
    "NftMintTbl",
    "NftTransferTbl",
    "NftBurnTbl",
    "PotlockDonationTbl",
    "PotlockPotProjectDonationTbl",
    "PotlockPotDonationTbl",
    "TradePoolTbl",
    "TradeSwapTbl",
    "TradeSwapTokenTbl",
    "TradePoolChangeTbl",
]
