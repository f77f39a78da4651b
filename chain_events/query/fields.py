"""Filterable query parameters of each event kind.

Every event kind has a fixed list of :class:`FilterField` adapters. An
adapter names the query parameter, how its value is parsed and which store
columns it constrains. The normalizer and the predicate builder both read
this table; nothing else knows which parameters a kind accepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Dict, Optional, Tuple

from chain_events.models.kinds import EventKind

# Exchange prefix followed by the numeric pool index, e.g. ``REF-1234``.
POOL_ID_PATTERN = re.compile(r"^[A-Z][A-Z0-9_]*-\d+$", re.ASCII)


class FilterMode(StrEnum):
    EQUALS = auto()        # column == value
    ANY_OF = auto()        # any listed column is in the value set
    CONTAINS_ANY = auto()  # any element of a set-valued attribute is in the value set


@dataclass(frozen=True)
class FilterField:
    param: str
    mode: FilterMode
    columns: Tuple[str, ...]
    pattern: Optional[re.Pattern] = None
    # parameters disabled while this one is active
    supersedes: Tuple[str, ...] = ()
    # for CONTAINS_ANY: relationship holding the set-valued attribute
    relationship: Optional[str] = None

    @property
    def is_list(self) -> bool:
        return self.mode is not FilterMode.EQUALS


def _eq(param: str, column: str, pattern: Optional[re.Pattern] = None) -> FilterField:
    return FilterField(param=param, mode=FilterMode.EQUALS, columns=(column,), pattern=pattern)


_NFT_OWNER_FIELDS = (
    _eq("token_account_id", "contract_id"),
    _eq("account_id", "owner_id"),
)

FILTER_FIELDS: Dict[EventKind, Tuple[FilterField, ...]] = {
    EventKind.NFT_MINT: _NFT_OWNER_FIELDS,
    EventKind.NFT_TRANSFER: (
        _eq("token_account_id", "contract_id"),
        _eq("old_owner_id", "old_owner_id"),
        _eq("new_owner_id", "new_owner_id"),
        FilterField(
            param="involved_account_ids",
            mode=FilterMode.ANY_OF,
            columns=("old_owner_id", "new_owner_id"),
            supersedes=("old_owner_id", "new_owner_id"),
        ),
    ),
    EventKind.NFT_BURN: _NFT_OWNER_FIELDS,
    EventKind.POTLOCK_DONATION: (
        _eq("project_id", "project_id"),
        _eq("donor_id", "donor_id"),
        _eq("referrer_id", "referrer_id"),
    ),
    EventKind.POTLOCK_POT_PROJECT_DONATION: (
        _eq("pot_id", "pot_id"),
        _eq("project_id", "project_id"),
        _eq("donor_id", "donor_id"),
        _eq("referrer_id", "referrer_id"),
    ),
    EventKind.POTLOCK_POT_DONATION: (
        _eq("pot_id", "pot_id"),
        _eq("donor_id", "donor_id"),
        _eq("referrer_id", "referrer_id"),
    ),
    EventKind.TRADE_POOL: (
        _eq("pool_id", "pool", pattern=POOL_ID_PATTERN),
        _eq("account_id", "trader"),
    ),
    EventKind.TRADE_SWAP: (
        FilterField(
            param="involved_token_account_ids",
            mode=FilterMode.CONTAINS_ANY,
            columns=("token_account_id",),
            relationship="involved_tokens",
        ),
        _eq("account_id", "trader"),
    ),
    EventKind.TRADE_POOL_CHANGE: (
        _eq("pool_id", "pool_id", pattern=POOL_ID_PATTERN),
    ),
}


def fields_for(kind: EventKind) -> Tuple[FilterField, ...]:
    return FILTER_FIELDS[EventKind(kind)]


__all__ = ["FilterMode", "FilterField", "FILTER_FIELDS", "POOL_ID_PATTERN", "fields_for"]
