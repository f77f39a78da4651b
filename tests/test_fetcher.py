import pytest

from chain_events.core.errors import StoreUnavailable
from chain_events.models.kinds import EventKind
from chain_events.query.fetcher import EventFetcher
from chain_events.query.filters import Predicate, build_predicate
from chain_events.query.window import BlockWindow

from event_factory import T0, nft_burn, trade_swap


def _keys(rows):
    return [(r.block_timestamp_nanosec, r.intra_block_sequence) for r in rows]


def test_returns_every_event_of_each_block(seed, store):
    seed(*(nft_burn(T0, seq=s) for s in range(300)), nft_burn(T0 + 1), nft_burn(T0 + 2))
    window = BlockWindow(T0, 2, (T0, T0 + 1))
    rows = EventFetcher().fetch(store, Predicate(EventKind.NFT_BURN), window)
    assert len(rows) == 301
    assert {r.block_timestamp_nanosec for r in rows} == {T0, T0 + 1}


def test_orders_by_block_then_sequence(seed, store):
    seed(nft_burn(T0 + 1, seq=1), nft_burn(T0, seq=2), nft_burn(T0 + 1, seq=0), nft_burn(T0, seq=0))
    window = BlockWindow(T0, 2, (T0, T0 + 1))
    rows = EventFetcher().fetch(store, Predicate(EventKind.NFT_BURN), window)
    assert _keys(rows) == [(T0, 0), (T0, 2), (T0 + 1, 0), (T0 + 1, 1)]


def test_predicate_applies_inside_blocks(seed, store):
    seed(
        nft_burn(T0, seq=0, owner_id="alice.near"),
        nft_burn(T0, seq=1, owner_id="bob.near"),
        nft_burn(T0, seq=2, owner_id="alice.near"),
    )
    predicate = build_predicate(EventKind.NFT_BURN, {"account_id": "alice.near"})
    rows = EventFetcher().fetch(store, predicate, BlockWindow(T0, 1, (T0,)))
    assert _keys(rows) == [(T0, 0), (T0, 2)]


def test_swap_token_membership_matches_any_token(seed, store):
    seed(
        trade_swap(T0, seq=0, balance_changes={"wrap.near": "-1", "usdt.near": "3"}),
        trade_swap(T0, seq=1, balance_changes={"aurora": "-1", "usdc.near": "3"}),
        trade_swap(T0, seq=2, balance_changes={"usdc.near": "-5", "wrap.near": "1"}),
    )
    predicate = build_predicate(
        EventKind.TRADE_SWAP, {"involved_token_account_ids": frozenset({"wrap.near", "dai.near"})}
    )
    rows = EventFetcher().fetch(store, predicate, BlockWindow(T0, 1, (T0,)))
    assert _keys(rows) == [(T0, 0), (T0, 2)]


def test_empty_window_does_not_touch_the_store():
    class _Boom:
        def fetch_rows(self, *_):
            raise AssertionError("store should not be queried")

    assert EventFetcher().fetch(_Boom(), Predicate(EventKind.NFT_BURN), BlockWindow(T0, 3)) == []


def test_missing_block_refuses_the_page():
    class _ShortStore:
        def fetch_rows(self, predicate, timestamps):
            return []

    with pytest.raises(StoreUnavailable):
        EventFetcher().fetch(_ShortStore(), Predicate(EventKind.NFT_BURN), BlockWindow(T0, 1, (T0,)))
