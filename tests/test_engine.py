import itertools
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from chain_events.core.errors import StoreTimeout, StoreUnavailable, ValidationError
from chain_events.data.db import make_engine, make_session_factory
from chain_events.data.event_store import QUERY_CANCELED, EventStore
from chain_events.models.kinds import EventKind
from chain_events.query.engine import Deadline, EventQueryEngine

from event_factory import ONE_NEAR, T0, potlock_donation, trade_swap


class _Orig(Exception):
    def __init__(self, sqlstate):
        super().__init__("driver error")
        self.sqlstate = sqlstate


def test_validation_errors_surface_before_touching_the_store():
    def _no_sessions():
        raise AssertionError("no session expected")

    engine = EventQueryEngine(_no_sessions)
    with pytest.raises(ValidationError):
        engine.query(EventKind.NFT_MINT, {"blocks": "500"})


def test_deadline_exceeded_fails_the_whole_query(seed, session_factory):
    seed(potlock_donation(T0))
    clock = itertools.count(0, 5).__next__
    engine = EventQueryEngine(session_factory, timeout_seconds=1.0, clock=clock)
    with pytest.raises(StoreTimeout):
        engine.query(EventKind.POTLOCK_DONATION, {})


def test_deadline_without_timeout_never_fires():
    deadline = Deadline(None, clock=itertools.count(0, 1000).__next__)
    deadline.check("anything")


def test_unreachable_store_is_unavailable(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'missing' / 'events.db'}")
    query_engine = EventQueryEngine(make_session_factory(engine))
    with pytest.raises(StoreUnavailable):
        query_engine.query(EventKind.NFT_MINT, {})


def test_missing_tables_are_unavailable():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    query_engine = EventQueryEngine(make_session_factory(engine))
    with pytest.raises(StoreUnavailable):
        query_engine.query(EventKind.TRADE_POOL, {})


def test_statement_timeout_maps_to_store_timeout():
    exc = OperationalError("SELECT 1", {}, _Orig(QUERY_CANCELED))
    assert isinstance(EventStore(session=None)._translate(exc), StoreTimeout)


def test_other_driver_errors_map_to_unavailable():
    exc = OperationalError("SELECT 1", {}, _Orig("08006"))
    assert isinstance(EventStore(session=None)._translate(exc), StoreUnavailable)


def test_snapshot_translates_errors_raised_inside(session_factory):
    with session_factory() as session:
        store = EventStore(session)
        with pytest.raises(StoreTimeout):
            with store.snapshot():
                raise OperationalError("SELECT 1", {}, _Orig(QUERY_CANCELED))


def test_amounts_keep_full_precision(seed, query_engine):
    seed(potlock_donation(T0, referrer_id="ref.near"))
    [event] = query_engine.query(EventKind.POTLOCK_DONATION, {})
    assert event.total_amount == Decimal(ONE_NEAR)
    assert event.referrer_fee == Decimal("10000000000000000000000")
    assert event.model_dump(mode="json")["total_amount"] == ONE_NEAR


def test_swap_involved_tokens_follow_balance_changes():
    row = trade_swap(T0, balance_changes={"wrap.near": "-1", "usdt.near": "2"})
    assert sorted(t.token_account_id for t in row.involved_tokens) == ["usdt.near", "wrap.near"]


def test_exponent_amounts_are_served_as_plain_digits(seed, query_engine):
    row = potlock_donation(T0)
    row.total_amount = Decimal("1E+24")
    row.protocol_fee = Decimal("2.5E+22")
    seed(row)
    [event] = query_engine.query(EventKind.POTLOCK_DONATION, {})
    body = event.model_dump(mode="json")
    assert body["total_amount"] == ONE_NEAR
    assert body["protocol_fee"] == "25000000000000000000000"


def test_swap_balance_changes_are_served_as_plain_digits(seed, query_engine):
    seed(trade_swap(T0, balance_changes={"wrap.near": Decimal("-1E+24"), "usdt.near": Decimal("3E+6")}))
    [event] = query_engine.query(EventKind.TRADE_SWAP, {})
    assert event.model_dump(mode="json")["balance_changes"] == {
        "wrap.near": "-" + ONE_NEAR,
        "usdt.near": "3000000",
    }
