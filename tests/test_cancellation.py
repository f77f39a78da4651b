import asyncio
import sqlite3
import time
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from chain_events.app import create_app
from chain_events.core.config import Settings
from chain_events.core.errors import QueryCancelled
from chain_events.models.kinds import EventKind
from chain_events.query.cancel import Cancellation, interrupt_connection
from chain_events.query.window import BlockWindowResolver
from chain_events.routes.runner import run_query

from event_factory import T0, nft_mint


class SqliteLikeConnection:
    def __init__(self):
        self.interrupts = 0

    def interrupt(self):
        self.interrupts += 1


class PsycopgLikeConnection:
    def __init__(self):
        self.cancels = 0

    def cancel(self):
        self.cancels += 1


class RecordingCancellation(Cancellation):
    def __init__(self):
        super().__init__()
        self.attached = []
        self.detached = 0

    def attach(self, dbapi_connection):
        self.attached.append(dbapi_connection)
        super().attach(dbapi_connection)

    def detach(self):
        self.detached += 1
        super().detach()


class FakeRequest:
    def __init__(self, disconnected):
        self.url = SimpleNamespace(path="/v0/nft/nft_mint")
        self._disconnected = disconnected
        self.polls = 0

    async def is_disconnected(self):
        self.polls += 1
        return self._disconnected


class WaitsForCancel:
    """Engine stand-in whose query runs until it is cancelled."""

    def __init__(self):
        self.saw_cancel = False

    def query(self, kind, params, cancellation=None):
        for _ in range(500):
            if cancellation.cancelled:
                self.saw_cancel = True
                break
            time.sleep(0.01)
        cancellation.check("reading")
        return []


class AlwaysCancelled:
    def query(self, kind, params, cancellation=None):
        raise QueryCancelled("Client disconnected")


def test_cancel_interrupts_attached_connection():
    conn = SqliteLikeConnection()
    cancellation = Cancellation()
    cancellation.attach(conn)
    cancellation.cancel()
    assert conn.interrupts == 1
    assert cancellation.cancelled


def test_attach_after_cancel_interrupts_immediately():
    conn = SqliteLikeConnection()
    cancellation = Cancellation()
    cancellation.cancel()
    cancellation.attach(conn)
    assert conn.interrupts == 1


def test_detached_connection_is_left_alone():
    conn = SqliteLikeConnection()
    cancellation = Cancellation()
    cancellation.attach(conn)
    cancellation.detach()
    cancellation.cancel()
    assert conn.interrupts == 0


def test_interrupt_uses_driver_cancel_hook():
    conn = PsycopgLikeConnection()
    assert interrupt_connection(conn) is True
    assert conn.cancels == 1
    assert interrupt_connection(object()) is False


def test_check_raises_once_cancelled():
    cancellation = Cancellation()
    cancellation.check("resolving")
    cancellation.cancel()
    with pytest.raises(QueryCancelled) as exc:
        cancellation.check("resolving")
    assert exc.value.status_code == 499


def test_engine_attaches_the_borrowed_sqlite_connection(seed, query_engine):
    seed(nft_mint(T0))
    cancellation = RecordingCancellation()
    events = query_engine.query(EventKind.NFT_MINT, {}, cancellation=cancellation)
    assert len(events) == 1
    [conn] = cancellation.attached
    assert isinstance(conn, sqlite3.Connection)
    assert cancellation.detached == 1


def test_engine_refuses_to_start_after_cancel(seed, query_engine):
    seed(nft_mint(T0))
    cancellation = RecordingCancellation()
    cancellation.cancel()
    with pytest.raises(QueryCancelled):
        query_engine.query(EventKind.NFT_MINT, {}, cancellation=cancellation)
    assert cancellation.detached == 1


def test_cancel_between_stages_skips_the_fetch(seed, query_engine):
    seed(nft_mint(T0), nft_mint(T0 + 1))
    cancellation = Cancellation()
    fetched = []

    class CancelAfterResolve(BlockWindowResolver):
        def resolve(self, store, predicate, start, budget):
            window = super().resolve(store, predicate, start, budget)
            cancellation.cancel()
            return window

    class RecordingFetcher:
        def fetch(self, store, predicate, window):
            fetched.append(window)
            return []

    query_engine.resolver = CancelAfterResolve()
    query_engine.fetcher = RecordingFetcher()
    with pytest.raises(QueryCancelled):
        query_engine.query(EventKind.NFT_MINT, {}, cancellation=cancellation)
    assert fetched == []


def test_disconnect_cancels_the_running_query():
    engine = WaitsForCancel()
    request = FakeRequest(disconnected=True)
    with pytest.raises(QueryCancelled):
        asyncio.run(run_query(request, engine, EventKind.NFT_MINT, {}, poll_interval=0.01))
    assert engine.saw_cancel
    assert request.polls >= 1


def test_connected_client_gets_the_page(seed, query_engine):
    seed(nft_mint(T0))
    request = FakeRequest(disconnected=False)
    events = asyncio.run(run_query(request, query_engine, EventKind.NFT_MINT, {}, poll_interval=0.01))
    assert [e.block_timestamp_nanosec for e in events] == [T0]


def test_cancelled_query_maps_to_client_closed_status():
    app = create_app(settings=Settings(database_url="sqlite://"), query_engine=AlwaysCancelled())
    with TestClient(app) as client:
        response = client.get("/v0/nft/nft_mint")
    assert response.status_code == 499
    assert response.json() == {"detail": "Client disconnected"}
