"""Query engine: normalize → predicate → block window → fetch → assemble.

Each call borrows one session, runs both store queries inside a single read
snapshot and returns either a complete page of whole blocks or raises.
"""

from __future__ import annotations

import time
from typing import Callable, List, Mapping, Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session, sessionmaker

from chain_events.core.constants import DEFAULT_BLOCKS_PER_REQUEST
from chain_events.core.errors import QueryCancelled, StoreTimeout, StoreUnavailable
from chain_events.core.logging import log
from chain_events.data.event_store import EventStore
from chain_events.models.kinds import EventKind
from .assembler import assemble
from .cancel import Cancellation
from .fetcher import EventFetcher
from .filters import build_predicate
from .params import normalize
from .window import BlockWindowResolver


class Deadline:
    def __init__(self, seconds: Optional[float], clock: Callable[[], float] = time.monotonic):
        self.seconds = seconds
        self._clock = clock
        self._expires = clock() + seconds if seconds else None

    def check(self, stage: str) -> None:
        if self._expires is not None and self._clock() > self._expires:
            raise StoreTimeout(f"Query exceeded {self.seconds}s while {stage}")


def _check(cancellation: Optional[Cancellation], stage: str) -> None:
    if cancellation is not None:
        cancellation.check(stage)


class EventQueryEngine:
    """Stateless pipeline shared by every request and worker thread."""

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        default_blocks: int = DEFAULT_BLOCKS_PER_REQUEST,
        timeout_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.session_factory = session_factory
        self.default_blocks = default_blocks
        self.timeout_seconds = timeout_seconds
        self.resolver = BlockWindowResolver()
        self.fetcher = EventFetcher()
        self._clock = clock

    def query(
        self,
        kind: EventKind,
        params: Mapping[str, Optional[str]],
        cancellation: Optional[Cancellation] = None,
    ) -> List[BaseModel]:
        """Serve one page. ``cancellation`` lets the caller abandon the query
        when its client disconnects; the borrowed connection is released either way."""
        query = normalize(kind, params, default_blocks=self.default_blocks)
        predicate = build_predicate(query.kind, query.filters)
        deadline = Deadline(self.timeout_seconds, clock=self._clock)
        started = time.perf_counter()

        try:
            with self.session_factory() as session:
                store = EventStore(session, timeout_seconds=self.timeout_seconds)
                with store.snapshot():
                    if cancellation is not None:
                        cancellation.attach(session.connection().connection.dbapi_connection)
                    try:
                        _check(cancellation, "resolving the block window")
                        window = self.resolver.resolve(
                            store, predicate, query.start_timestamp_nanosec, query.block_budget
                        )
                        deadline.check("resolving the block window")
                        _check(cancellation, "fetching events")
                        rows = self.fetcher.fetch(store, predicate, window)
                        deadline.check("fetching events")
                    finally:
                        if cancellation is not None:
                            cancellation.detach()
                    events = assemble(query.kind, rows)
        except QueryCancelled:
            log.info(f"{query.kind} query abandoned by client", source="EventQueryEngine")
            raise
        except (StoreUnavailable, StoreTimeout) as exc:
            if cancellation is not None and cancellation.cancelled:
                # the driver reports an interrupted statement as an operational error
                log.info(f"{query.kind} query interrupted by client", source="EventQueryEngine")
                raise QueryCancelled("Client disconnected") from exc
            log.error(
                f"{type(exc).__name__} for {query.kind} "
                f"start={query.start_timestamp_nanosec} blocks={query.block_budget}: {exc.message}",
                source="EventQueryEngine",
                payload=predicate.describe(),
            )
            raise

        log.debug(
            f"{query.kind} start={query.start_timestamp_nanosec} blocks={query.block_budget} "
            f"-> {len(window.timestamps)} blocks, {len(events)} events "
            f"in {time.perf_counter() - started:.3f}s",
            source="EventQueryEngine",
            payload=predicate.describe(),
        )
        return events


__all__ = ["Deadline", "EventQueryEngine"]
