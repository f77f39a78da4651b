"""Read-only access to the event tables for a single request.

The store answers the two questions the query engine asks:

* which distinct block timestamps at or after ``X`` contain at least one
  event matching a predicate (ascending, at most ``N``), and
* which matching events fall within a given set of block timestamps.

Both run inside :meth:`EventStore.snapshot` so they read the same
append-only state. Driver failures are translated into
:class:`StoreUnavailable` / :class:`StoreTimeout`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional, Sequence

from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from chain_events.core.errors import StoreTimeout, StoreUnavailable
from chain_events.core.logging import log
from .tables import Base, table_for

# SQLSTATE raised by PostgreSQL when statement_timeout fires
QUERY_CANCELED = "57014"


def _sqlstate(exc: DBAPIError) -> Optional[str]:
    orig = getattr(exc, "orig", None)
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)


class EventStore:
    """Thin query wrapper around a SQLAlchemy :class:`Session`."""

    def __init__(self, session: Session, timeout_seconds: Optional[float] = None):
        self.session = session
        self.timeout_seconds = timeout_seconds

    # ------------------------
    # Snapshot
    # ------------------------
    @contextmanager
    def snapshot(self) -> Iterator["EventStore"]:
        try:
            with self.session.begin():
                self._apply_statement_timeout()
                yield self
        except DBAPIError as exc:
            raise self._translate(exc) from exc
        except PoolTimeoutError as exc:
            log.error(f"Connection pool exhausted: {exc}", source="EventStore")
            raise StoreUnavailable("Event store connection pool exhausted") from exc
        except SQLAlchemyError as exc:
            log.error(f"Event store failure: {exc}", source="EventStore")
            raise StoreUnavailable("Event store unavailable") from exc

    def _apply_statement_timeout(self) -> None:
        if not self.timeout_seconds:
            return
        if self.session.get_bind().dialect.name != "postgresql":
            return
        millis = max(int(self.timeout_seconds * 1000), 1)
        self.session.execute(text(f"SET LOCAL statement_timeout = {millis}"))

    def _translate(self, exc: DBAPIError):
        if _sqlstate(exc) == QUERY_CANCELED:
            log.warning(f"Query canceled by statement timeout: {exc}", source="EventStore")
            return StoreTimeout("Event store query timed out")
        log.error(f"Event store failure: {exc}", source="EventStore")
        return StoreUnavailable("Event store unavailable")

    # ------------------------
    # Queries
    # ------------------------
    def distinct_block_timestamps(self, predicate, start: int, limit: int) -> List[int]:
        """Ascending distinct timestamps ``>= start`` with a matching event.

        The predicate is applied before DISTINCT and LIMIT, so blocks where
        nothing matches never take a slot of ``limit``.
        """
        table = table_for(predicate.kind)
        ts = table.block_timestamp_nanosec
        q = (
            select(ts)
            .where(ts >= start, predicate.clause(table))
            .distinct()
            .order_by(ts)
            .limit(limit)
        )
        return list(self.session.execute(q).scalars())

    def fetch_rows(self, predicate, timestamps: Sequence[int]) -> List[Base]:
        """Every matching row in ``timestamps``, in block then sequence order."""
        if not timestamps:
            return []
        table = table_for(predicate.kind)
        q = (
            select(table)
            .where(table.block_timestamp_nanosec.in_(list(timestamps)), predicate.clause(table))
            .order_by(table.block_timestamp_nanosec, table.intra_block_sequence)
        )
        return list(self.session.execute(q).scalars())


__all__ = ["EventStore", "QUERY_CANCELED"]
