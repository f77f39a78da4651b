"""Per-request cancellation of an in-flight store query.

The web layer owns a :class:`Cancellation` for each request and calls
:meth:`Cancellation.cancel` when the client goes away. The engine attaches the
DBAPI connection it borrowed so a statement already running in the store is
interrupted (``sqlite3.Connection.interrupt`` / psycopg ``cancel``), and it
checks the flag between stages so no further statements start.
"""

from __future__ import annotations

import threading
from typing import Any, Optional

from chain_events.core.errors import QueryCancelled


def interrupt_connection(dbapi_connection: Any) -> bool:
    """Ask the driver to abort the statement running on ``dbapi_connection``."""
    for name in ("interrupt", "cancel"):
        hook = getattr(dbapi_connection, name, None)
        if callable(hook):
            hook()
            return True
    return False


class Cancellation:
    def __init__(self) -> None:
        self._cancelled = threading.Event()
        # held while the connection is swapped or interrupted, so a late cancel
        # never reaches a connection already returned to the pool
        self._lock = threading.Lock()
        self._connection: Optional[Any] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def attach(self, dbapi_connection: Any) -> None:
        with self._lock:
            self._connection = dbapi_connection
            if self.cancelled:
                interrupt_connection(dbapi_connection)

    def detach(self) -> None:
        with self._lock:
            self._connection = None

    def cancel(self) -> None:
        self._cancelled.set()
        with self._lock:
            if self._connection is not None:
                interrupt_connection(self._connection)

    def check(self, stage: str) -> None:
        if self.cancelled:
            raise QueryCancelled(f"Client disconnected while {stage}")


__all__ = ["Cancellation", "interrupt_connection"]
