"""Event fetcher: every matching event of the resolved blocks, in order."""

from __future__ import annotations

from typing import List

from chain_events.core.errors import StoreUnavailable
from chain_events.core.logging import log
from .window import BlockWindow


class EventFetcher:
    def fetch(self, store, predicate, window: BlockWindow) -> List:
        """Return whole blocks only: all matching events of each window block.

        A window block with no rows means the snapshot changed under us; the
        page is refused instead of being returned short.
        """
        if window.is_empty:
            return []
        rows = store.fetch_rows(predicate, window.timestamps)

        seen = {row.block_timestamp_nanosec for row in rows}
        expected = set(window.timestamps)
        if seen != expected:
            log.error(
                f"Fetched blocks {sorted(seen)} do not match window {sorted(expected)}",
                source="EventFetcher",
            )
            raise StoreUnavailable("Event store returned an incomplete page")
        return rows


__all__ = ["EventFetcher"]
