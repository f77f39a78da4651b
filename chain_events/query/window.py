"""Block window resolver.

Given a start timestamp, a block budget ``B`` and a predicate, pick the next
``B`` distinct block timestamps that hold at least one matching event. Blocks
with no matching event are skipped inside the store query and never consume
budget. An empty window means the traversal has reached the end of history
for these filters.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from chain_events.core.constants import MAX_BLOCKS_PER_REQUEST, MAX_STORED_TIMESTAMP_NANOSEC
from chain_events.core.errors import StoreUnavailable, ValidationError
from chain_events.core.logging import log


@dataclass(frozen=True)
class BlockWindow:
    start_timestamp_nanosec: int
    block_budget: int
    timestamps: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.timestamps

    @property
    def next_start(self) -> Optional[int]:
        """Cursor a client would send next: the last block of this window."""
        return self.timestamps[-1] if self.timestamps else None


class BlockWindowResolver:
    def __init__(self, max_blocks: int = MAX_BLOCKS_PER_REQUEST) -> None:
        self.max_blocks = max_blocks

    def resolve(self, store, predicate, start: int, budget: int) -> BlockWindow:
        if not 1 <= budget <= self.max_blocks:
            raise ValidationError(
                f"Blocks per request must be between 1 and {self.max_blocks}, got {budget}"
            )
        if start < 0:
            raise ValidationError(f"start_block_timestamp_nanosec must be non-negative, got {start}")
        if start > MAX_STORED_TIMESTAMP_NANOSEC:
            # beyond any representable block time
            return BlockWindow(start, budget)

        timestamps = tuple(store.distinct_block_timestamps(predicate, start, budget))
        self._check(timestamps, start, budget)
        log.debug(
            f"Resolved {len(timestamps)}/{budget} blocks from {start}",
            source="BlockWindowResolver",
            payload=predicate.describe(),
        )
        return BlockWindow(start, budget, timestamps)

    @staticmethod
    def _check(timestamps: Tuple[int, ...], start: int, budget: int) -> None:
        ordered = all(a < b for a, b in zip(timestamps, timestamps[1:]))
        if len(timestamps) > budget or not ordered or (timestamps and timestamps[0] < start):
            log.error(
                f"Store returned an invalid block window {timestamps!r}",
                source="BlockWindowResolver",
            )
            raise StoreUnavailable("Event store returned an inconsistent block window")


__all__ = ["BlockWindow", "BlockWindowResolver"]
