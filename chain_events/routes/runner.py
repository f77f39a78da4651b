"""Run a blocking engine query off the event loop and stop it if the client leaves."""

from __future__ import annotations

import asyncio
from typing import List, Mapping, Optional

from fastapi import Request
from pydantic import BaseModel

from chain_events.core.logging import log
from chain_events.models.kinds import EventKind
from chain_events.query.cancel import Cancellation
from chain_events.query.engine import EventQueryEngine

DISCONNECT_POLL_SECONDS = 0.25


async def run_query(
    request: Request,
    engine: EventQueryEngine,
    kind: EventKind,
    params: Mapping[str, Optional[str]],
    poll_interval: float = DISCONNECT_POLL_SECONDS,
) -> List[BaseModel]:
    cancellation = Cancellation()
    task = asyncio.ensure_future(
        asyncio.to_thread(engine.query, kind, params, cancellation=cancellation)
    )
    while True:
        done, _ = await asyncio.wait({task}, timeout=poll_interval)
        if done:
            break
        if await request.is_disconnected():
            log.info(f"Client left {request.url.path}; cancelling query", source="api")
            cancellation.cancel()
            break
    return await task


__all__ = ["run_query", "DISCONNECT_POLL_SECONDS"]
