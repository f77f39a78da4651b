from __future__ import annotations

from typing import Iterable, List

from pydantic import BaseModel

from chain_events.models.events import EVENT_MODELS
from chain_events.models.kinds import EventKind


def assemble(kind: EventKind, rows: Iterable) -> List[BaseModel]:
    """Project store rows onto the public model of ``kind``."""
    model = EVENT_MODELS[EventKind(kind)]
    return [model.model_validate(row) for row in rows]


__all__ = ["assemble"]
