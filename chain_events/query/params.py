"""Parameter normalizer: raw query strings to a typed :class:`EventQuery`."""

from __future__ import annotations

import re
from typing import Dict, FrozenSet, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from chain_events.core.constants import (
    DEFAULT_BLOCKS_PER_REQUEST,
    MAX_BLOCKS_PER_REQUEST,
    MAX_START_TIMESTAMP_NANOSEC,
)
from chain_events.core.errors import ValidationError
from chain_events.models.kinds import EventKind
from .fields import fields_for

FilterValue = Union[str, FrozenSet[str]]

_UNSIGNED = re.compile(r"^\d+$", re.ASCII)


class EventQuery(BaseModel):
    """Request-scoped query value. Nothing about it outlives one call."""

    model_config = ConfigDict(frozen=True)

    kind: EventKind
    start_timestamp_nanosec: int = Field(0, ge=0, le=MAX_START_TIMESTAMP_NANOSEC)
    block_budget: int = Field(DEFAULT_BLOCKS_PER_REQUEST, ge=1, le=MAX_BLOCKS_PER_REQUEST)
    filters: Dict[str, FilterValue] = Field(default_factory=dict)


def parse_unsigned(
    name: str,
    raw: Optional[str],
    default: int,
    maximum: int,
    too_large: Optional[str] = None,
) -> int:
    if raw is None:
        return default
    text = raw.strip()
    if not text:
        return default
    if not _UNSIGNED.match(text):
        raise ValidationError(f"{name} must be a non-negative integer, got {raw!r}")
    # compare lengths first so oversized input is never converted
    digits = text.lstrip("0") or "0"
    if len(digits) > len(str(maximum)) or int(digits) > maximum:
        raise ValidationError(too_large or f"{name} must be at most {maximum}, got {text}")
    return int(digits)


def split_list(raw: Optional[str]) -> FrozenSet[str]:
    """Split a comma separated parameter into trimmed, non-empty tokens."""
    if raw is None:
        return frozenset()
    return frozenset(token.strip() for token in raw.split(",") if token.strip())


def normalize(
    kind: EventKind,
    raw: Mapping[str, Optional[str]],
    default_blocks: int = DEFAULT_BLOCKS_PER_REQUEST,
) -> EventQuery:
    kind = EventKind(kind)
    start = parse_unsigned(
        "start_block_timestamp_nanosec",
        raw.get("start_block_timestamp_nanosec"),
        default=0,
        maximum=MAX_START_TIMESTAMP_NANOSEC,
    )
    blocks = parse_unsigned(
        "blocks",
        raw.get("blocks"),
        default=default_blocks,
        maximum=MAX_BLOCKS_PER_REQUEST,
        too_large=f"Blocks per request must be less or equal to {MAX_BLOCKS_PER_REQUEST}",
    )
    blocks = max(blocks, 1)

    filters: Dict[str, FilterValue] = {}
    for field in fields_for(kind):
        value = raw.get(field.param)
        if field.is_list:
            tokens = split_list(value)
            if tokens:
                filters[field.param] = tokens
            continue
        if value is None or not value.strip():
            continue
        value = value.strip()
        if field.pattern is not None and not field.pattern.match(value):
            raise ValidationError(f"{field.param} has an invalid format: {value!r}")
        filters[field.param] = value

    return EventQuery(
        kind=kind,
        start_timestamp_nanosec=start,
        block_budget=blocks,
        filters=filters,
    )


__all__ = ["EventQuery", "FilterValue", "normalize", "parse_unsigned", "split_list"]
