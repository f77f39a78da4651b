"""Shared constants, settings, logging and errors."""

from .constants import MAX_BLOCKS_PER_REQUEST, DEFAULT_BLOCKS_PER_REQUEST
from .errors import (
    EventQueryError,
    QueryCancelled,
    StoreTimeout,
    StoreUnavailable,
    ValidationError,
)
from .logging import log, configure_console_log

__all__ = [
    "MAX_BLOCKS_PER_REQUEST",
    "DEFAULT_BLOCKS_PER_REQUEST",
    "EventQueryError",
    "ValidationError",
    "StoreUnavailable",
    "StoreTimeout",
    "QueryCancelled",
    "log",
    "configure_console_log",
]
