"""Error taxonomy for the event query engine.

Every error carries the HTTP status it maps to so the web layer can render
it without knowing the individual types.
"""

from __future__ import annotations


class EventQueryError(Exception):
    """Base class for failures surfaced to API clients."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(EventQueryError):
    """A query parameter is malformed or out of range."""

    status_code = 400


class StoreUnavailable(EventQueryError):
    """The event store could not serve the query. Safe to retry."""

    status_code = 503


class StoreTimeout(EventQueryError):
    """The query exceeded its deadline. Safe to retry."""

    status_code = 504


class QueryCancelled(EventQueryError):
    """The client went away and the in-flight query was abandoned."""

    # nginx "client closed request"; the response is never read
    status_code = 499


__all__ = [
    "EventQueryError",
    "ValidationError",
    "StoreUnavailable",
    "StoreTimeout",
    "QueryCancelled",
]
