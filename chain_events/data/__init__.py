"""Event store schema and access."""

from .db import init_schema, make_engine, make_session_factory
from .event_store import EventStore
from .tables import EVENT_TABLES, Base, table_for

__all__ = [
    "Base",
    "EVENT_TABLES",
    "EventStore",
    "init_schema",
    "make_engine",
    "make_session_factory",
    "table_for",
]
