"""Engine and session helpers for the event store."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from chain_events.core.logging import log
from .tables import Base


def _enable_sqlite_snapshots(engine: Engine) -> None:
    # pysqlite defers BEGIN until the first write, so two SELECTs would each
    # see their own snapshot. Emit BEGIN ourselves to hold one read snapshot.
    @event.listens_for(engine, "connect")
    def _connect(dbapi_connection, _record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")


def make_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine whose transactions read from a single snapshot."""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, echo=echo, future=True, **kwargs)
        _enable_sqlite_snapshots(engine)
    else:
        engine = create_engine(
            url,
            echo=echo,
            future=True,
            pool_pre_ping=True,
            isolation_level="REPEATABLE READ",
        )
    log.debug(f"Engine created for {engine.url.render_as_string(hide_password=True)}", source="db")
    return engine


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False, future=True)


def init_schema(engine: Engine) -> None:
    """Create every event table that does not exist yet."""
    Base.metadata.create_all(bind=engine)
    log.info("Event store schema ensured", source="db")


__all__ = ["make_engine", "make_session_factory", "init_schema"]
