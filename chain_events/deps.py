"""Dependency helpers for FastAPI routes."""

from fastapi import Request

from chain_events.query.engine import EventQueryEngine


def get_query_engine(request: Request) -> EventQueryEngine:
    """Return the :class:`EventQueryEngine` attached to the running app."""
    return request.app.state.query_engine


__all__ = ["get_query_engine"]
