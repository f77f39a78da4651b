"""FastAPI application serving the /v0 event endpoints."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from chain_events import __version__
from chain_events.core.config import Settings, load_settings
from chain_events.core.errors import EventQueryError, QueryCancelled, ValidationError
from chain_events.core.logging import configure_console_log, log
from chain_events.data.db import make_engine, make_session_factory
from chain_events.middleware.access_log import install_access_log
from chain_events.query.engine import EventQueryEngine
from chain_events.routes.nft_api import router as nft_router
from chain_events.routes.potlock_api import router as potlock_router
from chain_events.routes.trade_api import router as trade_router


def _build_query_engine(settings: Settings, engine: Engine) -> EventQueryEngine:
    return EventQueryEngine(
        make_session_factory(engine),
        default_blocks=settings.default_blocks_per_request,
        timeout_seconds=settings.query_timeout_seconds,
    )


async def _event_query_error(request: Request, exc: EventQueryError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        log.info(f"Rejected {request.url.path}: {exc.message}", source="api")
    elif isinstance(exc, QueryCancelled):
        log.info(f"Abandoned {request.url.path}: {exc.message}", source="api")
    else:
        log.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}", source="api")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app(
    settings: Optional[Settings] = None,
    query_engine: Optional[EventQueryEngine] = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_console_log(settings.log_level)
    owned_engine: Optional[Engine] = None
    if query_engine is None:
        owned_engine = make_engine(settings.database_url)
        query_engine = _build_query_engine(settings, owned_engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info(f"Serving events on {settings.bind_address}", source="app")
        yield
        if owned_engine is not None:
            owned_engine.dispose()

    app = FastAPI(title="Chain Events API", version=__version__, lifespan=lifespan)
    app.state.query_engine = query_engine
    app.state.settings = settings

    # --------------------------------------------------------------------------
    # Middleware
    # --------------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        max_age=3600,
    )
    install_access_log(app)
    app.add_exception_handler(EventQueryError, _event_query_error)

    # --------------------------------------------------------------------------
    # Routers
    # --------------------------------------------------------------------------
    app.include_router(nft_router)
    app.include_router(potlock_router)
    app.include_router(trade_router)

    @app.get("/api/status")
    async def status():
        return {"status": "ok", "version": __version__}

    return app


app = create_app()
