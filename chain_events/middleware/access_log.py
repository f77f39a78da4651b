from __future__ import annotations

import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from chain_events.core.logging import log


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Log one line per request: client, request line, status, size, duration."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        client = request.client.host if request.client else "-"
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        size = response.headers.get("content-length", "-")
        log.route(
            f'{client} "{request.method} {target}" Code: {response.status_code} '
            f'Size: {size} bytes "{request.headers.get("user-agent", "-")}" {elapsed:.6f}',
            source="access",
        )
        return response


def install_access_log(app) -> None:
    app.add_middleware(AccessLogMiddleware)


__all__ = ["AccessLogMiddleware", "install_access_log"]
