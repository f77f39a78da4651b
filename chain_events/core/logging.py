"""Console logging for the service.

Messages are written as ``[source] message payload`` so the query engine,
the store and the access log can be told apart in one stream.
"""

from __future__ import annotations

import logging
from typing import Any

from .constants import LOG_DATE_FORMAT


class SimpleLogger:
    """Small wrapper around :mod:`logging` taking ``source``/``payload`` keywords."""

    def __init__(self, name: str = "chain_events") -> None:
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(levelname)s - %(message)s",
                    datefmt=LOG_DATE_FORMAT,
                )
            )
            self._logger.addHandler(handler)
        self.configure()

    def configure(self, level: int = logging.INFO) -> None:
        self._logger.setLevel(level)

    @property
    def level(self) -> int:
        return self._logger.level

    def _emit(self, level: int, msg: str, source: str | None, payload: Any | None) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, self._format(msg, source, payload))

    def debug(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.DEBUG, msg, source, payload)

    def info(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.INFO, msg, source, payload)

    def warning(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.WARNING, msg, source, payload)

    def error(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.ERROR, msg, source, payload)

    def route(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        """Access-log line; always INFO."""
        self._emit(logging.INFO, msg, source, payload)

    @staticmethod
    def _format(msg: str, source: str | None, payload: Any | None = None) -> str:
        base = f"[{source}] {msg}" if source else msg
        if payload is not None:
            base = f"{base} {payload}"
        return base


log = SimpleLogger()


def configure_console_log(level: str | int = logging.INFO) -> None:
    """Set the console log level from a name (``"debug"``) or a number."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            log.warning(f"Unknown log level {level!r}; using INFO", source="logging")
            resolved = logging.INFO
        level = resolved
    log.configure(level)


__all__ = ["log", "configure_console_log", "SimpleLogger"]
