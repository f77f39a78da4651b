"""Runtime settings read from the environment (and an optional ``.env``)."""

from __future__ import annotations

import os
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    DEFAULT_BIND_ADDRESS,
    DEFAULT_BLOCKS_PER_REQUEST,
    DEFAULT_DATABASE_URL,
    MAX_BLOCKS_PER_REQUEST,
    ROOT_DIR,
)
from .logging import log

# names understood by both stdlib logging and uvicorn
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
_LOG_LEVEL_ALIASES = {"WARN": "WARNING", "FATAL": "CRITICAL"}


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    database_url: str = DEFAULT_DATABASE_URL
    bind_address: str = DEFAULT_BIND_ADDRESS
    default_blocks_per_request: int = Field(
        DEFAULT_BLOCKS_PER_REQUEST, ge=1, le=MAX_BLOCKS_PER_REQUEST
    )
    query_timeout_seconds: Optional[float] = Field(None, gt=0)
    log_level: str = "INFO"

    @field_validator("query_timeout_seconds", mode="before")
    @classmethod
    def _blank_timeout_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _known_log_level(cls, value):
        name = str(value).strip().upper()
        name = _LOG_LEVEL_ALIASES.get(name, name)
        if name not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return name

    @property
    def host(self) -> str:
        host, _, _ = self.bind_address.rpartition(":")
        return host or "0.0.0.0"

    @property
    def port(self) -> int:
        _, _, port = self.bind_address.rpartition(":")
        return int(port)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        raw = {
            "database_url": env.get("DATABASE_URL"),
            "bind_address": env.get("BIND_ADDRESS"),
            "default_blocks_per_request": env.get("DEFAULT_BLOCKS_PER_REQUEST"),
            "query_timeout_seconds": env.get("QUERY_TIMEOUT_SECONDS"),
            "log_level": env.get("LOG_LEVEL"),
        }
        return cls(**{k: v for k, v in raw.items() if v is not None})


def load_settings() -> Settings:
    """Load ``.env`` (without overriding real env vars) and build settings."""
    found = find_dotenv(usecwd=True)
    if found:
        load_dotenv(found, override=False)
    else:
        candidate = ROOT_DIR / ".env"
        if candidate.exists():
            load_dotenv(candidate, override=False)
    settings = Settings.from_env()
    log.debug(
        f"Settings loaded (bind={settings.bind_address}, timeout={settings.query_timeout_seconds})",
        source="config",
    )
    return settings


__all__ = ["Settings", "load_settings"]
