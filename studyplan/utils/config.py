"""Process-wide configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


DEFAULT_PORT = 10000


def _read_port(raw_value: Optional[str]) -> int:
    if raw_value is None:
        return DEFAULT_PORT
    try:
        return int(raw_value)
    except ValueError:
        return DEFAULT_PORT


def _read_float(name: str, default: float) -> float:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _read_int(name: str, default: int) -> int:
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    app_name: str
    app_version: str
    log_level: str
    host: str
    port: int
    openai_api_key: str | None
    remote_model: str
    remote_endpoint: str
    remote_max_output_tokens: int
    remote_timeout_seconds: float
    default_start_time: str


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build settings once; call ``get_settings.cache_clear()`` to reload."""
    load_dotenv()
    return Settings(
        app_name=os.getenv("APP_NAME", "Study Plan Generator"),
        app_version=os.getenv("APP_VERSION", "1.0.0"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_read_port(os.getenv("PORT")),
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        remote_model=os.getenv("REMOTE_MODEL", "gpt-4.1-mini"),
        remote_endpoint=os.getenv(
            "REMOTE_ENDPOINT",
            "https://api.openai.com/v1/responses",
        ),
        remote_max_output_tokens=_read_int("REMOTE_MAX_OUTPUT_TOKENS", 512),
        remote_timeout_seconds=_read_float("REMOTE_TIMEOUT_SECONDS", 15.0),
        default_start_time=os.getenv("DEFAULT_START_TIME", "08:00"),
    )
