"""Logging setup shared by the API, the planner services and scripts."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from studyplan.utils.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Connection-pool chatter from the remote call drowns out fallback warnings.
_NOISY_LOGGERS = ("urllib3", "httpx")

_LOGGER_INITIALIZED = False


def configure_logging(level: Optional[str] = None) -> None:
    """Configure the root logger once per process."""

    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    resolved_level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, stream=sys.stdout)
    if resolved_level != "DEBUG":
        for noisy_name in _NOISY_LOGGERS:
            logging.getLogger(noisy_name).setLevel(logging.WARNING)
    _LOGGER_INITIALIZED = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
