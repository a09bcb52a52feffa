"""Logging configuration for the build CLI."""

from __future__ import annotations

import logging

from .common import getenv

_LOGGING_CONFIGURED = False


def configure_logging(level: str | None = None) -> None:
    """Configure process-wide logging once; ``LETSPACK_LOG_LEVEL`` is the fallback level."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level_name = (level or getenv("LETSPACK_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    _LOGGING_CONFIGURED = True
