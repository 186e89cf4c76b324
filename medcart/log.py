"""
Logging setup for applications embedding medcart.

Library modules only call logging.getLogger(__name__); handlers are installed
here, once, by the host process.
"""

from __future__ import annotations

import logging
import sys

DEFAULT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """
    Configure root logging.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (default INFO)
        fmt: log format string
    """
    numeric_level = getattr(logging, (level or "INFO").upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=fmt or DEFAULT_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


__all__ = ("setup_logging", "DEFAULT_FORMAT")
