"""
Centralized logging configuration.

Modules obtain loggers with `logging.getLogger(__name__)`; `main.py` calls
`configure_logging()` once at import.
"""

from __future__ import annotations

import logging
import sys

from . import settings

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_configured = False


def configure_logging() -> None:
    """Configure the root logger once."""
    global _configured
    if _configured:
        return None
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    root = logging.getLogger()
    level = getattr(logging, settings.log_level(), logging.INFO)
    root.setLevel(level if isinstance(level, int) else logging.INFO)
    root.addHandler(handler)
    _configured = True
