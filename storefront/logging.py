"""
Logging setup for the storefront.

Importing this module configures the root logger once, unless the host
application already attached handlers. Everything else asks for a named
logger:

    from storefront.logging import get_logger
    logger = get_logger(__name__)

Session ids, user ids and shopper-entered text (product names, shipping
addresses) end up in log lines, so they go through the sanitizers below.
"""

import logging
import os
import sys
from functools import cache
from typing import Mapping, Optional, TextIO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Transport loggers under supabase and upstash; request lines stay out of INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")

ID_LOG_LENGTH = 8
TEXT_LOG_LENGTH = 50

_LOG_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def get_log_level(environ: Optional[Mapping[str, str]] = None) -> int:
    """LOG_LEVEL from the environment; unknown names fall back to INFO."""
    env = os.environ if environ is None else environ
    level = logging.getLevelName(env.get("LOG_LEVEL", "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(
    environ: Optional[Mapping[str, str]] = None,
    stream: Optional[TextIO] = None,
) -> bool:
    """
    Attach a single stream handler to the root logger.

    Returns False without changes when the root logger already has handlers.
    STOREFRONT_ENV=production drops timestamps (the platform adds its own).
    """
    root = logging.getLogger()
    if root.handlers:
        return False

    env = os.environ if environ is None else environ
    level = get_log_level(env)
    fmt = LOG_FORMAT_SIMPLE if env.get("STOREFRONT_ENV") == "production" else LOG_FORMAT

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    return True


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    """Named logger (typically __name__)."""
    return logging.getLogger(name)


def _truncate(value: str, max_length: int, marker: str = "") -> str:
    if len(value) <= max_length:
        return value
    return value[:max_length] + marker


def sanitize_id_for_logging(id_value: Optional[str]) -> str:
    """Escaped id prefix, enough to correlate log lines without the full value."""
    if not id_value:
        return "N/A"
    return _truncate(str(id_value).translate(_LOG_ESCAPES), ID_LOG_LENGTH)


def sanitize_string_for_logging(value: Optional[str], max_length: int = TEXT_LOG_LENGTH) -> str:
    """Escaped, shortened shopper text. Newlines cannot forge extra log records."""
    if not value:
        return "N/A"
    return _truncate(str(value).strip().translate(_LOG_ESCAPES), max_length, "...")


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "configure_logging",
    "get_log_level",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_string_for_logging",
]
