"""Process logging configuration for the password service."""

from __future__ import annotations

import logging

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite")


def resolve_log_level(level: str) -> int:
    """Map a level name to a logging constant, falling back to INFO."""

    normalized_level = level.strip().upper() or "INFO"
    resolved = logging.getLevelName(normalized_level)
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(*, level: str) -> None:
    """Configure root logging once per process with the runtime level.

    Driver loggers stay at WARNING so bound parameters (password hashes among
    them) are not echoed at DEBUG.
    """

    logging.basicConfig(level=resolve_log_level(level), format=_LOG_FORMAT)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
