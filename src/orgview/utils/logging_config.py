"""Logging setup shared by the library, CLI and server."""

from __future__ import annotations

import logging
import sys

from orgview.config import ORGVIEW_LOG_LEVEL

_ROOT_LOGGER_NAME = "orgview"
# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}

_configured = False


class ContextFormatter(logging.Formatter):
    """Formatter that appends ``extra={...}`` fields as ``key=value`` pairs."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        context = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        }
        if not context:
            return base
        pairs = " ".join(f"{key}={value!r}" for key, value in sorted(context.items()))
        return f"{base} [{pairs}]"


def configure_logging(level: str | int | None = None) -> None:
    """Attach a stderr handler to the package loggers (idempotent)."""
    global _configured
    if _configured:
        if level is not None:
            for name in (_ROOT_LOGGER_NAME, "server"):
                logging.getLogger(name).setLevel(level)
        return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        ContextFormatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    for name in (_ROOT_LOGGER_NAME, "server"):
        logger = logging.getLogger(name)
        logger.addHandler(handler)
        logger.setLevel(level or ORGVIEW_LOG_LEVEL)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a module logger, configuring package logging on first use."""
    configure_logging()
    return logging.getLogger(name)
