"""Structured logging configuration using structlog.

Call :func:`configure_logging` once from an entry point; library modules
only ask for a logger with :func:`get_logger`.  Until then, importing this
module installs an INFO-level filter so debug events stay silent.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor


def add_severity(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add severity level for structured log sinks."""
    event_dict["severity"] = method_name.upper()
    return event_dict


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog on top of the standard library logger.

    *level* and *fmt* default to ``BLAST_LOG_LEVEL`` (``INFO``) and
    ``BLAST_LOG_FORMAT`` (``console``); ``json`` switches to one JSON object
    per line.
    """
    level = level or os.environ.get("BLAST_LOG_LEVEL", "INFO")
    fmt = fmt or os.environ.get("BLAST_LOG_FORMAT", "console")

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    if fmt == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_severity,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Return a structured logger bound to *name*."""
    return structlog.get_logger(name)


# Library default until an entry point calls configure_logging(): structlog's
# own defaults print every level, debug included.
if not structlog.is_configured():
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(logging.INFO),
    )
