"""structlog setup for the shootwatch daemon.

Every record is one JSON object on stderr, leaving stdout free. Change
notifications go to the webhook and are never written here; the log carries
cycle summaries, delivery outcomes and failures.
"""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(level: str = "info") -> None:
    """Install the JSON processor chain, filtering below *level*.

    Unknown level names fall back to ``info``. Exceptions passed with
    ``exc_info`` are rendered into a single ``exception`` string field.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Logger tagged with ``component`` (``app``, ``poller``, ``notifier`` ...)."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]
