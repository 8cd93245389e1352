"""Structured logging configuration using structlog.

``configure_logging`` wires structlog into the stdlib root logger so that our
own events and third-party records (uvicorn, httpx) share one renderer: JSON
lines in production, the coloured console renderer while developing.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# Libraries that log every request at INFO; the client logs its own summary.
_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    *,
    json_logs: bool = True,
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_logs: Render JSON (production) when *True*, console output otherwise.
        log_level: Root log level name (e.g. ``"INFO"``, ``"DEBUG"``).
        stream: Destination stream; defaults to ``sys.stdout``.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    final_processors: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if json_logs:
        final_processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors.append(structlog.dev.ConsoleRenderer())

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=final_processors,
    )

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level.upper())

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
