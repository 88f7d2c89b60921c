"""structlog setup for the command line."""

from __future__ import annotations

import logging

import structlog

_RENDERERS = {
    "text": lambda: structlog.dev.ConsoleRenderer(colors=False),
    "json": lambda: structlog.processors.JSONRenderer(),
    "logfmt": lambda: structlog.processors.LogfmtRenderer(),
}


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    if fmt not in _RENDERERS:
        raise ValueError(f"unknown log format: {fmt}")

    level_no = logging.getLevelName(level.upper())
    if not isinstance(level_no, int):
        raise ValueError(f"unknown log level: {level}")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _RENDERERS[fmt](),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        cache_logger_on_first_use=False,
    )
