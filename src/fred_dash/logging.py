"""structlog setup shared by the CLI and library callers."""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

LOG_LEVELS: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Third-party loggers that flood debug output with connection and font chatter.
NOISY_LOGGERS = ("urllib3", "matplotlib", "PIL")


def configure_logging(
    level: str = "info",
    *,
    json_output: bool = False,
) -> None:
    """Initialize structlog and the stdlib root logger at ``level``."""

    normalized = level.lower()
    if normalized not in LOG_LEVELS:
        valid = ", ".join(sorted(LOG_LEVELS))
        raise ValueError(f"Unsupported log level {level!r}. Choose one of: {valid}.")
    level_value = LOG_LEVELS[normalized]

    logging.basicConfig(level=level_value, format="%(message)s", stream=sys.stderr)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level_value, logging.WARNING))

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_command_context(**values: object) -> None:
    """Attach key/value pairs to every log line emitted for the current command."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


__all__ = ["configure_logging", "bind_command_context", "LOG_LEVELS"]
