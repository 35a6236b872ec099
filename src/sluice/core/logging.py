# src/sluice/core/logging.py
"""Structured logging setup for sluice.

Every module logs through ``structlog.get_logger(__name__)``. configure_logging()
points structlog at stdlib logging and installs one stderr handler whose
ProcessorFormatter renders both structlog events and plain stdlib records,
so library chatter and engine events share a format. stdout is left to the
printer component.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter
from structlog.typing import Processor

# Loggers held at WARNING or above regardless of the configured level
_NOISY_LOGGERS: tuple[str, ...] = (
    "asyncio",
    "pluggy",
    "dynaconf",
)


def _drop_formatter_bookkeeping(
    logger: logging.Logger | None,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Strip the _record/_from_structlog keys ProcessorFormatter injects."""
    del event_dict["_record"]
    del event_dict["_from_structlog"]
    return event_dict


def _pre_chain() -> list[Processor]:
    """Processors run on every event before it reaches the formatter."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]


def _render_chain(json_output: bool, stream: Any) -> list[Processor]:
    if json_output:
        return [
            _drop_formatter_bookkeeping,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return [
        _drop_formatter_bookkeeping,
        structlog.dev.ConsoleRenderer(colors=stream.isatty()),
    ]


def configure_logging(
    *,
    json_output: bool = False,
    level: str = "INFO",
) -> None:
    """Configure structlog and stdlib logging for sluice.

    Calling it again replaces the previous handler, so the CLI and tests
    may reconfigure freely.

    Args:
        json_output: Emit one JSON object per line instead of console text.
        level: Root level name (DEBUG, INFO, WARNING, ERROR), any case.
    """
    root_level: int = logging.getLevelNamesMapping()[level.upper()]
    pre_chain = _pre_chain()
    stream = sys.stderr

    structlog.configure(
        processors=[*pre_chain, ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        ProcessorFormatter(
            processors=_render_chain(json_output, stream),
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(root_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(root_level, logging.WARNING))
