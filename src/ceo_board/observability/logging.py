from __future__ import annotations

import logging
import sys
from typing import TextIO, cast

import structlog
from structlog.typing import EventDict, WrappedLogger

from ceo_board.observability.redaction import redact_sensitive


class RedactionProcessor:
    def __init__(self, max_payload_chars: int = 200) -> None:
        self._max_payload_chars = max_payload_chars

    def __call__(self, _: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
        return cast(
            EventDict,
            redact_sensitive(dict(event_dict), max_payload_chars=self._max_payload_chars),
        )


def configure_logging(
    level: str = "INFO",
    *,
    max_payload_chars: int = 200,
    stream: TextIO | None = None,
) -> None:
    """Render logs as JSON lines on stderr so stdout stays free for command output."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            RedactionProcessor(max_payload_chars),
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
    )


def get_logger(name: str = "ceo_board") -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
