"""
Logging configuration for opensdk.

All loggers live under the ``opensdk`` namespace and write to stderr.
Two output formats are available, selected with the ``log-format`` key
(``OPENSDK_LOG_FORMAT``):

- ``text``: human-readable lines with the CLI request id
- ``json``: newline-delimited JSON for log aggregation

Records logged through :class:`opensdk.cli.logging.CLILogger` carry a
``cli_context`` mapping (request id plus redacted fields) which both
formatters render.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

__all__ = [
    "LOG_FORMAT_JSON",
    "LOG_FORMAT_TEXT",
    "LOG_FORMATS",
    "HumanReadableFormatter",
    "StderrHandler",
    "StructuredFormatter",
    "setup_logging",
]

LOGGER_NAME = "opensdk"

LOG_FORMAT_TEXT = "text"
LOG_FORMAT_JSON = "json"
LOG_FORMATS = (LOG_FORMAT_TEXT, LOG_FORMAT_JSON)


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    context = getattr(record, "cli_context", None)
    return dict(context) if isinstance(context, dict) else {}


class StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is at emit time.

    Test runners and embedders swap ``sys.stderr`` between invocations;
    a handler holding on to the original stream would write to (or flush)
    a closed file.
    """

    @property
    def stream(self) -> TextIO:  # type: ignore[override]
        return sys.stderr

    @stream.setter
    def stream(self, value: TextIO) -> None:
        pass


class StructuredFormatter(logging.Formatter):
    """JSON log formatter.

    Example output:
        {"timestamp":"2024-01-15T10:30:45.123+00:00","level":"DEBUG",
         "logger":"opensdk.cli","message":"CLI command started: version",
         "request_id":"cli_a1b2c3d4e5f6","context":{"command":"version"}}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _record_context(record)
        request_id = context.pop("request_id", "")
        if request_id:
            log_entry["request_id"] = request_id
        if context:
            log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, separators=(",", ":"), default=str)


class HumanReadableFormatter(logging.Formatter):
    """Human-readable formatter with a request id prefix.

    Produces logs in format:
        2024-01-15 10:30:45 [LEVEL] [cli_a1b2c3] opensdk.cli: message key=value
    """

    def format(self, record: logging.LogRecord) -> str:
        parts = [
            datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname}]",
        ]

        context = _record_context(record)
        request_id = context.pop("request_id", "")
        if request_id:
            parts.append(f"[{request_id}]")

        parts.append(f"{record.name}:")
        parts.append(record.getMessage())
        parts.extend(f"{key}={value}" for key, value in context.items() if value is not None)

        result = " ".join(parts)
        if record.exc_info:
            result += "\n" + self.formatException(record.exc_info)
        return result


def setup_logging(level: str = "WARNING", log_format: Optional[str] = None) -> logging.Logger:
    """Configure the ``opensdk`` logger namespace.

    Any handler installed by an earlier call is replaced, so calling this
    once per invocation is safe.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR).
        log_format: ``text`` (default) or ``json``.

    Returns:
        The configured ``opensdk`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))

    for handler in list(logger.handlers):
        if getattr(handler, "_opensdk_handler", False):
            logger.removeHandler(handler)

    handler = StderrHandler()
    if log_format == LOG_FORMAT_JSON:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(HumanReadableFormatter())
    handler._opensdk_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)

    return logger
