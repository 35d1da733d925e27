"""Structured logging built on Loguru.

The service logs through a single Loguru logger configured once per process.
Request middleware binds correlation and request identifiers with
``logger.contextualize`` so that every line emitted while a request is being
handled carries them.

Formatter types:
- **console**: Human-readable with inline context (development)
- **json**: One JSON object per line (staging, production, managed platforms)

Standard library logging (uvicorn, httpx, SQLAlchemy) is intercepted and routed
through Loguru so all output shares one format.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import Any, Final, Protocol, cast

import orjson
from loguru import logger

from forum.core.constants import REDACTED
from forum.core.error_context import is_sensitive_field


class _LoggingState:
    """Tracks whether logging has been configured for this process."""

    def __init__(self) -> None:
        self.configured = False


_state = _LoggingState()


class LogConfigProtocol(Protocol):
    """Protocol for log configuration objects."""

    @property
    def log_level(self) -> str:
        """Logging level."""
        ...

    @property
    def log_formatter_type(self) -> str | None:
        """Log formatter type."""
        ...

    @property
    def noisy_loggers(self) -> list[str]:
        """Standard library loggers to quiet down."""
        ...


class SettingsProtocol(Protocol):
    """Protocol for settings objects that setup_logging can accept."""

    @property
    def debug(self) -> bool:
        """Debug mode flag."""
        ...

    @property
    def log_config(self) -> LogConfigProtocol:
        """Log configuration."""
        ...


CORRELATION_ID_DISPLAY_LENGTH: Final[int] = 8
MAX_FIELD_VALUE_LENGTH: Final[int] = 100
PRIORITY_FIELDS: Final[tuple[str, ...]] = (
    "correlation_id",
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
)


def _escape(value: object) -> str:
    """Escape braces so Loguru doesn't treat them as format fields."""
    return str(value).replace("{", "{{").replace("}", "}}")


def _format_field(key: str, value: object) -> str:
    """Format one context field for console display.

    Args:
        key: The field name.
        value: The field value.

    Returns:
        str: ``key=value`` with sensitive values redacted and long values cut.
    """
    if key == "correlation_id":
        str_value = str(value)[:CORRELATION_ID_DISPLAY_LENGTH]
    elif key == "duration_ms":
        str_value = f"{value}ms"
    elif is_sensitive_field(key):
        str_value = REDACTED
    else:
        str_value = str(value)
        if len(str_value) > MAX_FIELD_VALUE_LENGTH:
            str_value = str_value[: MAX_FIELD_VALUE_LENGTH - 3] + "..."
    return f"{_escape(key)}={_escape(str_value)}"


def format_console_with_context(record: dict[str, Any]) -> str:
    """Format a record for the console with all context fields visible.

    Args:
        record: Loguru record to format.

    Returns:
        str: Format string for Loguru with the context already rendered.
    """
    extra = record.get("extra", {})
    context_parts = [
        f"<yellow>{_format_field(field, extra[field])}</yellow>"
        for field in PRIORITY_FIELDS
        if extra.get(field) is not None
    ]
    context_parts.extend(
        f"<dim>{_format_field(key, value)}</dim>"
        for key, value in extra.items()
        if key not in PRIORITY_FIELDS and not key.startswith("_") and value is not None
    )

    parts = [
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
        "<level>{level: <8}</level>",
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>",
    ]
    if context_parts:
        parts.append(" ".join(f"[{part}]" for part in context_parts))
    parts.append(_escape(record.get("message", "")))

    line = " | ".join(parts) + "\n"
    if record.get("exception"):
        line += "{exception}"
    return line


def serialize_for_json(record: dict[str, Any]) -> str:
    """Format a record as a single JSON line.

    Args:
        record: Loguru record to format.

    Returns:
        str: JSON-formatted log entry with newline.
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "line": record["line"],
    }

    for key, value in record.get("extra", {}).items():
        if key.startswith("_"):
            continue
        log_entry[key] = REDACTED if is_sensitive_field(key) else value

    if exc := record.get("exception"):
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return orjson.dumps(log_entry, default=str).decode("utf-8") + "\n"


LOG_FORMATTERS: dict[str, Callable[[dict[str, Any]], str]] = {
    "json": serialize_for_json,
}


class InterceptHandler(logging.Handler):
    """Redirect standard library logging records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Forward log record to Loguru.

        Args:
            record: Standard library LogRecord to forward.
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk out of the logging module so Loguru reports the real caller
        frame = logging.currentframe()
        depth = 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(settings: SettingsProtocol) -> None:
    """Configure Loguru once for the whole process.

    Args:
        settings: Application settings containing log configuration.
    """
    if _state.configured:
        return

    logger.remove()

    formatter_type = settings.log_config.log_formatter_type or "console"
    formatter = LOG_FORMATTERS.get(formatter_type)

    if formatter is None:
        logger.add(
            sys.stdout,
            format=cast("Any", format_console_with_context),
            level=settings.log_config.log_level,
            enqueue=True,
            colorize=True,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )
    else:

        def structured_sink(message: object) -> None:
            """Write one formatted record to stdout."""
            record = getattr(message, "record", None)
            if record is not None:
                sys.stdout.write(formatter(record))
                sys.stdout.flush()

        logger.add(
            structured_sink,
            level=settings.log_config.log_level,
            enqueue=True,
            diagnose=False,
            backtrace=False,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(logger_name)
        uvicorn_logger.handlers = [InterceptHandler()]
        uvicorn_logger.propagate = False

    for logger_name in settings.log_config.noisy_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger.info(
        "Logging configured with {} formatter",
        formatter_type,
        log_level=settings.log_config.log_level,
    )

    _state.configured = True
