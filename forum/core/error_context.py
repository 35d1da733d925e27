"""Sensitive data sanitization for error logging.

Error handlers and middleware pass every piece of request or exception context
through these helpers before it reaches a log sink, so that passwords, session
tokens and the moderation API key never appear in logs.

Key features:
- **Pattern matching**: Regex-based detection of sensitive field names
- **Configurable fields**: Additional sensitive fields via configuration
- **Deep sanitization**: Recursive handling of nested data structures
- **Header protection**: Special handling for sensitive HTTP headers
"""

from __future__ import annotations

import re
from functools import lru_cache
from re import Pattern
from typing import Any, Final

from forum.core.config import get_settings
from forum.core.constants import REDACTED

SanitizableValue = (
    str | int | float | bool | None | dict[str, Any] | list[Any] | tuple[Any, ...]
)

SENSITIVE_HEADERS = {
    "authorization",
    "apikey",
    "cookie",
    "set-cookie",
    "proxy-authorization",
    "x-api-key",
}

DEFAULT_SENSITIVE_PATTERN: Final[Pattern[str]] = re.compile(
    r"(password|passwd|pwd|secret|token|api[_-]?key|apikey|auth|authorization|"
    r"credential|session|cookie)",
    re.IGNORECASE,
)

# Exception attributes that are bookkeeping rather than context
_SKIPPED_ERROR_ATTRIBUTES: Final[frozenset[str]] = frozenset(
    {"stack_trace", "cause", "message", "error_code"}
)

MAX_DEPTH: Final[int] = 10


@lru_cache(maxsize=1)
def _get_sensitive_fields() -> tuple[str, ...]:
    """Get the configured sensitive fields from settings."""
    return tuple(get_settings().log_config.sensitive_fields)


def is_sensitive_field(field_name: str) -> bool:
    """Check if a field name indicates sensitive data.

    Args:
        field_name: The field name to check.

    Returns:
        bool: True if the field appears to contain sensitive data.
    """
    if DEFAULT_SENSITIVE_PATTERN.search(field_name):
        return True

    field_lower = field_name.lower()
    return any(field.lower() in field_lower for field in _get_sensitive_fields())


def is_sensitive_header(header_name: str) -> bool:
    """Check if a header name is sensitive (case-insensitive)."""
    return header_name.lower() in SENSITIVE_HEADERS


def sanitize_value(
    value: SanitizableValue, field_name: str = "", depth: int = 0
) -> SanitizableValue:
    """Sanitize a value if it appears to be sensitive.

    Nested dicts, lists and tuples are walked up to MAX_DEPTH.

    Args:
        value: The value to potentially sanitize.
        field_name: The field name for context.
        depth: Current recursion depth.

    Returns:
        SanitizableValue: Sanitized value or original if not sensitive.
    """
    if depth > MAX_DEPTH:
        return REDACTED

    if field_name and is_sensitive_field(field_name):
        return REDACTED

    if isinstance(value, dict):
        return {k: sanitize_value(v, k, depth + 1) for k, v in value.items()}

    if isinstance(value, list):
        return [sanitize_value(item, "", depth + 1) for item in value]

    if isinstance(value, tuple):
        return tuple(sanitize_value(item, "", depth + 1) for item in value)

    return value


def sanitize_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``data`` with sensitive values redacted."""
    return {key: sanitize_value(value, key) for key, value in data.items()}


def sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` with sensitive headers redacted."""
    return {k: REDACTED if is_sensitive_header(k) else v for k, v in headers.items()}


def sanitize_error_context(
    error: BaseException, context: dict[str, Any] | None = None
) -> dict[str, Any]:
    """Create sanitized error context for logging.

    Args:
        error: The exception to create context for.
        context: Additional context to include (will be sanitized).

    Returns:
        dict[str, Any]: Sanitized error context safe for logging.
    """
    error_context: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }

    if context:
        error_context.update(sanitize_dict(context))

    error_attrs = {
        k: v
        for k, v in getattr(error, "__dict__", {}).items()
        if not k.startswith("_") and k not in _SKIPPED_ERROR_ATTRIBUTES
    }
    if error_attrs:
        error_context["error_attributes"] = sanitize_dict(error_attrs)

    return error_context
