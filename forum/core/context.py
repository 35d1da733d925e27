"""Request-scoped identifiers stored in context variables.

Correlation IDs may span several services, request IDs identify exactly one
inbound request. Both live in contextvars so they follow the request across
await points without being passed explicitly.
"""

import uuid
from contextvars import ContextVar

_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)


class RequestContext:
    """Async-safe accessors for the current request's identifiers."""

    @staticmethod
    def set_correlation_id(correlation_id: str) -> None:
        """Set the correlation ID for the current context."""
        _correlation_id_var.set(correlation_id)

    @staticmethod
    def get_correlation_id() -> str | None:
        """Get the correlation ID from the current context."""
        return _correlation_id_var.get()

    @staticmethod
    def set_request_id(request_id: str) -> None:
        """Set the request ID for the current context."""
        _request_id_var.set(request_id)

    @staticmethod
    def get_request_id() -> str | None:
        """Get the request ID from the current context."""
        return _request_id_var.get()

    @staticmethod
    def clear() -> None:
        """Reset all request identifiers."""
        _correlation_id_var.set(None)
        _request_id_var.set(None)


def generate_correlation_id() -> str:
    """Generate a unique correlation ID.

    Returns:
        str: A string representation of a UUID4.
    """
    return str(uuid.uuid4())


def generate_request_id() -> str:
    """Generate a unique request ID.

    Returns:
        str: A prefixed UUID4 string in format 'req-<uuid4>'.

    Examples:
        >>> generate_request_id().startswith("req-")
        True
    """
    return f"req-{uuid.uuid4()}"
