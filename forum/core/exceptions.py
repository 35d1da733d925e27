"""Closed error taxonomy for consistent error handling.

This module defines every error kind the forum service can raise. The set is
closed: each kind has one ErrorCode member and one exception class, and the
boundary handlers map each class to exactly one HTTP status.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **ForumError**: Base exception with rich context and fingerprinting
- **Kind families**: input validation, persistence, credentials, moderation

Features:
- **Error fingerprinting**: Automatic grouping of similar errors
- **Stack trace capture**: Full context at error creation time
- **Exception chaining**: Preserves original cause for debugging
- **Severity levels**: Enables appropriate alerting and response

Credential errors carry fixed, generic messages so that a client can never
learn why a password check or token decode failed.
"""

import hashlib
import traceback
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for the forum service."""

    # System errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    TASK_SCHEDULING_ERROR = "TASK_SCHEDULING_ERROR"
    """A concurrently scheduled task failed outside of its own logic."""

    # Input errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    PARSE_ERROR = "PARSE_ERROR"
    """A request parameter could not be parsed."""

    MISSING_PARAMETERS = "MISSING_PARAMETERS"
    """A required request parameter is missing."""

    NOT_FOUND = "NOT_FOUND"
    """The requested route does not exist."""

    CORS_FORBIDDEN = "CORS_FORBIDDEN"
    """A cross-origin preflight was rejected by the CORS policy."""

    # Persistence errors
    DATABASE_QUERY_ERROR = "DATABASE_QUERY_ERROR"
    """The persistence layer rejected or failed the operation."""

    # Credential errors
    UNAUTHORIZED = "UNAUTHORIZED"
    """The request carries no valid session."""

    WRONG_PASSWORD = "WRONG_PASSWORD"
    """The supplied password does not match the stored hash."""

    CREDENTIAL_LIBRARY_ERROR = "CREDENTIAL_LIBRARY_ERROR"
    """A stored password hash is structurally malformed."""

    CANNOT_DECRYPT_TOKEN = "CANNOT_DECRYPT_TOKEN"
    """A session token is tampered, malformed or outside its validity window."""

    # Moderation errors
    MODERATION_TRANSPORT_ERROR = "MODERATION_TRANSPORT_ERROR"
    """The moderation service could not be reached after all retries."""

    MODERATION_CLIENT_ERROR = "MODERATION_CLIENT_ERROR"
    """The moderation service answered with a 4xx status."""

    MODERATION_SERVER_ERROR = "MODERATION_SERVER_ERROR"
    """The moderation service answered with a 5xx status."""

    MODERATION_RESPONSE_ERROR = "MODERATION_RESPONSE_ERROR"
    """The moderation service answered 2xx with an unreadable body."""


class Severity(Enum):
    """Severity levels for errors in the forum service."""

    LOW = "LOW"
    """Low severity errors that don't significantly impact functionality."""

    MEDIUM = "MEDIUM"
    """Medium severity errors that may affect some features but not critical ops."""

    HIGH = "HIGH"
    """High severity errors impacting critical functionality or data integrity."""

    CRITICAL = "CRITICAL"
    """Critical errors requiring immediate attention, may cause system failures."""


class ForumError(Exception):
    """Base exception class for all forum service exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]

        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Returns:
            str: A hash string combining the error type and raise location
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"

        for frame in relevant_frames:
            if "site-packages" not in frame and "forum/" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error occurs during normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether the error should trigger alerts (HIGH or CRITICAL)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def __str__(self) -> str:
        """Return a string representation of the exception.

        Returns:
            str: A formatted string containing the error code and message
        """
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return a detailed representation of the exception.

        Returns:
            str: Class name, error code, message, severity and context
        """
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(ForumError):
    """Exception raised when user input doesn't meet the expected format.

    Args:
        message: Description of the validation failure
        error_code: Error code (defaults to VALIDATION_ERROR)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class ParseError(ValidationError):
    """A request parameter could not be parsed into the expected type."""

    def __init__(self, parameter: str, cause: Exception | None = None) -> None:
        super().__init__(
            f"Cannot parse parameter: {parameter}",
            ErrorCode.PARSE_ERROR,
            {"parameter": parameter},
            cause,
        )


class MissingParametersError(ValidationError):
    """A required request parameter is missing."""

    def __init__(self, context: dict[str, Any] | None = None) -> None:
        super().__init__("Missing parameter", ErrorCode.MISSING_PARAMETERS, context)


class DatabaseQueryError(ForumError):
    """Exception raised when the persistence layer fails an operation.

    The underlying database error is kept as the cause for logging but is
    never part of the client-facing message.
    """

    def __init__(self, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.DATABASE_QUERY_ERROR,
            "Cannot update, invalid data",
            Severity.MEDIUM,
            cause=cause,
        )


class UnauthorizedError(ForumError):
    """Exception raised when a protected route is called without a valid session.

    The message is fixed so that callers cannot distinguish a missing header
    from an expired or forged token.
    """

    def __init__(self) -> None:
        super().__init__(ErrorCode.UNAUTHORIZED, "Unauthorized", Severity.HIGH)


class CredentialError(ForumError):
    """Base class for password and token failures."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, severity, cause=cause)


class WrongPasswordError(CredentialError):
    """The supplied password does not match the account's stored hash."""

    def __init__(self) -> None:
        super().__init__(ErrorCode.WRONG_PASSWORD, "Wrong E-Mail/Password combination")


class CredentialLibraryError(CredentialError):
    """A stored hash could not be interpreted by the hashing library."""

    def __init__(self, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.CREDENTIAL_LIBRARY_ERROR,
            "Cannot verify password",
            Severity.HIGH,
            cause,
        )


class CannotDecryptTokenError(CredentialError):
    """A token failed authentication, parsing or its validity window check."""

    def __init__(self, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.CANNOT_DECRYPT_TOKEN, "Cannot decrypt token", cause=cause
        )


class ModerationError(ForumError):
    """Base class for terminal outcomes of a moderation call."""


class ModerationTransportError(ModerationError):
    """The moderation service stayed unreachable through every retry."""

    def __init__(self, attempts: int, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.MODERATION_TRANSPORT_ERROR,
            "Moderation service unavailable",
            Severity.HIGH,
            {"attempts": attempts},
            cause,
        )
        self.attempts = attempts


class ModerationClientError(ModerationError):
    """The moderation service rejected the request (4xx)."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(
            ErrorCode.MODERATION_CLIENT_ERROR,
            f"Moderation request rejected: {status} {message}",
            Severity.MEDIUM,
            {"status": status, "message": message},
        )
        self.status = status
        self.upstream_message = message


class ModerationServerError(ModerationError):
    """The moderation service failed to handle the request (5xx)."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(
            ErrorCode.MODERATION_SERVER_ERROR,
            f"Moderation service error: {status} {message}",
            Severity.HIGH,
            {"status": status, "message": message},
        )
        self.status = status
        self.upstream_message = message


class ModerationResponseError(ModerationError):
    """The moderation service answered 2xx with a body that doesn't parse."""

    def __init__(self, cause: Exception | None = None) -> None:
        super().__init__(
            ErrorCode.MODERATION_RESPONSE_ERROR,
            "Malformed moderation response",
            Severity.HIGH,
            cause=cause,
        )


class TaskSchedulingError(ForumError):
    """A concurrent task died for a reason other than its own outcome.

    Raised when a spawned task is cancelled or fails with an exception that is
    not part of the taxonomy, so that scheduler failures are never mistaken for
    moderation results.
    """

    def __init__(self, task_name: str, cause: BaseException | None = None) -> None:
        super().__init__(
            ErrorCode.TASK_SCHEDULING_ERROR,
            f"Task {task_name} did not complete",
            Severity.CRITICAL,
            {"task": task_name},
        )
        if cause is not None:
            self.__cause__ = cause
