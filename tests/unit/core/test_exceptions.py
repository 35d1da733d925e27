"""Unit tests for the forum exception taxonomy."""

import pytest

from forum.core.exceptions import (
    CannotDecryptTokenError,
    CredentialError,
    CredentialLibraryError,
    DatabaseQueryError,
    ErrorCode,
    ForumError,
    MissingParametersError,
    ModerationClientError,
    ModerationError,
    ModerationServerError,
    ModerationTransportError,
    ParseError,
    Severity,
    TaskSchedulingError,
    UnauthorizedError,
    ValidationError,
    WrongPasswordError,
)


@pytest.mark.unit
class TestForumError:
    """Behaviour shared by every error."""

    def test_string_forms(self) -> None:
        """str() shows code and message, repr() adds severity and context."""
        error = ForumError(ErrorCode.INTERNAL_ERROR, "boom", context={"a": 1})

        assert str(error) == "[INTERNAL_ERROR] boom"
        assert "severity=MEDIUM" in repr(error)
        assert "context={'a': 1}" in repr(error)

    def test_cause_is_chained(self) -> None:
        """A given cause becomes __cause__."""
        cause = ValueError("bad")
        error = DatabaseQueryError(cause=cause)

        assert error.cause is cause
        assert error.__cause__ is cause

    def test_fingerprint_is_stable_for_same_site(self) -> None:
        """Errors created at the same place group together."""
        fingerprints = {ParseError("limit").fingerprint for _ in range(3)}

        assert len(fingerprints) == 1

    @pytest.mark.parametrize(
        ("error", "expected", "alert"),
        [
            (ParseError("offset"), True, False),
            (WrongPasswordError(), True, False),
            (UnauthorizedError(), False, True),
            (TaskSchedulingError("moderate-title"), False, True),
        ],
    )
    def test_expected_and_alerting(
        self, error: ForumError, expected: bool, alert: bool
    ) -> None:
        """Severity decides whether an error is expected or alerting."""
        assert error.is_expected is expected
        assert error.should_alert is alert


@pytest.mark.unit
class TestTaxonomy:
    """Messages, codes and hierarchy of the concrete errors."""

    def test_validation_errors(self) -> None:
        """Parsing failures name the parameter."""
        error = ParseError("limit")

        assert isinstance(error, ValidationError)
        assert error.message == "Cannot parse parameter: limit"
        assert error.severity is Severity.LOW
        assert MissingParametersError().error_code == "MISSING_PARAMETERS"

    def test_credential_errors(self) -> None:
        """Password and token failures share a base class."""
        for error in (
            WrongPasswordError(),
            CredentialLibraryError(),
            CannotDecryptTokenError(),
        ):
            assert isinstance(error, CredentialError)

        assert WrongPasswordError().message == "Wrong E-Mail/Password combination"

    def test_unauthorized_message_is_fixed(self) -> None:
        """No variant of UnauthorizedError explains itself."""
        assert UnauthorizedError().message == "Unauthorized"
        assert UnauthorizedError().context == {}

    def test_moderation_errors(self) -> None:
        """Upstream status and message are kept as attributes and context."""
        client = ModerationClientError(401, "Invalid API key")
        server = ModerationServerError(502, "Bad Gateway")
        transport = ModerationTransportError(4)

        assert isinstance(client, ModerationError)
        assert client.status == 401
        assert client.context == {"status": 401, "message": "Invalid API key"}
        assert server.upstream_message == "Bad Gateway"
        assert transport.attempts == 4
        assert transport.should_alert

    def test_task_scheduling_error(self) -> None:
        """The task name is recorded and the error is critical."""
        cause = RuntimeError("loop closed")
        error = TaskSchedulingError("moderate-content", cause)

        assert error.context == {"task": "moderate-content"}
        assert error.severity is Severity.CRITICAL
        assert error.__cause__ is cause
        assert not isinstance(error, ModerationError)
