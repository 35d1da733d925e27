"""Unit tests for the profanity filter client."""

from collections.abc import Callable

import httpx
import pytest

from forum.core.config import ModerationConfig
from forum.core.exceptions import (
    ErrorCode,
    ModerationClientError,
    ModerationResponseError,
    ModerationServerError,
    ModerationTransportError,
)
from forum.infrastructure.moderation import ModerationClient

ENDPOINT = "http://moderation.test/bad_words?censor_character=*"

type Handler = Callable[[httpx.Request], httpx.Response]


def bad_words_body(content: str, censored: str) -> dict[str, object]:
    """A success body as the filter API returns it."""
    return {
        "content": content,
        "bad_words_total": 1,
        "bad_words_list": [
            {
                "original": "damn",
                "word": "damn",
                "deviations": 0,
                "info": 2,
                "start": 0,
                "end": 4,
                "replacedLen": 4,
            }
        ],
        "censored_content": censored,
    }


def make_client(handler: Handler) -> ModerationClient:
    """Client over a MockTransport with retries that don't wait."""
    config = ModerationConfig(
        endpoint=ENDPOINT, api_key="test-key", backoff_base_seconds=0
    )
    return ModerationClient.from_config(config, transport=httpx.MockTransport(handler))


@pytest.mark.unit
@pytest.mark.timeout(5)
class TestModerationClientSuccess:
    """2xx answers."""

    async def test_returns_censored_content(self) -> None:
        """The censored text of a success body is returned."""
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=bad_words_body("damn it", "**** it"))

        client = make_client(handler)
        result = await client.check("damn it")
        await client.aclose()

        assert result == "**** it"
        request = seen[0]
        assert request.method == "POST"
        assert request.headers["apikey"] == "test-key"
        assert request.headers["content-type"].startswith("text/plain")
        assert request.content == b"damn it"
        assert request.url.params["censor_character"] == "*"

    async def test_unicode_text_is_sent_as_utf8(self) -> None:
        """Non-ASCII content survives the round trip to the filter."""
        seen: list[bytes] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.content)
            text = request.content.decode("utf-8")
            return httpx.Response(200, json=bad_words_body(text, text))

        client = make_client(handler)
        result = await client.check("ça va très bien")

        assert result == "ça va très bien"
        assert seen == ["ça va très bien".encode()]

    async def test_malformed_success_body_is_a_response_error(self) -> None:
        """A 2xx body missing required fields can't be trusted."""
        client = make_client(lambda request: httpx.Response(200, json={"ok": True}))

        with pytest.raises(ModerationResponseError) as exc_info:
            await client.check("text")

        assert exc_info.value.error_code == ErrorCode.MODERATION_RESPONSE_ERROR.value

    async def test_non_json_success_body_is_a_response_error(self) -> None:
        """A 2xx body that isn't JSON fails the same way."""
        client = make_client(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ModerationResponseError):
            await client.check("text")


@pytest.mark.unit
@pytest.mark.timeout(5)
class TestModerationClientErrors:
    """Non-2xx answers and unreachable upstream."""

    async def test_client_error_carries_upstream_message(self) -> None:
        """A 4xx JSON error is reported with its status and message."""
        client = make_client(
            lambda request: httpx.Response(
                401, json={"message": "Invalid authentication credentials"}
            )
        )

        with pytest.raises(ModerationClientError) as exc_info:
            await client.check("text")

        assert exc_info.value.status == 401
        assert exc_info.value.upstream_message == "Invalid authentication credentials"
        assert exc_info.value.context == {
            "status": 401,
            "message": "Invalid authentication credentials",
        }

    async def test_server_error_is_not_retried(self) -> None:
        """A 5xx is classified after exactly one attempt."""
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            return httpx.Response(503, json={"message": "Service Unavailable"})

        client = make_client(handler)

        with pytest.raises(ModerationServerError) as exc_info:
            await client.check("text")

        assert attempts == 1
        assert exc_info.value.status == 503
        assert exc_info.value.upstream_message == "Service Unavailable"

    async def test_non_json_error_body_falls_back_to_text(self) -> None:
        """An error body that isn't the JSON envelope is used verbatim."""
        client = make_client(lambda request: httpx.Response(429, text="slow down"))

        with pytest.raises(ModerationClientError) as exc_info:
            await client.check("text")

        assert exc_info.value.upstream_message == "slow down"

    async def test_empty_error_body_falls_back_to_reason_phrase(self) -> None:
        """With no body at all the HTTP reason phrase is the message."""
        client = make_client(lambda request: httpx.Response(404))

        with pytest.raises(ModerationClientError) as exc_info:
            await client.check("text")

        assert exc_info.value.upstream_message == "Not Found"

    async def test_redirect_is_a_server_error(self) -> None:
        """Statuses outside 2xx and 4xx are server errors."""
        client = make_client(
            lambda request: httpx.Response(302, headers={"location": "/elsewhere"})
        )

        with pytest.raises(ModerationServerError) as exc_info:
            await client.check("text")

        assert exc_info.value.status == 302

    async def test_unreachable_upstream_reports_attempts(self) -> None:
        """Four transport failures end in a transport error counting them."""
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(ModerationTransportError) as exc_info:
            await client.check("text")

        assert attempts == 4
        assert exc_info.value.attempts == 4
        assert exc_info.value.context == {"attempts": 4}

    async def test_transient_failure_then_success(self) -> None:
        """A failure followed by an answer is invisible to the caller."""
        attempts = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise httpx.ReadTimeout("timed out", request=request)
            return httpx.Response(200, json=bad_words_body("text", "text"))

        client = make_client(handler)

        assert await client.check("text") == "text"
        assert attempts == 2

    async def test_every_attempt_carries_the_configured_timeout(self) -> None:
        """The timeout bounds each attempt, retries included."""
        timeouts: list[dict[str, float | None]] = []

        def handler(request: httpx.Request) -> httpx.Response:
            timeouts.append(request.extensions["timeout"])
            if len(timeouts) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=bad_words_body("text", "text"))

        config = ModerationConfig(
            endpoint=ENDPOINT,
            api_key="test-key",  # type: ignore[arg-type]
            timeout_seconds=2.5,
            backoff_base_seconds=0,
        )
        client = ModerationClient.from_config(
            config, transport=httpx.MockTransport(handler)
        )

        assert await client.check("text") == "text"
        assert client._http.timeout == httpx.Timeout(2.5)
        assert timeouts == [httpx.Timeout(2.5).as_dict()] * 3
