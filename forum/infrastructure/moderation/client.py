"""Client for the external profanity filter.

The client sends one plain-text POST per check through a RetryTransport, so
connection failures and timeouts are retried below it while every response
that does arrive is classified exactly once:

- 2xx: the body must parse as a BadWordsResponse, its censored text is returned
- 4xx: ModerationClientError with the upstream status and message
- anything else: ModerationServerError with the upstream status and message
- no response after all retries: ModerationTransportError
"""

import httpx
from loguru import logger
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from forum.core.config import ModerationConfig
from forum.core.exceptions import (
    ModerationClientError,
    ModerationResponseError,
    ModerationServerError,
    ModerationTransportError,
)
from forum.infrastructure.moderation.retry import (
    BackoffPolicy,
    RetriesExhaustedError,
    RetryTransport,
)
from forum.infrastructure.moderation.schemas import APIErrorResponse, BadWordsResponse

API_KEY_HEADER = "apikey"


def _error_message(response: httpx.Response) -> str:
    """Extract the upstream error message, falling back to the raw body."""
    try:
        return APIErrorResponse.model_validate_json(response.content).message
    except PydanticValidationError:
        return response.text or response.reason_phrase


class ModerationClient:
    """Censor text through the bad words filtering API.

    Args:
        endpoint: Full URL of the filter endpoint.
        api_key: Key sent in the ``apikey`` header.
        http_client: Client whose transport carries the retry policy.
    """

    def __init__(
        self, endpoint: str, api_key: SecretStr, http_client: httpx.AsyncClient
    ) -> None:
        self._endpoint = endpoint
        self._api_key = api_key
        self._http = http_client

    @classmethod
    def from_config(
        cls,
        config: ModerationConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "ModerationClient":
        """Build a client with retries and per-attempt timeouts from settings.

        Args:
            config: Moderation section of the settings.
            transport: Inner transport to wrap. Defaults to a real HTTP one.

        Returns:
            ModerationClient: Ready-to-use client.
        """
        policy = BackoffPolicy(
            max_retries=config.max_retries,
            base_delay=config.backoff_base_seconds,
            multiplier=config.backoff_multiplier,
            max_delay=config.backoff_max_seconds,
        )
        http_client = httpx.AsyncClient(
            transport=RetryTransport(transport or httpx.AsyncHTTPTransport(), policy),
            timeout=httpx.Timeout(config.timeout_seconds),
        )
        return cls(config.endpoint, config.api_key, http_client)

    async def check(self, text: str) -> str:
        """Return ``text`` with profanity censored.

        Args:
            text: Content to filter.

        Returns:
            str: The censored content.

        Raises:
            ModerationTransportError: If the service stayed unreachable.
            ModerationClientError: If the service answered 4xx.
            ModerationServerError: If the service answered with another
                non-2xx status.
            ModerationResponseError: If a 2xx body doesn't parse.
        """
        try:
            response = await self._http.post(
                self._endpoint,
                content=text.encode("utf-8"),
                headers={
                    API_KEY_HEADER: self._api_key.get_secret_value(),
                    "content-type": "text/plain; charset=utf-8",
                },
            )
        except RetriesExhaustedError as e:
            raise ModerationTransportError(e.attempts, cause=e) from e
        except httpx.TransportError as e:
            raise ModerationTransportError(1, cause=e) from e

        logger.debug(
            "Moderation service answered {}",
            response.status_code,
            status_code=response.status_code,
        )
        return self._classify(response)

    @staticmethod
    def _classify(response: httpx.Response) -> str:
        if response.is_success:
            try:
                body = BadWordsResponse.model_validate_json(response.content)
            except PydanticValidationError as e:
                raise ModerationResponseError(cause=e) from e
            return body.censored_content

        message = _error_message(response)
        if response.is_client_error:
            raise ModerationClientError(response.status_code, message)
        raise ModerationServerError(response.status_code, message)

    async def aclose(self) -> None:
        """Release pooled connections."""
        await self._http.aclose()
