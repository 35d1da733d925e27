"""Retrying HTTP transport for outbound calls.

RetryTransport wraps any httpx async transport and re-sends a request when the
inner transport fails before a response arrives. Anything that produced a
response, whatever its status, is returned untouched: deciding what a status
means is the caller's job.

Key features:
- **Transport-only retries**: Only ``httpx.TransportError`` (connect errors,
  timeouts, protocol errors) triggers another attempt
- **Exponential backoff**: Delays follow a BackoffPolicy, capped per attempt
- **Bounded attempts**: At most ``max_retries + 1`` sends per request
- **Attempt accounting**: Exhaustion raises RetriesExhaustedError with the
  number of attempts made
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

type SleepFunction = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class BackoffPolicy:
    """Exponential backoff parameters.

    The delay before retry ``n`` (1-based) is
    ``min(base_delay * multiplier ** (n - 1), max_delay)``.

    Attributes:
        max_retries: Retries after the first attempt.
        base_delay: Delay before the first retry in seconds.
        multiplier: Growth factor between consecutive delays.
        max_delay: Upper bound for a single delay in seconds.
    """

    max_retries: int = 3
    base_delay: float = 0.5
    multiplier: float = 2.0
    max_delay: float = 8.0

    @property
    def max_attempts(self) -> int:
        """Total number of sends allowed, first attempt included."""
        return self.max_retries + 1


class RetriesExhaustedError(httpx.TransportError):
    """Every attempt allowed by the policy failed at the transport level."""

    def __init__(
        self, attempts: int, last_error: BaseException, request: httpx.Request
    ) -> None:
        super().__init__(
            f"Giving up after {attempts} attempts: {last_error!r}", request=request
        )
        self.attempts = attempts
        self.last_error = last_error


def _log_retry(retry_state: RetryCallState) -> None:
    """Log a failed attempt before the backoff sleep."""
    error = retry_state.outcome.exception() if retry_state.outcome else None
    delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        "Outbound request attempt {} failed with {}, retrying in {:.2f}s",
        retry_state.attempt_number,
        type(error).__name__,
        delay,
        attempt=retry_state.attempt_number,
    )


class RetryTransport(httpx.AsyncBaseTransport):
    """Transport decorator that retries transient failures of ``inner``.

    Args:
        inner: Transport performing the actual send.
        policy: Backoff parameters.
        sleep: Coroutine used to wait between attempts.
    """

    def __init__(
        self,
        inner: httpx.AsyncBaseTransport,
        policy: BackoffPolicy | None = None,
        sleep: SleepFunction = asyncio.sleep,
    ) -> None:
        self._inner = inner
        self._policy = policy or BackoffPolicy()
        self._sleep = sleep

    @property
    def policy(self) -> BackoffPolicy:
        """Backoff parameters in use."""
        return self._policy

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        """Send ``request`` through the inner transport, retrying on failure.

        Args:
            request: The outbound request. Its body must be replayable.

        Returns:
            httpx.Response: The first response obtained, whatever its status.

        Raises:
            RetriesExhaustedError: If every attempt failed at transport level.
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self._policy.max_attempts),
            wait=wait_exponential(
                multiplier=self._policy.base_delay,
                exp_base=self._policy.multiplier,
                max=self._policy.max_delay,
            ),
            retry=retry_if_exception_type(httpx.TransportError),
            sleep=self._sleep,
            before_sleep=_log_retry,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    return await self._inner.handle_async_request(request)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            attempts = e.last_attempt.attempt_number
            logger.warning(
                "Outbound request to {} failed after {} attempts",
                request.url.host,
                attempts,
            )
            raise RetriesExhaustedError(
                attempts, last_error or e, request
            ) from last_error

        msg = "Retry loop ended without a response"
        raise RuntimeError(msg)

    async def aclose(self) -> None:
        """Close the inner transport."""
        await self._inner.aclose()
