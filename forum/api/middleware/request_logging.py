"""HTTP request/response logging with performance monitoring.

Features:
- **Structured logging**: Start, completion and failure events per request
- **Performance tracking**: Request duration and slow request detection
- **Client identification**: IP extraction with proxy header support
- **Exclusion patterns**: Configurable path exclusion (e.g., health checks)
- **Error handling**: Logs failures while preserving exception propagation

Query parameters are logged; headers and bodies are not, so credentials and
tokens never reach the logs from here.
"""

import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from forum.api.constants import USER_AGENT_MAX_LENGTH
from forum.core.config import LogConfig, get_settings
from forum.core.constants import MILLISECONDS_PER_SECOND
from forum.core.error_context import sanitize_dict


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * MILLISECONDS_PER_SECOND


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging HTTP requests and responses.

    Args:
        app: The ASGI application.
        log_config: Logging configuration.
    """

    def __init__(self, app: ASGIApp, *, log_config: LogConfig) -> None:
        super().__init__(app)
        self.log_config = log_config
        self.excluded_paths = set(log_config.excluded_paths)
        self.settings = get_settings()

    def _get_client_ip(self, request: Request) -> str:
        """Extract real client IP considering proxy headers.

        Args:
            request: The incoming request.

        Returns:
            str: The client IP address.
        """
        # Proxy headers are only trusted behind the production load balancer
        if self.settings.environment == "production":
            forwarded_for = request.headers.get("x-forwarded-for")
            if forwarded_for:
                return forwarded_for.split(",")[0].strip()

            real_ip = request.headers.get("x-real-ip")
            if real_ip:
                return real_ip.strip()

        if request.client:
            return request.client.host
        return "unknown"

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Process the request and log details.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: The response from the application.

        Raises:
            Exception: Any exception raised by the application is re-raised
                after logging.
        """
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        user_agent = request.headers.get("user-agent", "")[:USER_AGENT_MAX_LENGTH]

        with logger.contextualize(
            method=request.method,
            path=request.url.path,
            client_host=self._get_client_ip(request),
            user_agent=user_agent or "unknown",
        ):
            logger.info(
                "Request started",
                query_params=(
                    sanitize_dict(dict(request.query_params))
                    if request.query_params
                    else None
                ),
            )

            start_time = time.perf_counter()

            try:
                response = await call_next(request)
            except Exception as exc:
                duration_ms = _elapsed_ms(start_time)
                logger.error(
                    "Request failed",
                    duration_ms=round(duration_ms, 2),
                    error_type=type(exc).__name__,
                )
                raise

            duration_ms = _elapsed_ms(start_time)
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round(duration_ms, 2),
            )

            if duration_ms > self.log_config.slow_request_threshold_ms:
                logger.warning(
                    "Slow request detected",
                    duration_ms=round(duration_ms, 2),
                    threshold_ms=self.log_config.slow_request_threshold_ms,
                )

            return response
