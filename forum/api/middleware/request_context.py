"""Request context middleware for correlation and request identifiers.

Key features:
- **Correlation ID propagation**: Taken from ``X-Correlation-ID`` or generated
- **Request ID**: Generated for every request, never taken from the client
- **Context variables**: Both IDs stored in RequestContext for error handlers
- **Loguru integration**: Both IDs bound to every log line of the request
- **Response headers**: Both IDs echoed back for client-side tracing
"""

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from forum.api.constants import CORRELATION_ID_HEADER, REQUEST_ID_HEADER
from forum.core.context import (
    RequestContext,
    generate_correlation_id,
    generate_request_id,
)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to manage request context and correlation IDs."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        """Process the request with context management.

        Args:
            request: The incoming request.
            call_next: The next middleware/endpoint.

        Returns:
            Response: Response with correlation and request ID headers.
        """
        correlation_id = (
            request.headers.get(CORRELATION_ID_HEADER) or generate_correlation_id()
        )
        request_id = generate_request_id()

        RequestContext.set_correlation_id(correlation_id)
        RequestContext.set_request_id(request_id)

        with logger.contextualize(correlation_id=correlation_id, request_id=request_id):
            response = await call_next(request)
            response.headers[CORRELATION_ID_HEADER] = correlation_id
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
