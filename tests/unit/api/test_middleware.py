"""Unit tests for the request middleware stack."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI
from pytest_mock import MockerFixture

from forum.api.middleware.cors import CORSPolicyMiddleware
from forum.api.middleware.request_context import RequestContextMiddleware
from forum.api.middleware.request_logging import RequestLoggingMiddleware
from forum.core.config import LogConfig
from forum.core.context import RequestContext


@pytest.fixture
def middleware_app() -> FastAPI:
    """App with the three middleware in production order."""
    app = FastAPI()

    @app.get("/echo")
    async def echo() -> dict[str, str | None]:
        return {
            "correlation_id": RequestContext.get_correlation_id(),
            "request_id": RequestContext.get_request_id(),
        }

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy"}

    app.add_middleware(
        CORSPolicyMiddleware,
        allow_origins=["http://frontend.test"],
        allow_methods=["GET", "POST"],
        allow_headers=["content-type"],
    )
    app.add_middleware(
        RequestLoggingMiddleware,
        log_config=LogConfig(slow_request_threshold_ms=1),
    )
    app.add_middleware(RequestContextMiddleware)
    return app


@pytest.fixture
async def client(middleware_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    """Client for the middleware app."""
    transport = httpx.ASGITransport(app=middleware_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.mark.unit
@pytest.mark.timeout(5)
class TestRequestContextMiddleware:
    """Correlation and request identifiers."""

    async def test_ids_are_generated(self, client: httpx.AsyncClient) -> None:
        """Both IDs are available to handlers and echoed on the response."""
        response = await client.get("/echo")

        body = response.json()
        assert body["correlation_id"] == response.headers["X-Correlation-ID"]
        assert body["request_id"] == response.headers["X-Request-ID"]

    async def test_correlation_id_is_propagated(
        self, client: httpx.AsyncClient
    ) -> None:
        """A caller's correlation ID is reused, the request ID never is."""
        response = await client.get(
            "/echo",
            headers={"X-Correlation-ID": "upstream-1", "X-Request-ID": "spoofed"},
        )

        assert response.json()["correlation_id"] == "upstream-1"
        assert response.json()["request_id"] != "spoofed"


@pytest.mark.unit
@pytest.mark.timeout(5)
class TestRequestLoggingMiddleware:
    """Request log events."""

    async def test_start_and_completion_are_logged(
        self, client: httpx.AsyncClient, mocker: MockerFixture
    ) -> None:
        """Each request logs a start and a completion line."""
        mock_logger = mocker.patch("forum.api.middleware.request_logging.logger")

        await client.get("/echo", params={"token": "abc", "page": "2"})

        messages = [c.args[0] for c in mock_logger.info.call_args_list]
        assert messages == ["Request started", "Request completed"]
        started = mock_logger.info.call_args_list[0]
        assert started.kwargs["query_params"] == {"token": "[REDACTED]", "page": "2"}

    async def test_excluded_paths_are_not_logged(
        self, client: httpx.AsyncClient, mocker: MockerFixture
    ) -> None:
        """Health checks stay out of the request log."""
        mock_logger = mocker.patch("forum.api.middleware.request_logging.logger")

        await client.get("/health")

        mock_logger.info.assert_not_called()

    async def test_slow_requests_are_flagged(
        self, client: httpx.AsyncClient, mocker: MockerFixture
    ) -> None:
        """Requests over the threshold emit a warning."""
        mock_logger = mocker.patch("forum.api.middleware.request_logging.logger")
        mocker.patch(
            "forum.api.middleware.request_logging._elapsed_ms", return_value=500.0
        )

        await client.get("/echo")

        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.kwargs["duration_ms"] == 500.0


@pytest.mark.unit
@pytest.mark.timeout(5)
class TestCORSPolicyMiddleware:
    """Preflight handling."""

    async def test_rejected_preflight_is_403(
        self, client: httpx.AsyncClient, mocker: MockerFixture
    ) -> None:
        """A foreign origin gets a logged 403 error envelope."""
        mock_logger = mocker.patch("forum.api.middleware.cors.logger")

        response = await client.options(
            "/echo",
            headers={
                "Origin": "http://evil.test",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 403
        body = response.json()
        assert body["error_code"] == "CORS_FORBIDDEN"
        assert body["details"] == {"reason": "Disallowed CORS origin"}
        assert body["request_id"] == response.headers["X-Request-ID"]
        mock_logger.error.assert_called_once()

    async def test_allowed_preflight_passes_through(
        self, client: httpx.AsyncClient
    ) -> None:
        """An allowed preflight keeps Starlette's answer."""
        response = await client.options(
            "/echo",
            headers={
                "Origin": "http://frontend.test",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == (
            "http://frontend.test"
        )

    async def test_simple_request_gets_cors_headers(
        self, client: httpx.AsyncClient
    ) -> None:
        """Non-preflight requests from allowed origins are annotated."""
        response = await client.get("/echo", headers={"Origin": "http://frontend.test"})

        assert response.headers["access-control-allow-origin"] == (
            "http://frontend.test"
        )
