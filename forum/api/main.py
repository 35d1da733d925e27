"""FastAPI application initialization and configuration module.

This module serves as the main entry point for the Forum API application.
It handles:
- Application lifecycle management (startup/shutdown)
- Creation of the long-lived collaborators kept on ``app.state``
- Middleware registration in the correct order
- Exception handler registration
- Route registration and the health check endpoint

Middleware are executed in reverse order of registration, so the last one
added is the first to see a request.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, cast

from fastapi import FastAPI
from loguru import logger

from forum.api.middleware.cors import CORSPolicyMiddleware
from forum.api.middleware.error_handler import register_exception_handlers
from forum.api.middleware.request_context import RequestContextMiddleware
from forum.api.middleware.request_logging import RequestLoggingMiddleware
from forum.api.routes import answers, authentication, questions
from forum.api.utils.responses import ORJSONResponse
from forum.core.config import Settings, get_settings
from forum.core.logging import setup_logging
from forum.infrastructure.database.session import (
    check_database_connection,
    close_database,
    create_tables,
    get_engine,
)
from forum.infrastructure.moderation import ModerationClient
from forum.services.passwords import PasswordService
from forum.services.tokens import TokenCodec


@asynccontextmanager
async def lifespan(app_instance: FastAPI) -> AsyncGenerator[None]:
    """Manage application lifespan events.

    Args:
        app_instance: The FastAPI application instance.

    Yields:
        None: Nothing is yielded, this is just a lifespan context.

    Raises:
        RuntimeError: If database connection fails during startup.
    """
    is_healthy, error_msg = await check_database_connection()

    if is_healthy:
        logger.info("Database connection successful")
    else:
        logger.error("Database connection failed during startup: {}", error_msg)
        msg = f"Database connection failed: {error_msg}"
        raise RuntimeError(msg)

    await create_tables()

    logger.info(
        "Application startup complete - {} v{}",
        app_instance.title,
        app_instance.version,
    )

    yield

    logger.info("Application shutdown initiated")
    await app_instance.state.moderation_client.aclose()
    await close_database()
    logger.info("Application shutdown complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings instance. If not provided, will use get_settings().

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)

    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        docs_url=settings.docs_url,
        redoc_url=settings.redoc_url,
        openapi_url=settings.openapi_url,
        default_response_class=ORJSONResponse,
        lifespan=lifespan,
    )

    application.state.token_codec = TokenCodec.from_config(settings.token_config)
    application.state.password_service = PasswordService()
    application.state.moderation_client = ModerationClient.from_config(
        settings.moderation_config
    )

    # Register exception handlers BEFORE middleware
    register_exception_handlers(application)

    # 3. CORS policy (innermost, so rejections carry the request context)
    application.add_middleware(
        CORSPolicyMiddleware,
        allow_origins=settings.cors_config.allow_origins,
        allow_methods=settings.cors_config.allow_methods,
        allow_headers=settings.cors_config.allow_headers,
    )

    # 2. Request logging middleware (logs requests/responses)
    application.add_middleware(RequestLoggingMiddleware, log_config=settings.log_config)

    # 1. Request context middleware (creates correlation and request IDs)
    application.add_middleware(RequestContextMiddleware)

    application.include_router(questions.router)
    application.include_router(answers.router)
    application.include_router(authentication.router)

    @application.get("/health")
    async def health() -> dict[str, object]:
        """Health check endpoint for monitoring and container orchestration.

        Returns:
            dict[str, object]: A dictionary with status and database connectivity.
        """
        health_status: dict[str, object] = {"status": "healthy", "database": False}

        is_healthy, error_msg = await check_database_connection()
        health_status["database"] = is_healthy

        if is_healthy:
            pool = get_engine().pool
            logger.bind(
                metric_type="db.pool.health",
                checked_out=cast("Any", pool).checkedout(),
                size=cast("Any", pool).size(),
            ).info("Database pool health check")
        else:
            # Reported as degraded rather than failing the probe
            logger.warning("Database health check failed: {}", error_msg)
            health_status["status"] = "degraded"

        return health_status

    return application


app = create_app()
