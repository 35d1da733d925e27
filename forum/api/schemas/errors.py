"""Standardized error response schemas.

Every failure the API returns, whatever its status, uses the ErrorResponse
envelope so clients can branch on ``error_code`` without parsing messages.
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class ServiceInfo(BaseModel):
    """Identification of the service that produced an error."""

    name: str = Field(..., description="Name of the service", examples=["Forum"])
    version: str = Field(..., description="Version of the service", examples=["0.1.0"])
    environment: str = Field(
        ...,
        description="Environment where the service is running",
        examples=["development", "staging", "production"],
    )


class ErrorResponse(BaseModel):
    """Standardized error response model for API errors."""

    error_code: str = Field(
        ...,
        description="Unique error code identifying the error type",
        examples=["PARSE_ERROR", "UNAUTHORIZED", "MODERATION_CLIENT_ERROR"],
    )

    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Cannot parse parameter: limit", "Unauthorized"],
    )

    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details (e.g. upstream moderation status)",
        examples=[{"status": 401, "message": "Invalid authentication credentials"}],
    )

    correlation_id: str | None = Field(
        default=None,
        description="Request correlation ID for tracing and debugging",
        examples=["550e8400-e29b-41d4-a716-446655440000"],
    )

    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="Timestamp when the error occurred (with timezone)",
    )

    severity: str | None = Field(
        default=None,
        description="Error severity level (LOW, MEDIUM, HIGH, CRITICAL)",
        examples=["LOW", "HIGH"],
    )

    service_info: ServiceInfo | None = Field(
        default=None,
        description="Information about the service that generated the error",
    )

    request_id: str | None = Field(
        default=None,
        description="Unique identifier of the failed request",
        examples=["req-550e8400-e29b-41d4-a716-446655440000"],
    )

    debug_info: dict[str, Any] | None = Field(
        default=None,
        description="Debug information (only populated in development environments)",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error_code": "MISSING_PARAMETERS",
                    "message": "Missing parameter",
                    "details": {"received": ["limit"]},
                    "correlation_id": "550e8400-e29b-41d4-a716-446655440000",
                    "request_id": "req-660e8400-e29b-41d4-a716-446655440000",
                    "timestamp": "2024-06-14T12:00:00+00:00",
                    "severity": "LOW",
                    "service_info": {
                        "name": "Forum",
                        "version": "0.1.0",
                        "environment": "production",
                    },
                },
                {
                    "error_code": "UNAUTHORIZED",
                    "message": "Unauthorized",
                    "timestamp": "2024-06-14T12:00:02+00:00",
                    "severity": "HIGH",
                },
            ]
        }
    }
