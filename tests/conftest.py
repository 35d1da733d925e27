"""Root conftest.py for the forum test suite.

This file contains project-wide fixtures and pytest configuration.
"""

import os
from collections.abc import Generator
from datetime import UTC, datetime

import pytest
from argon2 import profiles

from forum.core.config import get_settings
from forum.core.context import RequestContext
from forum.core.error_context import _get_sensitive_fields
from forum.services.passwords import PasswordService
from forum.services.tokens import TokenCodec


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests that test individual components in isolation"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that test multiple components"
    )


@pytest.fixture(autouse=True)
def clean_lru_cache() -> Generator[None]:
    """Clear cached settings before and after each test."""
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()
    yield
    get_settings.cache_clear()
    _get_sensitive_fields.cache_clear()


@pytest.fixture(autouse=True)
def clean_request_context() -> Generator[None]:
    """Reset correlation and request IDs around each test."""
    RequestContext.clear()
    yield
    RequestContext.clear()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Drop application env vars so tests see the model defaults."""
    env_prefixes = (
        "APP_",
        "API_",
        "ENVIRONMENT",
        "DEBUG",
        "LOG_CONFIG__",
        "DATABASE_CONFIG__",
        "TOKEN_CONFIG__",
        "MODERATION_CONFIG__",
        "CORS_CONFIG__",
    )
    for key in list(os.environ):
        if key.upper().startswith(env_prefixes):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def issued_at() -> datetime:
    """A fixed, timezone-aware instant to issue tokens at."""
    return datetime(2024, 6, 14, 12, 0, tzinfo=UTC)


@pytest.fixture
def token_codec() -> TokenCodec:
    """Token codec with a test-only key."""
    return TokenCodec(b"k" * 32)


@pytest.fixture
def password_service() -> PasswordService:
    """Password service with the cheapest Argon2 parameters, for speed."""
    return PasswordService(profiles.CHEAPEST)
