"""Fixtures for API tests running the full middleware stack in process.

The application is built by ``create_app``; only its edges are replaced:
the store by an in-memory one, the clock by a frozen one and the filter
API by a MockTransport under the real retrying ModerationClient.
"""

from collections.abc import AsyncGenerator
from datetime import datetime

import httpx
import pytest
from argon2 import profiles
from fastapi import FastAPI

from forum.api.dependencies import (
    get_moderation_client,
    get_now,
    get_password_service,
)
from forum.api.main import create_app
from forum.core.config import ModerationConfig, Settings
from forum.infrastructure.moderation import ModerationClient
from forum.infrastructure.store import get_store
from forum.services.passwords import PasswordService
from tests.integration.fakes import FakeModerationAPI, FrozenClock, InMemoryStore

MODERATION_API_KEY = "integration-key"


@pytest.fixture
def memory_store() -> InMemoryStore:
    """Empty in-memory store."""
    return InMemoryStore()


@pytest.fixture
def clock(issued_at: datetime) -> FrozenClock:
    """Clock frozen at the token issue time."""
    return FrozenClock(issued_at)


@pytest.fixture
def moderation_api() -> FakeModerationAPI:
    """Upstream filter accepting the integration API key."""
    return FakeModerationAPI(MODERATION_API_KEY)


@pytest.fixture
async def moderation_client(
    moderation_api: FakeModerationAPI,
) -> AsyncGenerator[ModerationClient]:
    """Real client with no backoff delay talking to the fake upstream."""
    config = ModerationConfig(
        endpoint="http://moderation.test/bad_words?censor_character=*",
        api_key=MODERATION_API_KEY,  # type: ignore[arg-type]
        backoff_base_seconds=0,
    )
    client = ModerationClient.from_config(
        config, transport=httpx.MockTransport(moderation_api)
    )
    yield client
    await client.aclose()


@pytest.fixture
def app(
    memory_store: InMemoryStore,
    clock: FrozenClock,
    moderation_client: ModerationClient,
) -> FastAPI:
    """Application with its outer dependencies replaced."""
    application = create_app(Settings())
    passwords = PasswordService(profiles.CHEAPEST)

    application.dependency_overrides[get_store] = lambda: memory_store
    application.dependency_overrides[get_now] = lambda: clock.now
    application.dependency_overrides[get_moderation_client] = lambda: (
        moderation_client
    )
    application.dependency_overrides[get_password_service] = lambda: passwords
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient]:
    """HTTP client bound to the app. Lifespan is not run."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def auth_headers(client: httpx.AsyncClient) -> dict[str, str]:
    """Authorization header of a freshly registered and logged-in account."""
    credentials = {"email": "ada@example.com", "password": "correct horse"}
    await client.post("/registration", json=credentials)
    response = await client.post("/login", json=credentials)
    return {"Authorization": f"Bearer {response.json()}"}
