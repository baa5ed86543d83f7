from __future__ import annotations

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.bookshelf.api.http.app import create_app
from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.core.services import (
    DbSessionService,
    InMemorySessionStorage,
    RedisService,
    SessionAuthenticator,
)
from src.bookshelf.core.storage import SessionStorage
from src.bookshelf.runtime.config.config_data import ConfigData

from .core import DEFAULT_PASSWORD

__all__ = [
    "FakeClock",
    "fake_clock",
    "session_storage",
    "session_authenticator",
    "build_test_dependencies",
    "app_dependencies",
    "app",
    "client",
    "login",
    "auth_headers",
]


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_storage(fake_clock: FakeClock) -> InMemorySessionStorage:
    return InMemorySessionStorage(clock=fake_clock)


@pytest.fixture
def session_authenticator(session_storage: InMemorySessionStorage) -> SessionAuthenticator:
    return SessionAuthenticator(session_storage, ttl_seconds=3600)


def build_test_dependencies(
    config: ConfigData,
    db_service: DbSessionService,
    storage: SessionStorage,
    anonymous_on_store_error: bool = False,
) -> ApplicationDependencies:
    return ApplicationDependencies(
        config=config,
        database_service=db_service,
        redis_service=RedisService(config),
        session_storage=storage,
        session_authenticator=SessionAuthenticator(
            storage,
            ttl_seconds=config.app.session_max_age,
            treat_store_errors_as_anonymous=anonymous_on_store_error,
        ),
    )


@pytest.fixture
def app_dependencies(
    app_config: ConfigData,
    db_service: DbSessionService,
    session_storage: InMemorySessionStorage,
) -> ApplicationDependencies:
    return build_test_dependencies(app_config, db_service, session_storage)


@pytest.fixture
def app(app_dependencies: ApplicationDependencies) -> FastAPI:
    return create_app(app_dependencies)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def login(client: TestClient):
    """Log in through the API and return the bearer token."""

    def _login(email: str = "alice@mail.com", password: str = DEFAULT_PASSWORD) -> str:
        response = client.post(
            "/api/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _login


@pytest.fixture
def auth_headers(make_user, login) -> dict[str, str]:
    """Authorization headers for a freshly registered 'alice'."""
    make_user()
    return {"Authorization": f"Bearer {login()}"}
