from __future__ import annotations

from collections.abc import Generator

import pytest
from sqlmodel import Session

from src.bookshelf.core.security import hash_password
from src.bookshelf.core.services import DbSessionService
from src.bookshelf.entities import Book, BookRepository, User, UserRepository
from src.bookshelf.runtime.config.config_data import (
    AppConfig,
    ConfigData,
    DatabaseConfig,
    RedisConfig,
)

DEFAULT_PASSWORD = "secret1"

__all__ = [
    "DEFAULT_PASSWORD",
    "app_config",
    "db_service",
    "db_session",
    "make_user",
    "make_book",
]


@pytest.fixture
def app_config() -> ConfigData:
    """Configuration for an isolated in-memory deployment."""
    return ConfigData(
        app=AppConfig(environment="test"),
        database=DatabaseConfig(url="sqlite://"),
        redis=RedisConfig(enabled=False),
    )


@pytest.fixture
def db_service(app_config: ConfigData) -> Generator[DbSessionService, None, None]:
    """In-memory SQLite with foreign keys enforced, schema created."""
    service = DbSessionService(app_config)
    service.create_all()
    yield service
    service.dispose()


@pytest.fixture
def db_session(db_service: DbSessionService) -> Generator[Session, None, None]:
    session = db_service.get_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db_service: DbSessionService):
    """Factory persisting a user with a real argon2 hash."""

    def _make_user(
        username: str = "alice",
        email: str = "alice@mail.com",
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        with db_service.session_scope() as session:
            return UserRepository(session).create(
                username=username, email=email, password_hash=hash_password(password)
            )

    return _make_user


@pytest.fixture
def make_book(db_service: DbSessionService):
    def _make_book(
        title: str = "Dune", author: str = "Frank Herbert", isbn: str | None = None
    ) -> Book:
        with db_service.session_scope() as session:
            return BookRepository(session).create(title=title, author=author, isbn=isbn)

    return _make_book
