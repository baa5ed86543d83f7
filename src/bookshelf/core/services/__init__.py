"""Core services exports."""

# Session Storage for testing
from src.bookshelf.core.storage.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
)

# Database Service
from .database.db_session import DbSessionService

# Redis Service
from .redis_service import RedisService

# Session Services
from .session.session_authenticator import SessionAuthenticator

__all__ = [
    # Session Services
    "SessionAuthenticator",
    # Session Storage for testing
    "InMemorySessionStorage",
    "RedisSessionStorage",
    # Infrastructure Services
    "DbSessionService",
    "RedisService",
]
