"""Session storage abstractions."""

from .session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
    SessionPayloadError,
    SessionStorage,
    SessionStoreError,
    create_session_storage,
)

__all__ = [
    "InMemorySessionStorage",
    "RedisSessionStorage",
    "SessionPayloadError",
    "SessionStorage",
    "SessionStoreError",
    "create_session_storage",
]
