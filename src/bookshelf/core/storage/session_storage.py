"""Session storage interface and implementations.

Provides a unified interface for storing session records with a per-key
time-to-live, backed by Redis or, for development and tests, process memory.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError
from redis.exceptions import RedisError

if TYPE_CHECKING:
    from src.bookshelf.core.services.redis_service import RedisService
    from src.bookshelf.runtime.config.config_data import ConfigData

T = TypeVar("T", bound=BaseModel)


class SessionStoreError(Exception):
    """The storage backend failed to execute an operation."""


class SessionPayloadError(SessionStoreError):
    """A stored value could not be deserialized into the requested model."""


class SessionStorage(ABC):
    """Abstract interface for session storage backends.

    Each operation touches a single key and is atomic on its own.
    """

    @abstractmethod
    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Store a value with TTL.

        Args:
            key: Storage key
            value: Session data (Pydantic model, serialized by alias)
            ttl_seconds: Time to live in seconds
        """

    @abstractmethod
    async def get(self, key: str, model_class: type[T]) -> T | None:
        """Retrieve a value.

        Returns:
            The deserialized model, or None if the key is missing or expired

        Raises:
            SessionPayloadError: If the stored payload does not fit ``model_class``
            SessionStoreError: If the backend fails
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a key. Deleting a missing key is a no-op."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if a key exists and has not expired."""

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Clean up expired entries.

        Returns:
            Number of entries removed
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if storage backend is available."""


class InMemorySessionStorage(SessionStorage):
    """In-memory session storage with TTL support."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._data: dict[str, dict[str, Any]] = {}

    def _live_entry(self, key: str) -> dict[str, Any] | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        if self._clock() >= entry["expires_at"]:
            del self._data[key]
            return None
        return entry

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Store value in memory with an absolute expiry deadline."""
        self._data[key] = {
            "data": value.model_dump_json(by_alias=True),
            "expires_at": self._clock() + ttl_seconds,
        }

    async def get(self, key: str, model_class: type[T]) -> T | None:
        """Retrieve value from memory if not expired."""
        entry = self._live_entry(key)
        if entry is None:
            return None

        try:
            return model_class.model_validate_json(entry["data"])
        except ValidationError as e:
            raise SessionPayloadError(f"Malformed payload under {key!r}") from e

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def cleanup_expired(self) -> int:
        """Remove expired entries from memory."""
        now = self._clock()
        expired_keys = [
            key for key, entry in self._data.items() if now >= entry["expires_at"]
        ]

        for key in expired_keys:
            del self._data[key]

        return len(expired_keys)

    def is_available(self) -> bool:
        """In-memory storage is always available."""
        return True


class RedisSessionStorage(SessionStorage):
    """Redis-based session storage; expiry is delegated to Redis key TTLs."""

    def __init__(self, redis_client):
        self._redis = redis_client
        self._available = True

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Store value in Redis with TTL."""
        try:
            await self._redis.setex(key, ttl_seconds, value.model_dump_json(by_alias=True))
            self._available = True
        except RedisError as e:
            self._available = False
            raise SessionStoreError(f"Redis set failed: {e}") from e

    async def get(self, key: str, model_class: type[T]) -> T | None:
        """Retrieve value from Redis."""
        try:
            data = await self._redis.get(key)
            self._available = True
        except RedisError as e:
            self._available = False
            raise SessionStoreError(f"Redis get failed: {e}") from e

        if data is None:
            return None

        # Decode if bytes
        if isinstance(data, bytes):
            data = data.decode("utf-8", errors="replace")

        try:
            return model_class.model_validate_json(data)
        except ValidationError as e:
            raise SessionPayloadError(f"Malformed payload under {key!r}") from e

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
            self._available = True
        except RedisError as e:
            self._available = False
            raise SessionStoreError(f"Redis delete failed: {e}") from e

    async def exists(self, key: str) -> bool:
        try:
            result = await self._redis.exists(key)
            self._available = True
            return bool(result)
        except RedisError as e:
            self._available = False
            raise SessionStoreError(f"Redis exists failed: {e}") from e

    async def cleanup_expired(self) -> int:
        """Redis handles expiration automatically."""
        return 0

    def is_available(self) -> bool:
        """Whether the last Redis round trip succeeded."""
        return self._available

    async def ping(self) -> bool:
        """Test Redis connection health."""
        try:
            await self._redis.ping()
            self._available = True
            return True
        except (RedisError, OSError):
            self._available = False
            return False


async def create_session_storage(
    config: ConfigData, redis_service: RedisService
) -> SessionStorage:
    """Build the session storage for this process.

    Redis is used when enabled and reachable. Outside production the process
    falls back to in-memory storage; in production an unreachable Redis is fatal.
    """
    client = redis_service.get_client()
    if client is not None:
        redis_storage = RedisSessionStorage(client)
        if await redis_storage.ping():
            logger.info("Session storage: Redis connected")
            return redis_storage
        reason = "Redis ping failed"
    else:
        reason = "Redis not configured"

    if config.app.environment == "production":
        raise RuntimeError(f"Session storage unavailable in production: {reason}")

    logger.warning("{}, using in-memory session storage", reason)
    return InMemorySessionStorage()
