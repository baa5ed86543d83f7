"""Redis connection service for managing Redis client lifecycle and health checks."""

import redis.asyncio as redis_async
from loguru import logger
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import RedisError

from src.bookshelf.runtime.config.config_data import ConfigData


class RedisService:
    """Owns the process-wide Redis client and its connection pool.

    Constructed once at startup and passed to whatever needs the client,
    following the same pattern as DbSessionService.
    """

    def __init__(self, config: ConfigData):
        redis_config = config.redis

        self._enabled = redis_config.enabled
        self._client: redis_async.Redis | None = None
        self._url = redis_config.url

        if not self._enabled:
            logger.info("Redis is disabled, service will not connect")
            return

        if not self._url:
            logger.warning("Redis URL not configured, service will not connect")
            self._enabled = False
            return

        logger.info(
            "Initializing Redis client with connection string: {}",
            redis_config.sanitized_connection_string,
        )

        retry = Retry(
            ExponentialBackoff(cap=10, base=1),  # 1s, 2s, 4s, … up to 10s
            retries=3,
        )

        # The client connects lazily on first command
        self._client = redis_async.from_url(
            redis_config.connection_string,
            encoding="utf-8",
            decode_responses=redis_config.decode_responses,
            max_connections=redis_config.max_connections,
            socket_timeout=redis_config.socket_timeout,
            socket_connect_timeout=redis_config.socket_connect_timeout,
            socket_keepalive=True,
            health_check_interval=30,
            retry=retry,
            client_name="bookshelf_api",
        )

    def get_client(self) -> redis_async.Redis | None:
        """Get the Redis async client instance.

        Returns:
            Redis async client if enabled, None otherwise.
        """
        if not self._enabled or self._client is None:
            return None
        return self._client

    async def health_check(self) -> bool:
        """Perform a health check on the Redis connection.

        Returns:
            True if Redis is healthy and reachable, False otherwise.
        """
        if self._client is None:
            return False

        try:
            await self._client.ping()
            return True
        except (RedisError, OSError) as e:
            logger.error(
                "Redis health check failed: {}: {}", type(e).__name__, e
            )
            return False

    async def close(self) -> None:
        """Close the Redis connection and clean up resources."""
        if self._client is None:
            return
        try:
            logger.info("Closing Redis connection")
            await self._client.aclose()
        except (RedisError, OSError) as e:
            logger.error("Error closing Redis connection: {}: {}", type(e).__name__, e)
        finally:
            self._client = None
