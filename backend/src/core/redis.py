"""Redis client with connection pooling and graceful fallback."""
import logging

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisClient:
    """
    Async Redis client with connection pooling and graceful fallback.

    Every operation degrades to a no-op (None/False) when Redis is disabled or
    unreachable, so callers can treat the cache as optional.
    """

    def __init__(
        self,
        url: str,
        enabled: bool = True,
        pool_size: int = 20,
        client: Redis | None = None,
    ) -> None:
        self._url = url
        self._enabled = enabled
        self._pool_size = pool_size
        self._pool: ConnectionPool | None = None
        # A pre-built client (e.g. for tests) skips pool creation in connect()
        self._client: Redis | None = client

    async def connect(self) -> None:
        """Initialize the connection pool and verify connectivity."""
        if not self._enabled:
            logger.info("Redis disabled by configuration")
            self._client = None
            return
        try:
            if self._client is None:
                self._pool = ConnectionPool.from_url(self._url, max_connections=self._pool_size)
                self._client = Redis(connection_pool=self._pool)
            await self._client.ping()
            logger.info("Redis connected successfully")
        except RedisError as e:
            logger.warning("Redis connection failed: %s", e)
            self._client = None
            self._pool = None

    async def close(self) -> None:
        """Close connection pool."""
        if self._client:
            await self._client.aclose()
            self._client = None
            self._pool = None
            logger.info("Redis connection closed")

    @property
    def is_connected(self) -> bool:
        """Check if client is connected."""
        return self._client is not None

    async def ping(self) -> bool:
        """Check Redis connectivity."""
        if not self._client:
            return False
        try:
            return await self._client.ping()
        except RedisError:
            return False

    async def get(self, key: str) -> bytes | None:
        """Get value, returns None if Redis unavailable."""
        if not self._client:
            return None
        try:
            return await self._client.get(key)
        except RedisError as e:
            logger.warning("Redis GET failed: %s", e)
            return None

    async def setex(self, key: str, seconds: int, value: str | bytes) -> bool:
        """Set value with expiry, returns False if Redis unavailable."""
        if not self._client:
            return False
        try:
            await self._client.setex(key, seconds, value)
            return True
        except RedisError as e:
            logger.warning("Redis SETEX failed: %s", e)
            return False

    async def delete(self, *keys: str) -> bool:
        """Delete key(s), returns False if Redis unavailable."""
        if not self._client:
            return False
        try:
            await self._client.delete(*keys)
            return True
        except RedisError as e:
            logger.warning("Redis DELETE failed: %s", e)
            return False

    async def ttl(self, key: str) -> int | None:
        """Remaining TTL in seconds, or None if Redis unavailable."""
        if not self._client:
            return None
        try:
            return await self._client.ttl(key)
        except RedisError as e:
            logger.warning("Redis TTL failed: %s", e)
            return None

    async def flushdb(self) -> bool:
        """Flush current database (for testing). Returns False if unavailable."""
        if not self._client:
            return False
        try:
            await self._client.flushdb()
            return True
        except RedisError as e:
            logger.warning("Redis FLUSHDB failed: %s", e)
            return False


# Global Redis client state using a container to avoid global statement
class _RedisState:
    """Container for global Redis client state."""

    client: RedisClient | None = None


_state = _RedisState()


def get_redis_client() -> RedisClient | None:
    """Get the global Redis client instance."""
    return _state.client


def set_redis_client(client: RedisClient | None) -> None:
    """Set the global Redis client instance."""
    _state.client = client
