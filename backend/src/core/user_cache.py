"""Redis-backed snapshot cache for single-user lookups."""
import logging
from typing import TYPE_CHECKING
from uuid import UUID

from pydantic import ValidationError

from schemas.user import UserResponse

if TYPE_CHECKING:
    from core.redis import RedisClient
    from models.user import User

logger = logging.getLogger(__name__)

# Cache schema version - included in all cache keys (e.g., "users:v1:user:...")
#
# Bump this version when UserResponse fields are added, removed, or renamed.
# Old entries are then never found (cache miss) and expire via TTL, so no
# invalidation is needed during deployments.
CACHE_SCHEMA_VERSION = 1

DEFAULT_TTL = 3600  # 1 hour


class UserCache:
    """
    Cache of user snapshots keyed by user id.

    Never authoritative: entries may lag the database by up to the TTL when
    the row is changed by anything other than the user service.
    """

    def __init__(self, redis_client: "RedisClient", ttl: int = DEFAULT_TTL) -> None:
        """Initialize user cache with Redis client and entry TTL in seconds."""
        self._redis = redis_client
        self._ttl = ttl

    @property
    def ttl(self) -> int:
        """Entry time-to-live in seconds."""
        return self._ttl

    def _cache_key(self, user_id: UUID) -> str:
        """Generate cache key for a user id."""
        return f"users:v{CACHE_SCHEMA_VERSION}:user:{user_id}"

    async def get(self, user_id: UUID) -> UserResponse | None:
        """
        Get cached snapshot by user id.

        Returns:
            UserResponse if found in cache, None on cache miss or unreadable entry.
        """
        data = await self._redis.get(self._cache_key(user_id))
        if not data:
            logger.debug("user_cache_miss user_id=%s", user_id)
            return None
        try:
            snapshot = UserResponse.model_validate_json(data)
        except ValidationError:
            logger.warning("user_cache_corrupt_entry user_id=%s", user_id)
            return None
        logger.debug("user_cache_hit user_id=%s", user_id)
        return snapshot

    async def set(self, user: "User | UserResponse") -> None:
        """
        Write a snapshot of ``user``, replacing any existing entry and resetting its TTL.

        Args:
            user: ORM User or an already-built snapshot.
        """
        snapshot = (
            user if isinstance(user, UserResponse) else UserResponse.model_validate(user)
        )
        await self._redis.setex(
            self._cache_key(snapshot.id),
            self._ttl,
            snapshot.model_dump_json(),
        )
        logger.debug("user_cache_set user_id=%s", snapshot.id)

    async def invalidate(self, user_id: UUID) -> None:
        """Remove the cached snapshot for ``user_id``."""
        await self._redis.delete(self._cache_key(user_id))
        logger.debug("user_cache_invalidate user_id=%s", user_id)


# Global user cache instance (set during app startup)
class _UserCacheState:
    """Container for the global user cache."""

    cache: UserCache | None = None


_state = _UserCacheState()


def get_user_cache() -> UserCache | None:
    """Get the global user cache instance."""
    return _state.cache


def set_user_cache(cache: UserCache | None) -> None:
    """Set the global user cache instance."""
    _state.cache = cache
