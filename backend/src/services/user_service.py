"""Service layer for user accounts and the cache-aside read path."""
import logging
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.user_cache import UserCache
from models.block import Block
from models.user import User
from schemas.user import UserCreate, UserResponse, UserUpdate
from services.exceptions import UserNotFoundError, UsernameTakenError

logger = logging.getLogger(__name__)


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """
    Create a new user.

    Uniqueness of ``username`` is enforced by the database constraint, so two
    concurrent signups for the same name cannot both succeed.

    Raises:
        UsernameTakenError: If the username is already in use.

    Note:
        Does not commit. Caller (session generator) handles commit at request end.
    """
    user = User(**data.model_dump())
    db.add(user)
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("user_create_failed username=%s reason=username_taken", data.username)
        raise UsernameTakenError(data.username) from e
    await db.refresh(user)
    logger.info("user_created user_id=%s", user.id)
    return user


async def get_user(db: AsyncSession, user_id: UUID) -> User | None:
    """Get a single user by id from the database."""
    return await db.get(User, user_id)


async def list_users(db: AsyncSession) -> list[User]:
    """Return every user, in store order."""
    result = await db.execute(select(User))
    return list(result.scalars().all())


async def fetch_user(
    db: AsyncSession,
    cache: UserCache | None,
    user_id: UUID,
) -> UserResponse | None:
    """
    Read a user through the cache.

    On a hit the snapshot is returned without touching the database. On a miss
    the user is loaded from the database and, if found, written to the cache.
    Absence is not cached.

    Args:
        db: Database session.
        cache: User cache, or None when caching is disabled.
        user_id: The user to load.

    Returns:
        The user snapshot, or None if the user does not exist.
    """
    if cache is not None:
        cached = await cache.get(user_id)
        if cached is not None:
            return cached

    user = await get_user(db, user_id)
    if user is None:
        return None

    snapshot = UserResponse.model_validate(user)
    if cache is not None:
        await cache.set(snapshot)
    return snapshot


async def update_user(
    db: AsyncSession,
    cache: UserCache | None,
    user_id: UUID,
    data: UserUpdate,
) -> User:
    """
    Apply a partial update to a user and overwrite its cache entry.

    The cache entry is replaced (not just invalidated) so the next read of this
    user is a hit carrying the new values, with a fresh TTL.

    Raises:
        UserNotFoundError: If the user does not exist.
        UsernameTakenError: If the new username belongs to another user.
    """
    user = await get_user(db, user_id)
    if user is None:
        logger.warning("user_update_failed user_id=%s reason=not_found", user_id)
        raise UserNotFoundError(user_id)

    changes = data.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(user, field, value)

    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.warning("user_update_failed user_id=%s reason=username_taken", user_id)
        raise UsernameTakenError(changes.get("username", "")) from e
    await db.refresh(user)

    if cache is not None:
        await cache.set(user)
    logger.info("user_updated user_id=%s fields=%s", user_id, sorted(changes))
    return user


async def delete_user(
    db: AsyncSession,
    cache: UserCache | None,
    user_id: UUID,
) -> bool:
    """
    Delete a user and every block edge where they are blocker or blockee.

    The cache entry is removed before the request commits, so a concurrent
    read in between can re-cache the row until the TTL expires.

    Returns:
        True if a user row was deleted, False if it did not exist.
    """
    await db.execute(
        delete(Block).where(
            or_(Block.user_id == user_id, Block.blocked_user_id == user_id),
        ),
    )
    result = await db.execute(delete(User).where(User.id == user_id))
    await db.flush()

    if cache is not None:
        await cache.invalidate(user_id)

    deleted = result.rowcount > 0
    if deleted:
        logger.info("user_deleted user_id=%s", user_id)
    else:
        logger.info("user_delete_noop user_id=%s", user_id)
    return deleted
