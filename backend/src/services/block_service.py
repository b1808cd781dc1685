"""Service layer for directed block edges between users."""
import logging
from uuid import UUID

from sqlalchemy import delete, exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from models.block import Block
from models.user import User
from services.exceptions import DuplicateBlockError, SelfBlockError, UserNotFoundError

logger = logging.getLogger(__name__)


async def is_blocked(db: AsyncSession, user_id: UUID, blocked_user_id: UUID) -> bool:
    """Check whether ``user_id`` currently blocks ``blocked_user_id``."""
    stmt = select(
        exists().where(
            Block.user_id == user_id,
            Block.blocked_user_id == blocked_user_id,
        ),
    )
    return bool(await db.scalar(stmt))


async def block_user(db: AsyncSession, user_id: UUID, blocked_user_id: UUID) -> User:
    """
    Record that ``user_id`` blocks ``blocked_user_id``.

    Checks run in order: target exists, not a self-block, blocker exists, edge
    not already present. A concurrent duplicate that slips past the existence
    check is caught by the unique constraint.

    Returns:
        The blocked user.

    Raises:
        UserNotFoundError: If the target (or the blocker) does not exist.
        SelfBlockError: If a user tries to block themselves.
        DuplicateBlockError: If the edge already exists.
    """
    target = await db.get(User, blocked_user_id)
    if target is None:
        logger.warning(
            "block_failed user_id=%s blocked_user_id=%s reason=not_found",
            user_id, blocked_user_id,
        )
        raise UserNotFoundError(blocked_user_id)
    if user_id == blocked_user_id:
        logger.warning("block_failed user_id=%s reason=self_block", user_id)
        raise SelfBlockError
    if await db.get(User, user_id) is None:
        logger.warning("block_failed user_id=%s reason=blocker_not_found", user_id)
        raise UserNotFoundError(user_id)
    if await is_blocked(db, user_id, blocked_user_id):
        logger.warning(
            "block_failed user_id=%s blocked_user_id=%s reason=duplicate",
            user_id, blocked_user_id,
        )
        raise DuplicateBlockError(user_id, blocked_user_id)

    db.add(Block(user_id=user_id, blocked_user_id=blocked_user_id))
    try:
        await db.flush()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(
            "block_failed user_id=%s blocked_user_id=%s reason=duplicate_race",
            user_id, blocked_user_id,
        )
        raise DuplicateBlockError(user_id, blocked_user_id) from e

    logger.info("user_blocked user_id=%s blocked_user_id=%s", user_id, blocked_user_id)
    return target


async def unblock_user(db: AsyncSession, user_id: UUID, blocked_user_id: UUID) -> int:
    """
    Remove the edge ``(user_id, blocked_user_id)`` if present.

    Idempotent: unblocking a user who is not blocked (or does not exist) is a no-op.

    Returns:
        Number of edges removed (0 or 1).
    """
    result = await db.execute(
        delete(Block).where(
            Block.user_id == user_id,
            Block.blocked_user_id == blocked_user_id,
        ),
    )
    await db.flush()
    logger.info(
        "user_unblocked user_id=%s blocked_user_id=%s removed=%s",
        user_id, blocked_user_id, result.rowcount,
    )
    return result.rowcount


async def get_blocked_user_ids(db: AsyncSession, user_id: UUID) -> set[UUID]:
    """Return the ids of every user that ``user_id`` blocks."""
    result = await db.execute(
        select(Block.blocked_user_id).where(Block.user_id == user_id),
    )
    return set(result.scalars().all())
