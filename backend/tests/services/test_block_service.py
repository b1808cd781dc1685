"""Tests for the block service layer."""
from uuid import uuid4

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.block import Block
from models.user import User
from services.block_service import (
    block_user,
    get_blocked_user_ids,
    is_blocked,
    unblock_user,
)
from services.exceptions import (
    ConflictError,
    DuplicateBlockError,
    InvalidOperationError,
    NotFoundError,
    SelfBlockError,
    UserNotFoundError,
)


async def _count_blocks(db_session: AsyncSession) -> int:
    return await db_session.scalar(select(func.count()).select_from(Block))


class TestBlockUser:
    """Tests for block_user."""

    async def test__block_user__creates_edge_and_returns_target(
        self, db_session: AsyncSession, alice: User, bob: User,
    ) -> None:
        """Blocking persists the directed edge and returns the blocked user."""
        result = await block_user(db_session, alice.id, bob.id)

        assert result.id == bob.id
        assert result.username == "bob"
        assert await is_blocked(db_session, alice.id, bob.id) is True
        # Direction matters
        assert await is_blocked(db_session, bob.id, alice.id) is False

    async def test__block_user__twice_raises_conflict(
        self, db_session: AsyncSession, alice: User, bob: User,
    ) -> None:
        """Blocking the same user twice raises DuplicateBlockError."""
        alice_id, bob_id = alice.id, bob.id
        await block_user(db_session, alice_id, bob_id)

        with pytest.raises(DuplicateBlockError) as exc_info:
            await block_user(db_session, alice_id, bob_id)

        assert isinstance(exc_info.value, ConflictError)
        assert await _count_blocks(db_session) == 1

    async def test__block_user__self_raises_invalid_operation(
        self, db_session: AsyncSession, alice: User,
    ) -> None:
        """Users cannot block themselves."""
        with pytest.raises(SelfBlockError) as exc_info:
            await block_user(db_session, alice.id, alice.id)

        assert isinstance(exc_info.value, InvalidOperationError)
        assert await _count_blocks(db_session) == 0

    async def test__block_user__missing_target_raises_not_found(
        self, db_session: AsyncSession, alice: User,
    ) -> None:
        """Blocking a user that does not exist raises UserNotFoundError."""
        missing_id = uuid4()

        with pytest.raises(UserNotFoundError) as exc_info:
            await block_user(db_session, alice.id, missing_id)

        assert isinstance(exc_info.value, NotFoundError)
        assert exc_info.value.user_id == missing_id

    async def test__block_user__missing_blocker_raises_not_found(
        self, db_session: AsyncSession, bob: User,
    ) -> None:
        """A deleted caller (token still valid) cannot create edges."""
        ghost_id = uuid4()

        with pytest.raises(UserNotFoundError) as exc_info:
            await block_user(db_session, ghost_id, bob.id)

        assert exc_info.value.user_id == ghost_id

    async def test__block_user__both_directions_allowed(
        self, db_session: AsyncSession, alice: User, bob: User,
    ) -> None:
        """A->B and B->A are distinct edges."""
        await block_user(db_session, alice.id, bob.id)
        await block_user(db_session, bob.id, alice.id)

        assert await _count_blocks(db_session) == 2


class TestUnblockUser:
    """Tests for unblock_user."""

    async def test__unblock_user__removes_edge(
        self, db_session: AsyncSession, alice: User, bob: User,
    ) -> None:
        """Unblocking deletes the matching edge."""
        await block_user(db_session, alice.id, bob.id)

        removed = await unblock_user(db_session, alice.id, bob.id)

        assert removed == 1
        assert await is_blocked(db_session, alice.id, bob.id) is False

    async def test__unblock_user__without_edge_is_noop(
        self, db_session: AsyncSession, alice: User, bob: User,
    ) -> None:
        """Unblocking someone who is not blocked succeeds and removes nothing."""
        assert await unblock_user(db_session, alice.id, bob.id) == 0

    async def test__unblock_user__missing_user_is_noop(
        self, db_session: AsyncSession, alice: User,
    ) -> None:
        """Unblocking an id that does not exist is also a no-op."""
        assert await unblock_user(db_session, alice.id, uuid4()) == 0

    async def test__unblock_user__only_exact_pair(
        self, db_session: AsyncSession, alice: User, bob: User, carol: User,
    ) -> None:
        """Only the (blocker, blockee) pair given is removed."""
        await block_user(db_session, alice.id, bob.id)
        await block_user(db_session, bob.id, alice.id)
        await block_user(db_session, alice.id, carol.id)

        await unblock_user(db_session, alice.id, bob.id)

        assert await is_blocked(db_session, bob.id, alice.id) is True
        assert await is_blocked(db_session, alice.id, carol.id) is True

    async def test__block_after_unblock__allowed(
        self, db_session: AsyncSession, alice: User, bob: User,
    ) -> None:
        """An edge can be re-created after being removed."""
        await block_user(db_session, alice.id, bob.id)
        await unblock_user(db_session, alice.id, bob.id)

        await block_user(db_session, alice.id, bob.id)

        assert await is_blocked(db_session, alice.id, bob.id) is True


class TestGetBlockedUserIds:
    """Tests for get_blocked_user_ids."""

    async def test__get_blocked_user_ids__outgoing_only(
        self, db_session: AsyncSession, alice: User, bob: User, carol: User,
    ) -> None:
        """Only users the actor blocks are returned, not users blocking the actor."""
        await block_user(db_session, alice.id, bob.id)
        await block_user(db_session, carol.id, alice.id)

        assert await get_blocked_user_ids(db_session, alice.id) == {bob.id}

    async def test__get_blocked_user_ids__empty(
        self, db_session: AsyncSession, alice: User,
    ) -> None:
        """No blocks yields an empty set."""
        assert await get_blocked_user_ids(db_session, alice.id) == set()
