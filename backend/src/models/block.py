"""Block model: a directed edge meaning the blocker hides the blockee from search."""
from uuid import UUID

from sqlalchemy import CheckConstraint, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UUIDv7Mixin


class Block(Base, UUIDv7Mixin, TimestampMixin):
    """Directed block edge from ``user_id`` (blocker) to ``blocked_user_id`` (blockee)."""

    __tablename__ = "blocks"

    # id provided by UUIDv7Mixin
    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        comment="Blocker",
    )
    blocked_user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        comment="Blockee",
    )

    __table_args__ = (
        # One edge per ordered pair. Concurrent duplicate inserts lose here.
        UniqueConstraint("user_id", "blocked_user_id", name="uq_block_user_blocked"),
        CheckConstraint("user_id <> blocked_user_id", name="ck_block_no_self_block"),
    )
