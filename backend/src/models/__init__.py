"""SQLAlchemy models."""
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.block import Block
from models.user import User

__all__ = [
    "Base",
    "Block",
    "TimestampMixin",
    "UUIDv7Mixin",
    "User",
]
