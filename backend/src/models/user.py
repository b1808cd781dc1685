"""User model for directory accounts."""
from datetime import date

from sqlalchemy import Date, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UUIDv7Mixin


class User(Base, UUIDv7Mixin, TimestampMixin):
    """
    A directory account.

    Block edges reference users through ON DELETE CASCADE foreign keys; the
    user service also removes them explicitly so deletion does not depend on
    the database enforcing foreign keys.
    """

    __tablename__ = "users"

    # id provided by UUIDv7Mixin
    name: Mapped[str] = mapped_column(String(255))
    surname: Mapped[str | None] = mapped_column(String(255), nullable=True)
    username: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        index=True,
        comment="Login-style handle, unique across the directory",
    )
    birthdate: Mapped[date] = mapped_column(Date, index=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"
