"""Shared exceptions for service layer operations."""
from uuid import UUID


class NotFoundError(Exception):
    """Raised when a referenced resource does not exist."""


class ConflictError(Exception):
    """Raised when an operation would violate a uniqueness rule."""


class InvalidOperationError(Exception):
    """Raised when an operation is never valid for the given arguments."""


class UserNotFoundError(NotFoundError):
    """Raised when a user id does not resolve to an existing user."""

    def __init__(self, user_id: UUID) -> None:
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class UsernameTakenError(ConflictError):
    """Raised when creating or renaming a user to a username already in use."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username already exists: {username}")


class DuplicateBlockError(ConflictError):
    """Raised when the blocker already blocks the target."""

    def __init__(self, user_id: UUID, blocked_user_id: UUID) -> None:
        self.user_id = user_id
        self.blocked_user_id = blocked_user_id
        super().__init__("User already blocked")


class SelfBlockError(InvalidOperationError):
    """Raised when a user tries to block themselves."""

    def __init__(self) -> None:
        super().__init__("You cannot block yourself")
