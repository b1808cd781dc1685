"""Shared helpers for API tests."""
from uuid import UUID

from core.config import get_settings
from core.tokens import TokenCodec


def token_for(user_id: UUID) -> str:
    """Issue a token for ``user_id`` with the same secret the app verifies against."""
    return TokenCodec.from_settings(get_settings()).issue(user_id)


def auth_headers(user_id: UUID) -> dict[str, str]:
    """Authorization header for requests made as ``user_id``."""
    return {"Authorization": f"Bearer {token_for(user_id)}"}
