"""FastAPI dependencies for injection."""
from core.auth import get_current_user_id, get_token_codec
from core.config import get_settings
from core.user_cache import get_user_cache
from db.session import get_async_session

__all__ = [
    "get_async_session",
    "get_current_user_id",
    "get_settings",
    "get_token_codec",
    "get_user_cache",
]
