"""Bearer-token authentication dependencies."""
import logging
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.config import Settings, get_settings
from core.tokens import InvalidTokenError, TokenCodec

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme. auto_error is off so a missing or non-Bearer header
# reaches get_current_user_id and gets a 400 instead of FastAPI's 403.
security = HTTPBearer(auto_error=False)


def get_token_codec(settings: Settings = Depends(get_settings)) -> TokenCodec:
    """Dependency that builds the token codec from settings."""
    return TokenCodec.from_settings(settings)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    codec: TokenCodec = Depends(get_token_codec),
) -> UUID:
    """
    Dependency that verifies the bearer token and returns the caller's user id.

    Only the signature is checked here; whether the user still exists is up to
    the operation being performed.

    Raises:
        HTTPException: 400 if the Authorization header is missing or malformed,
            401 if the token does not verify.
    """
    if credentials is None or not credentials.credentials:
        logger.warning("auth_failed reason=missing_header")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing or invalid Authorization header",
        )

    try:
        return codec.verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.warning("auth_failed reason=invalid_token detail=%s", e)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
