"""User directory endpoints: signup, self-service account, blocks and search."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import (
    get_async_session,
    get_current_user_id,
    get_token_codec,
    get_user_cache,
)
from core.tokens import TokenCodec
from core.user_cache import UserCache
from models.user import User
from schemas.user import (
    SuccessResponse,
    UserCreate,
    UserCreateResponse,
    UserResponse,
    UserUpdate,
)
from services import block_service, search_service, user_service
from services.exceptions import (
    ConflictError,
    InvalidOperationError,
    NotFoundError,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserCreateResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_async_session),
    codec: TokenCodec = Depends(get_token_codec),
) -> UserCreateResponse:
    """Sign up. Returns the new user and the bearer token that identifies them."""
    try:
        user = await user_service.create_user(db, data)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return UserCreateResponse(
        user=UserResponse.model_validate(user),
        token=codec.issue(user.id),
    )


@router.get("/all", response_model=list[UserResponse])
async def list_users(
    db: AsyncSession = Depends(get_async_session),
) -> list[User]:
    """List every user in the directory."""
    return await user_service.list_users(db)


# Fixed-prefix routes are declared before the parameterized /block and
# /unblock routes for readability; none of them overlap.
@router.get("/search", response_model=list[UserResponse])
async def search_users(
    username: str | None = Query(default=None, description="Case-insensitive substring"),
    min_age: int | None = Query(default=None, alias="minAge", ge=0),
    max_age: int | None = Query(default=None, alias="maxAge", ge=0),
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> list[User]:
    """
    Search users by username fragment or age range.

    The caller and everyone they have blocked are never returned. Username and
    age criteria are OR-ed; an inverted age range (minAge > maxAge) is ignored.
    """
    return await search_service.search_users(
        db,
        current_user_id,
        username=username,
        min_age=min_age,
        max_age=max_age,
    )


@router.get("", response_model=UserResponse)
async def get_current_user(
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    cache: UserCache | None = Depends(get_user_cache),
) -> UserResponse:
    """Get the caller's own user, served from cache when possible."""
    user = await user_service.fetch_user(db, cache, current_user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("", response_model=UserResponse)
async def update_current_user(
    data: UserUpdate,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    cache: UserCache | None = Depends(get_user_cache),
) -> User:
    """Partially update the caller's own user."""
    try:
        return await user_service.update_user(db, cache, current_user_id, data)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("", response_model=SuccessResponse)
async def delete_current_user(
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
    cache: UserCache | None = Depends(get_user_cache),
) -> SuccessResponse:
    """Delete the caller's own user along with every block edge that references them."""
    await user_service.delete_user(db, cache, current_user_id)
    return SuccessResponse()


@router.post("/block/{user_id}", response_model=UserResponse)
async def block_user(
    user_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """Block a user so they no longer appear in the caller's searches."""
    try:
        return await block_service.block_user(db, current_user_id, user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ConflictError as e:
        raise HTTPException(
            status_code=409,
            detail={
                "message": str(e),
                "error_code": "DUPLICATE_BLOCK",
            },
        )


@router.post("/unblock/{user_id}", response_model=SuccessResponse)
async def unblock_user(
    user_id: UUID,
    current_user_id: UUID = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_async_session),
) -> SuccessResponse:
    """Unblock a user. Succeeds even if the user was not blocked."""
    await block_service.unblock_user(db, current_user_id, user_id)
    return SuccessResponse()
