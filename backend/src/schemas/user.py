"""Pydantic schemas for user endpoints."""
from datetime import date
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import validate_not_blank


class UserCreate(BaseModel):
    """Schema for signing up a new user."""

    name: str = Field(..., min_length=1, max_length=255)
    surname: str | None = Field(default=None, max_length=255)
    username: str = Field(..., min_length=1, max_length=255)
    birthdate: date

    @field_validator("name", "username")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        """Reject whitespace-only values for required text fields."""
        return validate_not_blank(v)


class UserUpdate(BaseModel):
    """
    Schema for a partial self-update.

    Only fields present in the request body are applied (``exclude_unset``).
    ``surname`` may be explicitly set to null; the required fields may not.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    surname: str | None = Field(default=None, max_length=255)
    username: str | None = Field(default=None, min_length=1, max_length=255)
    birthdate: date | None = None

    @field_validator("name", "username", "birthdate", mode="before")
    @classmethod
    def check_required_not_null(cls, v: object) -> object:
        """Required user fields can be omitted but not cleared."""
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("name", "username")
    @classmethod
    def check_not_blank(cls, v: str) -> str:
        """Reject whitespace-only values for required text fields."""
        return validate_not_blank(v)


class UserResponse(BaseModel):
    """
    Public user snapshot.

    Also the serialized form stored in the user cache. Bump
    ``CACHE_SCHEMA_VERSION`` in core/user_cache.py when fields change.
    """

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    surname: str | None
    username: str
    birthdate: date


class UserCreateResponse(BaseModel):
    """
    Response when signing up.

    The token is only returned here. It is never rotated, so clients must store it.
    """

    user: UserResponse
    token: str


class SuccessResponse(BaseModel):
    """Acknowledgement for operations with no resource to return."""

    success: bool = True
