"""Request and response bodies of the HTTP API.

JSON keys are camelCase on the wire; Python attributes stay snake_case.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Auth ---
class LoginRequest(ApiModel):
    email: EmailStr
    password: str


class UserProfile(ApiModel):
    """A user as exposed to clients, never including the password hash."""

    id: int
    username: str
    email: str
    created_at: datetime
    updated_at: datetime


class LoginResponse(ApiModel):
    token: str
    user: UserProfile


class MessageResponse(ApiModel):
    message: str


# --- Users ---
class UserCreateRequest(ApiModel):
    username: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=6)


class UserUpdateRequest(ApiModel):
    username: str | None = Field(default=None, min_length=3)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)

    @field_validator("username", "email", "password", mode="before")
    @classmethod
    def _reject_null(cls, value):
        # Omitted fields are left alone; an explicit null is not a value.
        if value is None:
            raise ValueError("must not be null")
        return value


class UserCreated(ApiModel):
    id: int
    username: str
    email: str
    created_at: datetime


class UserUpdated(ApiModel):
    id: int
    username: str
    email: str
    updated_at: datetime


# --- Books ---
class BookCreateRequest(ApiModel):
    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)
    isbn: str | None = Field(default=None, max_length=20)
    published_date: datetime | None = None


class BookUpdateRequest(ApiModel):
    title: str | None = Field(default=None, min_length=1, max_length=255)
    author: str | None = Field(default=None, min_length=1, max_length=255)
    isbn: str | None = Field(default=None, max_length=20)
    published_date: datetime | None = None


class BookResponse(ApiModel):
    id: int
    title: str
    author: str
    isbn: str | None = None
    published_date: datetime | None = None
    created_at: datetime
    updated_at: datetime


# --- Favorites ---
class FavoriteCreateRequest(ApiModel):
    book_id: int = Field(strict=True)


class FavoriteResponse(ApiModel):
    user_id: int
    book_id: int
    created_at: datetime


class FavoriteBookResponse(ApiModel):
    book_id: int
    title: str
    author: str
    favorited_at: datetime


class IsFavoriteResponse(ApiModel):
    is_favorite: bool


# --- Deletions ---
class DeletedResponse(ApiModel):
    success: bool = True
    message: str
    id: int


class FavoriteRemovedResponse(ApiModel):
    success: bool = True
    message: str
    book_id: int
