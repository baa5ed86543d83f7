"""User domain entity."""

from pydantic import Field

from src.bookshelf.entities._base import Entity


class User(Entity):
    """User entity representing an account holder.

    Carries the password hash, so it must never be returned to clients as-is.
    """

    username: str = Field(description="Unique username")
    email: str = Field(description="Unique email address")
    password_hash: str = Field(description="Salted argon2 password hash", repr=False)
