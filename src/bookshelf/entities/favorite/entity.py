"""Favorite domain entities."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.bookshelf.entities._base import utcnow


class Favorite(BaseModel):
    """A (user, book) pair marking a book as one of the user's favorites."""

    user_id: int
    book_id: int
    created_at: datetime = Field(default_factory=utcnow)


class FavoriteBook(BaseModel):
    """A favorited book as listed for its user."""

    book_id: int
    title: str
    author: str
    favorited_at: datetime
