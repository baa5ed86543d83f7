"""Book domain entity."""

from datetime import datetime

from pydantic import Field

from src.bookshelf.entities._base import Entity


class Book(Entity):
    """Book entity shared by every authenticated caller."""

    title: str = Field(description="Book title")
    author: str = Field(description="Book author")
    isbn: str | None = Field(default=None, description="Optional unique ISBN")
    published_date: datetime | None = Field(
        default=None, description="Publication date"
    )
