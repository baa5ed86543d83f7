"""Book database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field

from src.bookshelf.entities._base import EntityTable


class BookTable(EntityTable, table=True):
    """Database persistence model for books."""

    __tablename__ = "books"

    title: str = Field(max_length=255, nullable=False)
    author: str = Field(max_length=255, nullable=False)
    isbn: str | None = Field(default=None, max_length=20, unique=True, nullable=True)
    published_date: datetime | None = Field(
        default=None, sa_type=sa.DateTime(timezone=True), nullable=True
    )
