"""Favorite database table model."""

from datetime import datetime

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from src.bookshelf.entities._base import utcnow


class FavoriteTable(SQLModel, table=True):
    """Join table between users and books.

    Rows disappear with either side through ``ON DELETE CASCADE``.
    """

    __tablename__ = "favorites"

    user_id: int = Field(
        sa_column=sa.Column(
            sa.Integer,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    book_id: int = Field(
        sa_column=sa.Column(
            sa.Integer,
            sa.ForeignKey("books.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs={"server_default": sa.func.now()},
    )
