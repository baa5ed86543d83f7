"""Book repository."""

from collections.abc import Mapping
from typing import Any

from sqlmodel import Session, col, select

from src.bookshelf.entities._base import utcnow
from src.bookshelf.entities.book.entity import Book
from src.bookshelf.entities.book.table import BookTable


class BookRepository:
    """Data-access layer for books. The caller commits."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, book_id: int) -> Book | None:
        row = self._session.get(BookTable, book_id)
        if row is None:
            return None
        return Book.model_validate(row, from_attributes=True)

    def exists(self, book_id: int) -> bool:
        return self._session.get(BookTable, book_id) is not None

    def list(
        self, limit: int = 10, offset: int = 0, query: str | None = None
    ) -> list[Book]:
        """List books newest first, optionally filtered by a case-insensitive
        substring of the title."""
        statement = select(BookTable)
        if query:
            statement = statement.where(
                col(BookTable.title).icontains(query, autoescape=True)
            )
        statement = (
            statement.order_by(col(BookTable.created_at).desc(), col(BookTable.id).desc())
            .offset(offset)
            .limit(limit)
        )
        rows = self._session.exec(statement).all()
        return [Book.model_validate(row, from_attributes=True) for row in rows]

    def create(
        self,
        title: str,
        author: str,
        isbn: str | None = None,
        published_date=None,
    ) -> Book:
        row = BookTable(
            title=title, author=author, isbn=isbn, published_date=published_date
        )
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def update(self, book_id: int, changes: Mapping[str, Any]) -> Book | None:
        row = self._session.get(BookTable, book_id)
        if row is None:
            return None
        for field, value in changes.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Book.model_validate(row, from_attributes=True)

    def delete(self, book_id: int) -> bool:
        row = self._session.get(BookTable, book_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
