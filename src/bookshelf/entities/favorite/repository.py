"""Favorite repository."""

from sqlmodel import Session, col, select

from src.bookshelf.entities.book.table import BookTable
from src.bookshelf.entities.favorite.entity import Favorite, FavoriteBook
from src.bookshelf.entities.favorite.table import FavoriteTable


class FavoriteRepository:
    """Data-access layer for favorites. The caller commits.

    Adding a pair twice, or for a missing user or book, surfaces as
    ``sqlalchemy.exc.IntegrityError`` on flush.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def add(self, user_id: int, book_id: int) -> Favorite:
        row = FavoriteTable(user_id=user_id, book_id=book_id)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return Favorite.model_validate(row, from_attributes=True)

    def remove(self, user_id: int, book_id: int) -> bool:
        row = self._session.get(FavoriteTable, (user_id, book_id))
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True

    def exists(self, user_id: int, book_id: int) -> bool:
        return self._session.get(FavoriteTable, (user_id, book_id)) is not None

    def list_for_user(self, user_id: int) -> list[FavoriteBook]:
        statement = (
            select(FavoriteTable, BookTable)
            .join(BookTable, col(FavoriteTable.book_id) == col(BookTable.id))
            .where(FavoriteTable.user_id == user_id)
            .order_by(col(FavoriteTable.created_at).desc(), col(BookTable.id).desc())
        )
        return [
            FavoriteBook(
                book_id=book.id,
                title=book.title,
                author=book.author,
                favorited_at=favorite.created_at,
            )
            for favorite, book in self._session.exec(statement).all()
        ]
