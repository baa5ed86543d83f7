"""User repository."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, col, select

from src.bookshelf.entities._base import utcnow
from src.bookshelf.entities.user.entity import User
from src.bookshelf.entities.user.table import UserTable


class UserRepository:
    """Data-access layer for users.

    Writes are flushed but not committed; the caller owns the transaction.
    Unique violations surface as ``sqlalchemy.exc.IntegrityError``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: int) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def get_by_email(self, email: str) -> User | None:
        statement = select(UserTable).where(UserTable.email == email)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def list_all(self) -> list[User]:
        statement = select(UserTable).order_by(
            col(UserTable.created_at).desc(), col(UserTable.id).desc()
        )
        rows = self._session.exec(statement).all()
        return [User.model_validate(row, from_attributes=True) for row in rows]

    def count(self) -> int:
        return self._session.exec(select(func.count()).select_from(UserTable)).one()

    def create(self, username: str, email: str, password_hash: str) -> User:
        row = UserTable(username=username, email=email, password_hash=password_hash)
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def update(self, user_id: int, changes: Mapping[str, Any]) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        for field, value in changes.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        self._session.add(row)
        self._session.flush()
        self._session.refresh(row)
        return User.model_validate(row, from_attributes=True)

    def delete(self, user_id: int) -> bool:
        """Delete a user; favorites go with it through the foreign key cascade."""
        row = self._session.get(UserTable, user_id)
        if row is None:
            return False
        self._session.delete(row)
        self._session.flush()
        return True
