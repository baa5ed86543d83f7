"""Book API router with CRUD operations."""

from typing import NoReturn

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.bookshelf.api.http.deps import get_db_session, require_identity
from src.bookshelf.api.http.schemas import (
    BookCreateRequest,
    BookResponse,
    BookUpdateRequest,
    DeletedResponse,
)
from src.bookshelf.core.errors import ConflictError, NotFoundError
from src.bookshelf.core.models import SessionIdentity
from src.bookshelf.core.services.database.db_utils import (
    IntegrityViolation,
    classify_integrity_error,
)
from src.bookshelf.entities import BookRepository

router = APIRouter(prefix="/books", tags=["books"])

# Fields a client may clear by sending null
_NULLABLE_FIELDS = {"isbn", "published_date"}


def _raise_for_integrity_error(session: Session, exc: IntegrityError) -> NoReturn:
    session.rollback()
    if classify_integrity_error(exc) is IntegrityViolation.UNIQUE:
        raise ConflictError("Book with this ISBN already exists.") from exc
    raise exc


@router.post("", response_model=BookResponse, status_code=status.HTTP_201_CREATED)
def create_book(
    payload: BookCreateRequest,
    _identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> BookResponse:
    """Create a new book."""
    try:
        book = BookRepository(session).create(
            title=payload.title,
            author=payload.author,
            isbn=payload.isbn,
            published_date=payload.published_date,
        )
        session.commit()
    except IntegrityError as e:
        _raise_for_integrity_error(session, e)

    logger.info("Book created", book_id=book.id)
    return BookResponse.model_validate(book, from_attributes=True)


@router.get("", response_model=list[BookResponse])
def list_books(
    limit: int = Query(default=10, ge=0),
    offset: int = Query(default=0, ge=0),
    query: str | None = Query(default=None),
    session: Session = Depends(get_db_session),
) -> list[BookResponse]:
    """List books, newest first, optionally filtered by title."""
    books = BookRepository(session).list(limit=limit, offset=offset, query=query)
    return [BookResponse.model_validate(book, from_attributes=True) for book in books]


@router.get("/{book_id}", response_model=BookResponse)
def get_book(
    book_id: int,
    session: Session = Depends(get_db_session),
) -> BookResponse:
    """Get a book by ID."""
    book = BookRepository(session).get(book_id)
    if book is None:
        raise NotFoundError("Book not found")
    return BookResponse.model_validate(book, from_attributes=True)


@router.put("/{book_id}", response_model=BookResponse)
def update_book(
    book_id: int,
    payload: BookUpdateRequest,
    _identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> BookResponse:
    """Update a book."""
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in _NULLABLE_FIELDS
    }

    try:
        book = BookRepository(session).update(book_id, changes)
        if book is None:
            raise NotFoundError("Book not found")
        session.commit()
    except IntegrityError as e:
        _raise_for_integrity_error(session, e)

    return BookResponse.model_validate(book, from_attributes=True)


@router.delete("/{book_id}", response_model=DeletedResponse)
def delete_book(
    book_id: int,
    _identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> DeletedResponse:
    """Delete a book."""
    if not BookRepository(session).delete(book_id):
        raise NotFoundError("Book not found")
    session.commit()

    logger.info("Book deleted", book_id=book_id)
    return DeletedResponse(message="Book deleted", id=book_id)
