"""Per-user favorite books."""

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.bookshelf.api.http.deps import get_db_session, require_identity
from src.bookshelf.api.http.schemas import (
    FavoriteBookResponse,
    FavoriteCreateRequest,
    FavoriteRemovedResponse,
    FavoriteResponse,
    IsFavoriteResponse,
)
from src.bookshelf.core.errors import ConflictError, NotFoundError
from src.bookshelf.core.models import SessionIdentity
from src.bookshelf.core.services.database.db_utils import (
    IntegrityViolation,
    classify_integrity_error,
)
from src.bookshelf.entities import BookRepository, FavoriteRepository

router = APIRouter(prefix="/favorites", tags=["favorites"])


@router.post("", response_model=FavoriteResponse, status_code=status.HTTP_201_CREATED)
def add_favorite(
    payload: FavoriteCreateRequest,
    identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> FavoriteResponse:
    """Mark a book as one of the caller's favorites."""
    if not BookRepository(session).exists(payload.book_id):
        raise NotFoundError("Book not found.")

    try:
        favorite = FavoriteRepository(session).add(identity.user_id, payload.book_id)
        session.commit()
    except IntegrityError as e:
        session.rollback()
        violation = classify_integrity_error(e)
        if violation is IntegrityViolation.UNIQUE:
            raise ConflictError("Book already in favorites.") from e
        if violation is IntegrityViolation.FOREIGN_KEY:
            # Book or user vanished between the check and the insert
            raise NotFoundError("Book not found or user invalid.") from e
        raise

    logger.info("Favorite added", user_id=identity.user_id, book_id=payload.book_id)
    return FavoriteResponse.model_validate(favorite, from_attributes=True)


@router.get("", response_model=list[FavoriteBookResponse])
def list_favorites(
    identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> list[FavoriteBookResponse]:
    """List the caller's favorite books, most recently favorited first."""
    favorites = FavoriteRepository(session).list_for_user(identity.user_id)
    return [
        FavoriteBookResponse.model_validate(favorite, from_attributes=True)
        for favorite in favorites
    ]


@router.get("/is-favorite/{book_id}", response_model=IsFavoriteResponse)
def is_favorite(
    book_id: int,
    identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> IsFavoriteResponse:
    exists = FavoriteRepository(session).exists(identity.user_id, book_id)
    return IsFavoriteResponse(is_favorite=exists)


@router.delete("/{book_id}", response_model=FavoriteRemovedResponse)
def remove_favorite(
    book_id: int,
    identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> FavoriteRemovedResponse:
    """Remove a book from the caller's favorites."""
    if not FavoriteRepository(session).remove(identity.user_id, book_id):
        raise NotFoundError("Favorite not found.")
    session.commit()
    return FavoriteRemovedResponse(message="Favorite removed", book_id=book_id)
