"""User registration and self-service account management."""

from typing import NoReturn

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.bookshelf.api.http.deps import get_db_session, require_identity, require_owner
from src.bookshelf.api.http.schemas import (
    DeletedResponse,
    UserCreated,
    UserCreateRequest,
    UserProfile,
    UserUpdated,
    UserUpdateRequest,
)
from src.bookshelf.core.errors import ConflictError, NotFoundError
from src.bookshelf.core.models import SessionIdentity
from src.bookshelf.core.security import hash_password
from src.bookshelf.core.services.database.db_utils import (
    IntegrityViolation,
    classify_integrity_error,
)
from src.bookshelf.entities import UserRepository

router = APIRouter(prefix="/users", tags=["users"])

DUPLICATE_USER_MESSAGE = "Username or email already exists."


def _raise_for_integrity_error(session: Session, exc: IntegrityError) -> NoReturn:
    session.rollback()
    if classify_integrity_error(exc) is IntegrityViolation.UNIQUE:
        raise ConflictError(DUPLICATE_USER_MESSAGE) from exc
    raise exc


@router.post("", response_model=UserCreated, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreateRequest,
    session: Session = Depends(get_db_session),
) -> UserCreated:
    """Register a new user."""
    repository = UserRepository(session)
    try:
        user = repository.create(
            username=payload.username,
            email=payload.email,
            password_hash=hash_password(payload.password),
        )
        session.commit()
    except IntegrityError as e:
        _raise_for_integrity_error(session, e)

    logger.info("User created", user_id=user.id)
    return UserCreated.model_validate(user, from_attributes=True)


@router.get("", response_model=list[UserProfile])
def list_users(
    _identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> list[UserProfile]:
    """List users, newest first."""
    users = UserRepository(session).list_all()
    return [UserProfile.model_validate(user, from_attributes=True) for user in users]


@router.get("/{user_id}", response_model=UserProfile)
def get_user(
    user_id: int,
    _identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> UserProfile:
    """Get a user by ID."""
    user = UserRepository(session).get(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return UserProfile.model_validate(user, from_attributes=True)


@router.put("/{user_id}", response_model=UserUpdated)
def update_user(
    user_id: int,
    payload: UserUpdateRequest,
    _owner: SessionIdentity = Depends(require_owner),
    session: Session = Depends(get_db_session),
) -> UserUpdated:
    """Update the caller's own username, email or password."""
    changes = payload.model_dump(exclude_unset=True)
    password = changes.pop("password", None)
    if password is not None:
        changes["password_hash"] = hash_password(password)

    try:
        user = UserRepository(session).update(user_id, changes)
        if user is None:
            raise NotFoundError("User not found")
        session.commit()
    except IntegrityError as e:
        _raise_for_integrity_error(session, e)

    return UserUpdated.model_validate(user, from_attributes=True)


@router.delete("/{user_id}", response_model=DeletedResponse)
def delete_user(
    user_id: int,
    _owner: SessionIdentity = Depends(require_owner),
    session: Session = Depends(get_db_session),
) -> DeletedResponse:
    """Delete the caller's own account along with its favorites."""
    if not UserRepository(session).delete(user_id):
        raise NotFoundError("User not found")
    session.commit()

    logger.info("User deleted", user_id=user_id)
    return DeletedResponse(message="User deleted", id=user_id)
