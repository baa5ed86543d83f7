"""Session authentication endpoints: login, logout and the current profile."""

from fastapi import APIRouter, Depends
from loguru import logger
from sqlmodel import Session
from starlette.concurrency import run_in_threadpool

from src.bookshelf.api.http.deps import (
    get_bearer_token,
    get_db_session,
    get_session_authenticator,
    require_identity,
)
from src.bookshelf.api.http.schemas import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    UserProfile,
)
from src.bookshelf.core.errors import NotFoundError, UnauthorizedError
from src.bookshelf.core.models import SessionIdentity
from src.bookshelf.core.security import verify_password
from src.bookshelf.core.services import SessionAuthenticator
from src.bookshelf.entities import User, UserRepository

router = APIRouter(prefix="/auth", tags=["auth"])


def _check_credentials(session: Session, email: str, password: str) -> User | None:
    user = UserRepository(session).get_by_email(email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    session: Session = Depends(get_db_session),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> LoginResponse:
    """Exchange email and password for a bearer token."""
    # Hash verification and the lookup are blocking
    user = await run_in_threadpool(
        _check_credentials, session, credentials.email, credentials.password
    )
    if user is None:
        logger.warning("Login failed", email=credentials.email)
        raise UnauthorizedError("Invalid email or password")

    token = await authenticator.issue(SessionIdentity(user_id=user.id, email=user.email))
    return LoginResponse(
        token=token, user=UserProfile.model_validate(user, from_attributes=True)
    )


@router.post("/logout", response_model=MessageResponse)
async def logout(
    _identity: SessionIdentity = Depends(require_identity),
    token: str | None = Depends(get_bearer_token),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> MessageResponse:
    """Revoke the session behind the presented token."""
    if token is not None:
        await authenticator.revoke(token)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserProfile)
def me(
    identity: SessionIdentity = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> UserProfile:
    """Return the profile of the authenticated user."""
    user = UserRepository(session).get(identity.user_id)
    if user is None:
        raise NotFoundError("User not found in database")
    return UserProfile.model_validate(user, from_attributes=True)
