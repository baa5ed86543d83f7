"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from loguru import logger
from sqlmodel import Session

from src.bookshelf.api.http.app_data import ApplicationDependencies
from src.bookshelf.core.errors import ForbiddenError, UnauthorizedError
from src.bookshelf.core.models import SessionIdentity
from src.bookshelf.core.security import parse_bearer_token
from src.bookshelf.core.services import SessionAuthenticator


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Yield a database session that is closed once the response is sent."""
    app_deps = get_app_dependencies(request)
    session = app_deps.database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_session_authenticator(request: Request) -> SessionAuthenticator:
    """Get the session authenticator instance."""
    return get_app_dependencies(request).session_authenticator


def get_bearer_token(request: Request) -> str | None:
    """Read the bearer token from the Authorization header, if any."""
    return parse_bearer_token(request.headers.get("Authorization"))


async def get_optional_identity(
    token: str | None = Depends(get_bearer_token),
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
) -> SessionIdentity | None:
    """Resolve the caller's identity; None for anonymous callers."""
    if token is None:
        return None
    return await authenticator.resolve(token)


async def require_identity(
    identity: SessionIdentity | None = Depends(get_optional_identity),
) -> SessionIdentity:
    """Reject the request with 401 unless it carries a live session."""
    if identity is None:
        logger.info("Rejected unauthenticated request")
        raise UnauthorizedError()
    return identity


def require_owner(
    user_id: int,
    identity: SessionIdentity = Depends(require_identity),
) -> SessionIdentity:
    """Allow only the user addressed by the ``user_id`` path parameter.

    Resolved as a dependency so a foreign id is refused before the body is read.
    """
    if identity.user_id != user_id:
        logger.warning("User {} attempted to modify user {}", identity.user_id, user_id)
        raise ForbiddenError()
    return identity
