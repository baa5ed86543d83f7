"""Application error taxonomy.

Handlers raise these; a single exception handler renders them as
``{"message": ...}`` JSON with the matching status code.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, **extra: Any) -> None:
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"message": self.message, **self.extra}


class UnauthorizedError(ApiError):
    status_code = 401
    default_message = "Unauthorized: No active session or token invalid."


class ForbiddenError(ApiError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(ApiError):
    status_code = 404
    default_message = "Not found"


class ConflictError(ApiError):
    status_code = 409
    default_message = "Resource already exists."


class SessionStoreUnavailableError(ApiError):
    """The session store could not be consulted, so authentication is unknown."""

    status_code = 503
    default_message = "Session store unavailable"
