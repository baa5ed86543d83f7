from loguru import logger

from src.bookshelf.core.errors import SessionStoreUnavailableError
from src.bookshelf.core.models.session import SessionIdentity
from src.bookshelf.core.security import generate_session_token, redact_token
from src.bookshelf.core.storage.session_storage import (
    SessionPayloadError,
    SessionStorage,
    SessionStoreError,
)


class SessionAuthenticator:
    """Maps bearer tokens to identities and manages the token lifecycle.

    A session record's presence in the store is the only proof of
    authentication. Expiry is left entirely to the store's TTL; sessions are
    not renewed on use.
    """

    def __init__(
        self,
        session_storage: SessionStorage,
        ttl_seconds: int = 3600,
        key_prefix: str = "session:",
        treat_store_errors_as_anonymous: bool = False,
    ) -> None:
        self._storage = session_storage
        self._ttl_seconds = ttl_seconds
        self._key_prefix = key_prefix
        self._anonymous_on_store_error = treat_store_errors_as_anonymous

    def session_key(self, token: str) -> str:
        return f"{self._key_prefix}{token}"

    async def issue(self, identity: SessionIdentity) -> str:
        """Create a fresh session for ``identity`` and return its token.

        Every call yields an independent token; existing sessions of the same
        identity are left alone.

        Raises:
            SessionStoreUnavailableError: If the record could not be written
        """
        token = generate_session_token()
        try:
            await self._storage.set(self.session_key(token), identity, self._ttl_seconds)
        except SessionStoreError as e:
            logger.error("Failed to store session for user {}: {}", identity.user_id, e)
            raise SessionStoreUnavailableError() from e

        logger.info(
            "Session issued", user_id=identity.user_id, token=redact_token(token)
        )
        return token

    async def resolve(self, token: str) -> SessionIdentity | None:
        """Return the identity behind ``token``, or None when there is no live session.

        Unknown, revoked and expired tokens resolve to None. A malformed record is
        purged and also resolves to None.

        Raises:
            SessionStoreUnavailableError: If the store fails and store errors
                are not configured to count as anonymous
        """
        key = self.session_key(token)
        try:
            return await self._storage.get(key, SessionIdentity)
        except SessionPayloadError:
            logger.warning("Discarding malformed session record", token=redact_token(token))
            await self._discard(key)
            return None
        except SessionStoreError as e:
            if self._anonymous_on_store_error:
                logger.warning("Session lookup failed, treating caller as anonymous: {}", e)
                return None
            logger.error("Session lookup failed: {}", e)
            raise SessionStoreUnavailableError() from e

    async def revoke(self, token: str) -> None:
        """Delete the session behind ``token``; absent tokens are a no-op.

        Raises:
            SessionStoreUnavailableError: If the delete could not be executed
        """
        try:
            await self._storage.delete(self.session_key(token))
        except SessionStoreError as e:
            logger.error("Failed to revoke session: {}", e)
            raise SessionStoreUnavailableError() from e
        logger.info("Session revoked", token=redact_token(token))

    async def _discard(self, key: str) -> None:
        try:
            await self._storage.delete(key)
        except SessionStoreError as e:
            logger.warning("Could not delete malformed session record: {}", e)
