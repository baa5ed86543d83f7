from dataclasses import dataclass

from src.bookshelf.core.services import (
    DbSessionService,
    RedisService,
    SessionAuthenticator,
)
from src.bookshelf.core.storage import SessionStorage
from src.bookshelf.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    redis_service: RedisService
    session_storage: SessionStorage
    session_authenticator: SessionAuthenticator
