"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.bookshelf.core.services.database.db_utils import enable_sqlite_foreign_keys
from src.bookshelf.runtime.config.config_data import ConfigData


class DbSessionService:
    def __init__(self, config: ConfigData):
        """Initialize the shared database engine and session factory."""

        db_config = config.database
        logger.info(
            "Configuring database engine for environment: {}", config.app.environment
        )

        engine_kwargs: dict = {
            "echo": db_config.echo,
            "connect_args": self._get_connect_args(config),
        }

        if db_config.is_sqlite:
            if ":memory:" in db_config.url or db_config.url == "sqlite://":
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs.update(
                {
                    "pool_size": db_config.pool_size,
                    "max_overflow": db_config.max_overflow,
                    "pool_timeout": db_config.pool_timeout,
                    "pool_recycle": db_config.pool_recycle,
                    "pool_pre_ping": True,  # Validate connections before use
                }
            )

        self._engine = create_engine(db_config.url, **engine_kwargs)

        if db_config.is_sqlite:
            enable_sqlite_foreign_keys(self._engine)
            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        logger.info(
            "Database engine initialized",
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
        )

    @staticmethod
    def _get_connect_args(config: ConfigData) -> dict:
        """Get database-specific connection arguments."""
        if config.database.is_postgresql:
            return {
                # Application name for connection tracking
                "application_name": f"bookshelf_{config.app.environment}",
                "connect_timeout": 30,
            }
        if config.database.is_sqlite:
            # Sync handlers run on a threadpool
            return {"check_same_thread": False, "timeout": 20}
        return {}

    @property
    def engine(self):
        return self._engine

    def create_all(self) -> None:
        """Create all database tables."""
        # Register table models with the metadata
        from src.bookshelf.entities import BookTable, FavoriteTable, UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        logger.info("Database initialized with tables.")

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(
            self._engine,
            expire_on_commit=False,  # Prevent lazy loading issues
            autoflush=True,
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Context manager style helper for scripts and tests."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed: {}: {}", type(e).__name__, e
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.error("Database health check failed: {}: {}", type(e).__name__, e)
            return False

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()
