"""Database initialization script."""

from src.bookshelf.core.services import DbSessionService
from src.bookshelf.runtime.context import get_config


def init_db() -> None:
    """Create all database tables."""
    db_service = DbSessionService(get_config())
    try:
        db_service.create_all()
    finally:
        db_service.dispose()


if __name__ == "__main__":
    init_db()
