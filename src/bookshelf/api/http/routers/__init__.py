"""HTTP routers."""

from . import auth, books, favorites, health, users

__all__ = ["auth", "books", "favorites", "health", "users"]
