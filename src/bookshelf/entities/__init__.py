"""Domain entities, their tables and repositories."""

from .book import Book, BookRepository, BookTable
from .favorite import Favorite, FavoriteBook, FavoriteRepository, FavoriteTable
from .user import User, UserRepository, UserTable

__all__ = [
    "Book",
    "BookRepository",
    "BookTable",
    "Favorite",
    "FavoriteBook",
    "FavoriteRepository",
    "FavoriteTable",
    "User",
    "UserRepository",
    "UserTable",
]
