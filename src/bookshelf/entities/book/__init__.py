"""Book entity module."""

from .entity import Book
from .repository import BookRepository
from .table import BookTable

__all__ = ["Book", "BookTable", "BookRepository"]
