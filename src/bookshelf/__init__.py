"""Bookshelf API: users, books and favorites behind session authentication."""

__version__ = "0.1.0"
