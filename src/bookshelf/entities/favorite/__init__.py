"""Favorite entity module."""

from .entity import Favorite, FavoriteBook
from .repository import FavoriteRepository
from .table import FavoriteTable

__all__ = ["Favorite", "FavoriteBook", "FavoriteTable", "FavoriteRepository"]
