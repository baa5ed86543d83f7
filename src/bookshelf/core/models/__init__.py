"""Core models."""

from .session import SessionIdentity

__all__ = ["SessionIdentity"]
