"""Custom exceptions for the user model."""

from __future__ import annotations


class FlagpoleError(Exception):
    """Base exception for user model errors."""

    pass


class PersistenceError(FlagpoleError):
    """Raised when the local key-value store cannot be written."""

    pass
