#!/usr/bin/env python3
"""
Domain exceptions raised by the request/match lifecycle.

The web layer maps each subclass to its own HTTP status; StorageError is
rendered as a generic failure.
"""

from typing import Dict, Optional


class TulenError(Exception):
    """Base exception for lifecycle errors."""
    pass


class NotFoundError(TulenError):
    """Entity does not exist or the caller cannot see it."""
    pass


class UnauthorizedError(TulenError):
    """Caller is not a legitimate party to the entity."""
    pass


class ConflictError(TulenError):
    """Entity is not in the state the transition requires (includes lost races)."""
    pass


class ValidationError(TulenError):
    """Malformed input."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class StorageError(TulenError):
    """Unexpected failure of the underlying store; the transaction was rolled back."""
    pass
