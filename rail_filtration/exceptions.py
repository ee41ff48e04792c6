"""
Custom exceptions for the filtration engine.

This module defines the error types surfaced to callers when request
parameters cannot be turned into a query.
"""

from typing import List, Optional, Sequence


class FiltrationError(Exception):
    """Base exception for filtration errors."""


class FieldsNotAcceptedError(FiltrationError, ValueError):
    """Raised when a ``searchFields`` override rejects every searchable field."""

    message_key = "filter.fields_not_accepted"

    def __init__(self, fields: Sequence[str], message: Optional[str] = None):
        self.fields: List[str] = list(fields)
        if message is None:
            message = (
                f"{self.message_key}: none of the requested search fields are "
                f"accepted ({','.join(self.fields)})"
            )
        super().__init__(message)


class UnknownFilterError(FiltrationError, LookupError):
    """Raised when an active filter key has no usable handler factory."""

    def __init__(self, key: str, message: Optional[str] = None):
        self.key = key
        super().__init__(message or f"No filter handler registered for '{key}'")


__all__ = ["FiltrationError", "FieldsNotAcceptedError", "UnknownFilterError"]
