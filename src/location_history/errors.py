#!/usr/bin/env python3
"""
Exceptions raised by the location history package.
"""

from typing import Optional


class LocationHistoryError(Exception):
    """Base class for all location history errors."""


class IngestionError(LocationHistoryError, ValueError):
    """Raised when a location history export cannot be deserialized."""


class MalformedJSONError(IngestionError):
    """The export text is not valid JSON."""

    def __init__(self, message: str, line: int = 0, column: int = 0):
        super().__init__(f"{message} (line {line}, column {column})")
        self.line = line
        self.column = column


class InvalidFieldError(IngestionError):
    """A required field is missing or has the wrong shape."""

    def __init__(self, field: str, message: str, index: Optional[int] = None):
        if index is None:
            detail = f"'{field}': {message}"
        else:
            detail = f"locations[{index}].{field}: {message}"
        super().__init__(detail)
        self.field = field
        self.index = index


class EmptyLocationsError(LocationHistoryError, ValueError):
    """An operation that needs at least one sample was called on an empty series."""


class InsufficientDataError(LocationHistoryError, ValueError):
    """An operation that needs at least two samples was called on a shorter series."""
