"""Column Profiler — Core Exceptions.

Domain-specific exceptions for the profiling engine.
Request-level errors abort the whole run; field-level errors are caught by
the orchestrator and recorded next to the fields that did succeed.

Usage:
    from core.exceptions import FieldNotFoundError, InvalidSelectionError

    class MyProvider:
        def get_column_values(self, field_name: str):
            if field_name not in self.columns:
                raise FieldNotFoundError(field_name)
            return self.columns[field_name]
"""

from __future__ import annotations

from typing import Any


class ProfilerBaseException(Exception):
    """Base exception for all column profiler domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for host-layer reporting."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class InvalidSelectionError(ProfilerBaseException):
    """Raised when the requested field selection is not acceptable.

    Zero fields, too many fields, or duplicate field names. Aborts the
    request before any column is loaded.

    Attributes:
        field_names: The selection as received.
        reason: Short description of what is wrong with it.
    """

    def __init__(self, reason: str, field_names: list[str] | None = None):
        self.reason = reason
        self.field_names = list(field_names or [])
        super().__init__(
            f"Invalid field selection: {reason}",
            {"reason": reason, "field_names": self.field_names},
        )


class FieldNotFoundError(ProfilerBaseException):
    """Raised when a requested field does not exist in the dataset.

    Reported per field; sibling fields are still profiled.
    """

    def __init__(self, field_name: str):
        self.field_name = field_name
        super().__init__(
            f"Field '{field_name}' not found in dataset",
            {"field_name": field_name},
        )


class DataLoadFailure(ProfilerBaseException):
    """Raised when the column provider fails to return values for a field.

    Attributes:
        field_name: Field whose values could not be loaded.
        original_error: The underlying error message.
    """

    def __init__(self, field_name: str, original_error: str):
        self.field_name = field_name
        self.original_error = original_error
        super().__init__(
            f"Failed to load values for field '{field_name}': {original_error}",
            {"field_name": field_name, "error": original_error},
        )
