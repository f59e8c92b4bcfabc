"""
Exception taxonomy for record-view.

Most invalid states are unrepresentable because every record type owns a
closed enumeration of field identifiers. What remains:

- ShapeError: the record shape cannot be turned into a field catalog. Raised
  when the class is created or registered, never while serializing.
- UnknownFieldError: a field name string that the catalog does not know.
- ForeignFieldError: an identifier belonging to another record type. This is
  a programming error and is raised immediately.

Encoding failures of individual field values are pydantic's own errors and are
never wrapped.
"""

from __future__ import annotations

from typing import Optional


class ViewError(Exception):
    """Base class for all record-view errors."""


class ShapeError(ViewError, TypeError):
    """Raised when a record type's field catalog cannot be derived."""


class UnknownFieldError(ViewError, ValueError):
    """Raised when a field name does not exist on the record type."""

    def __init__(self, name: str, record_type: Optional[type] = None) -> None:
        self.name = name
        self.record_type = record_type
        owner = f" on {record_type.__name__}" if record_type is not None else ""
        super().__init__(f"Unknown field '{name}'{owner}")


class ForeignFieldError(ViewError, TypeError):
    """Raised when an identifier from another record type is used."""

    def __init__(self, identifier: object, expected: type) -> None:
        self.identifier = identifier
        self.expected = expected
        super().__init__(
            f"{identifier!r} is not a member of {expected.__name__}; "
            "identifiers cannot be mixed across record types"
        )


__all__ = ["ViewError", "ShapeError", "UnknownFieldError", "ForeignFieldError"]
