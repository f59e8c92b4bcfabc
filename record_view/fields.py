"""
Field identifiers.

Every viewable record type gets its own enumeration derived from `ViewField`,
with exactly one member per declared field, in declaration order. Member names
are the upper-cased field names and member values are the field names:

    class Product(ViewModel):
        id: str
        name: str = ""

    Product.Fields.ID          # <ProductFields.ID: 'id'>
    str(Product.Fields.NAME)   # 'name'
"""

from __future__ import annotations

import enum
import functools
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Type

from record_view.errors import UnknownFieldError

if TYPE_CHECKING:  # pragma: no cover
    from record_view.selection import FieldSet


class ViewField(enum.Enum):
    """Base class of all field enumerations."""

    def __str__(self) -> str:
        return self.value

    def as_str(self) -> str:
        """Return the field name this identifier stands for."""
        return self.value

    @property
    def rank(self) -> int:
        """Zero-based declaration position of the field."""
        return _ranks(type(self))[self]

    @classmethod
    def record_type(cls) -> Optional[type]:
        """The record type this enumeration was generated for (None if unbound)."""
        return cls.__dict__.get("__record_type__")

    @classmethod
    def from_str(cls, name: str) -> "ViewField":
        """
        Resolve a field name into its identifier.

        Raises
        ------
        UnknownFieldError
            If `name` is not a field of this record type.
        """
        member = cls._value2member_map_.get(name)
        if member is None:
            raise UnknownFieldError(name, cls.record_type())
        return member  # type: ignore[return-value]

    @classmethod
    def from_str_iter(cls, names: Iterable[str]) -> "FieldSet":
        """Resolve several field names into a selection; duplicates collapse."""
        from record_view.selection import FieldSet

        return FieldSet.from_fields(cls, (cls.from_str(name) for name in names))

    @classmethod
    def from_str_split(cls, names: str, sep: Optional[str] = None) -> "FieldSet":
        """
        Resolve a separated list such as "id,name" into a selection.

        Whitespace around names and empty items are ignored. The separator
        defaults to the configured `field_separator`.
        """
        if sep is None:
            from record_view.config import get_settings

            sep = get_settings().field_separator
        return cls.from_str_iter(part.strip() for part in names.split(sep) if part.strip())


@functools.lru_cache(maxsize=None)
def _ranks(fields: Type[ViewField]) -> Dict[ViewField, int]:
    return {member: index for index, member in enumerate(fields)}


__all__ = ["ViewField"]
