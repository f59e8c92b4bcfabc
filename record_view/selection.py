"""
Field selector sets.

A `FieldSet` is a run-time subset of one record type's field identifiers.
Membership is stored as a bitmask indexed by declaration rank, which gives
O(1) membership tests and iteration in declaration order regardless of the
order in which fields were inserted.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Type, Union

from record_view.errors import ForeignFieldError, UnknownFieldError
from record_view.fields import ViewField

FieldLike = Union[ViewField, str]


class FieldSet:
    """
    Set of field identifiers scoped to a single `ViewField` enumeration.

    Identifiers from another enumeration raise `ForeignFieldError`. Strings are
    accepted wherever an identifier is expected and resolved by field name.
    """

    __slots__ = ("_fields", "_mask")

    def __init__(self, fields: Type[ViewField], mask: int = 0) -> None:
        if not (isinstance(fields, type) and issubclass(fields, ViewField)):
            raise TypeError(f"{fields!r} is not a ViewField enumeration")
        self._fields = fields
        self._mask = mask & ((1 << len(fields)) - 1)

    @classmethod
    def empty(cls, fields: Type[ViewField]) -> "FieldSet":
        """No fields selected."""
        return cls(fields)

    @classmethod
    def full(cls, fields: Type[ViewField]) -> "FieldSet":
        """Every field selected."""
        return cls(fields, (1 << len(fields)) - 1)

    @classmethod
    def from_fields(cls, fields: Type[ViewField], items: Iterable[FieldLike]) -> "FieldSet":
        """Select exactly the given fields. Duplicates collapse, order is irrelevant."""
        selection = cls(fields)
        for item in items:
            selection.insert(item)
        return selection

    @property
    def fields(self) -> Type[ViewField]:
        return self._fields

    def _bit(self, item: FieldLike) -> int:
        if isinstance(item, str) and not isinstance(item, ViewField):
            item = self._fields.from_str(item)
        if type(item) is not self._fields:
            raise ForeignFieldError(item, self._fields)
        return 1 << item.rank

    def _check_compatible(self, other: "FieldSet") -> None:
        if other._fields is not self._fields:
            raise ForeignFieldError(other, self._fields)

    def insert(self, item: FieldLike) -> None:
        self._mask |= self._bit(item)

    def remove(self, item: FieldLike) -> None:
        """Remove a field; removing an absent field is a no-op."""
        self._mask &= ~self._bit(item)

    def contains(self, item: FieldLike) -> bool:
        return bool(self._mask & self._bit(item))

    def union(self, other: "FieldSet") -> "FieldSet":
        self._check_compatible(other)
        return FieldSet(self._fields, self._mask | other._mask)

    def difference(self, other: "FieldSet") -> "FieldSet":
        self._check_compatible(other)
        return FieldSet(self._fields, self._mask & ~other._mask)

    def copy(self) -> "FieldSet":
        return FieldSet(self._fields, self._mask)

    def iter(self) -> Iterator[ViewField]:
        """Yield selected identifiers in declaration order."""
        mask = self._mask
        for member in self._fields:
            if mask & (1 << member.rank):
                yield member

    def names(self) -> List[str]:
        return [member.value for member in self.iter()]

    def __iter__(self) -> Iterator[ViewField]:
        return self.iter()

    def __contains__(self, item: object) -> bool:
        if not isinstance(item, (ViewField, str)):
            return False
        try:
            return self.contains(item)
        except UnknownFieldError:
            return False

    def __len__(self) -> int:
        return bin(self._mask).count("1")

    def __bool__(self) -> bool:
        return self._mask != 0

    def __or__(self, other: "FieldSet") -> "FieldSet":
        if not isinstance(other, FieldSet):
            return NotImplemented
        return self.union(other)

    def __sub__(self, other: "FieldSet") -> "FieldSet":
        if not isinstance(other, FieldSet):
            return NotImplemented
        return self.difference(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FieldSet):
            return NotImplemented
        return self._fields is other._fields and self._mask == other._mask

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"FieldSet({self._fields.__name__}, {self.names()!r})"


__all__ = ["FieldSet", "FieldLike"]
