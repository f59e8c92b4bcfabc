"""
Field catalogs.

A `FieldCatalog` is the per-record-type metadata behind views: the closed,
ordered enumeration of field identifiers and, for each identifier, its
declaration rank, its serialized key and a way to write the field of a live
record into a structured-output sink.

Catalogs are derived from the pydantic model shape (`model_fields` followed by
`model_computed_fields`, the order in which pydantic emits them) exactly once
per type and cached on the class. Per-field encoding is always delegated to
the model's own serializer, so a field written through a catalog is encoded
exactly as it would be in a full `model_dump`.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

from pydantic import BaseModel

from record_view.errors import ForeignFieldError, ShapeError
from record_view.fields import ViewField
from record_view.sink import StructuredSink
from record_view.utils.logging import get_logger

log = get_logger(__name__)

_CATALOG_ATTR = "__view_catalog__"
_lock = threading.Lock()


@dataclass(frozen=True)
class CatalogEntry:
    """Metadata for one selectable field."""

    identifier: ViewField
    name: str
    rank: int
    key: str
    computed: bool = False


class FieldCatalog:
    """
    Closed field enumeration plus serialization metadata for one record type.

    Use `catalog_for(Model)` rather than constructing catalogs directly.
    """

    def __init__(self, record_type: Type[BaseModel], fields: Type[ViewField], entries: Tuple[CatalogEntry, ...]) -> None:
        self.record_type = record_type
        self.fields = fields
        self.entries = entries
        self._by_identifier: Dict[ViewField, CatalogEntry] = {e.identifier: e for e in entries}

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"FieldCatalog({self.record_type.__name__}, {[e.name for e in self.entries]!r})"

    def identifiers(self) -> Tuple[ViewField, ...]:
        return tuple(e.identifier for e in self.entries)

    def entry(self, identifier: ViewField) -> CatalogEntry:
        if type(identifier) is not self.fields:
            raise ForeignFieldError(identifier, self.fields)
        return self._by_identifier[identifier]

    def serialize_field(
        self,
        record: BaseModel,
        identifier: ViewField,
        sink: StructuredSink,
        **dump_options: Any,
    ) -> None:
        """
        Write one field of `record` into `sink`.

        The value is produced by the record's own serializer in the sink's
        mode with `dump_options` (by_alias, exclude_none, ...) applied, so the
        key and encoding match a full dump. A field dropped by those options
        (e.g. a None value with exclude_none) writes nothing. Encoding errors
        propagate unchanged.
        """
        entry = self.entry(identifier)
        if not isinstance(record, self.record_type):
            raise TypeError(
                f"Expected a {self.record_type.__name__} instance, got {type(record).__name__}"
            )
        encoded = record.model_dump(mode=sink.mode, include={entry.name}, **dump_options)
        for key, value in encoded.items():
            sink.write_field(key, value)


def _shape_of(record_type: Type[BaseModel]) -> List[Tuple[str, str, bool]]:
    """Return (name, serialized key, computed) triples in declaration order."""
    shape: List[Tuple[str, str, bool]] = []
    for name, info in record_type.model_fields.items():
        shape.append((name, info.serialization_alias or info.alias or name, False))
    for name, info in record_type.model_computed_fields.items():
        shape.append((name, info.alias or name, True))
    return shape


def _generate_fields(record_type: Type[BaseModel], names: List[str]) -> Type[ViewField]:
    members: List[Tuple[str, str]] = []
    seen: Dict[str, str] = {}
    for name in names:
        member = name.upper()
        if member in seen:
            raise ShapeError(
                f"{record_type.__name__}: fields '{seen[member]}' and '{name}' "
                f"both map to identifier '{member}'"
            )
        seen[member] = name
        members.append((member, name))

    return ViewField(  # type: ignore[call-overload]
        f"{record_type.__name__}Fields",
        members,
        module=record_type.__module__,
        qualname=f"{record_type.__qualname__}.Fields",
    )


def _check_fields(record_type: Type[BaseModel], fields: Any, names: List[str]) -> Type[ViewField]:
    if not (isinstance(fields, type) and issubclass(fields, ViewField)):
        raise ShapeError(f"{record_type.__name__}: {fields!r} is not a ViewField enumeration")
    declared = [member.value for member in fields]
    if declared != names:
        raise ShapeError(
            f"{record_type.__name__}: {fields.__name__} declares {declared!r} "
            f"but the model fields are {names!r}"
        )
    bound = fields.record_type()
    if bound is not None and bound is not record_type:
        raise ShapeError(f"{fields.__name__} is already bound to {bound.__name__}")
    return fields


def build_catalog(record_type: type, fields: Optional[Type[ViewField]] = None) -> FieldCatalog:
    """
    Derive a catalog for `record_type` without caching it.

    Parameters
    ----------
    record_type : type
        A pydantic model class.
    fields : type[ViewField], optional
        Hand-written field enumeration. Must list the model fields in
        declaration order. Generated when omitted.

    Raises
    ------
    ShapeError
        If the shape cannot be enumerated or does not match `fields`.
    """
    if not (isinstance(record_type, type) and issubclass(record_type, BaseModel)):
        raise ShapeError(f"{record_type!r} is not a pydantic model class")

    shape = _shape_of(record_type)
    names = [name for name, _, _ in shape]
    if fields is None:
        fields = _generate_fields(record_type, names)
    else:
        fields = _check_fields(record_type, fields, names)
    setattr(fields, "__record_type__", record_type)

    entries = tuple(
        CatalogEntry(identifier=member, name=name, rank=rank, key=key, computed=computed)
        for rank, (member, (name, key, computed)) in enumerate(zip(fields, shape))
    )
    return FieldCatalog(record_type, fields, entries)


def _install(record_type: type, fields: Optional[Type[ViewField]]) -> FieldCatalog:
    catalog = build_catalog(record_type, fields)
    setattr(record_type, _CATALOG_ATTR, catalog)
    log.debug(
        "Generated field catalog",
        extra={"record_type": record_type.__qualname__, "fields": len(catalog)},
    )
    return catalog


class _FieldsAccessor:
    """
    `Model.Fields` for registered models.

    Resolves through the accessing class, so a subclass sees its own
    enumeration rather than inheriting the parent's.
    """

    def __get__(self, instance: object, owner: type) -> Type[ViewField]:
        return catalog_for(owner).fields


def register(record_type: type, fields: Optional[Type[ViewField]] = None) -> FieldCatalog:
    """
    Generate (or validate) the catalog of `record_type` and expose its field
    enumeration as `record_type.Fields`.

    Calling `register` again for an already registered type returns the
    existing catalog; passing a different `fields` enumeration is an error.
    """
    if isinstance(record_type, type) and issubclass(record_type, BaseModel):
        if "Fields" in record_type.model_fields:
            raise ShapeError(f"{record_type.__name__}: 'Fields' is reserved for the field enumeration")

    with _lock:
        existing = _cached(record_type)
        if existing is not None:
            if fields is not None and fields is not existing.fields:
                raise ShapeError(
                    f"{record_type.__name__} is already registered with {existing.fields.__name__}"
                )
            catalog = existing
        else:
            catalog = _install(record_type, fields)

    if record_type.__dict__.get("Fields") is not catalog.fields:
        setattr(record_type, "Fields", _FieldsAccessor())
    return catalog


def _cached(record_type: type) -> Optional[FieldCatalog]:
    return record_type.__dict__.get(_CATALOG_ATTR) if isinstance(record_type, type) else None


def catalog_for(record_type: type) -> FieldCatalog:
    """
    Return the catalog for `record_type`, generating it on first use.

    The result is identical for every call, so identifiers obtained at
    different times are always interchangeable.
    """
    catalog = _cached(record_type)
    if catalog is not None:
        return catalog
    with _lock:
        catalog = _cached(record_type)
        if catalog is None:
            catalog = _install(record_type, None)
    return catalog


def identifiers_of(record_type: type) -> Tuple[ViewField, ...]:
    """Field identifiers of `record_type` in declaration order."""
    return catalog_for(record_type).identifiers()


__all__ = [
    "CatalogEntry",
    "FieldCatalog",
    "build_catalog",
    "catalog_for",
    "identifiers_of",
    "register",
]
