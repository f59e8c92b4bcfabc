"""
Views: a record plus the subset of its fields to serialize.

    view = as_view(product).with_fields([Product.Fields.ID, Product.Fields.NAME])
    view.model_dump()          # {'id': 'a1', 'name': 'Widget'}
    view.model_dump_json()     # '{"id":"a1","name":"Widget"}'
    TypeAdapter(View).dump_json(view)

A fresh view selects every field (see `Settings.default_selection`), so an
unmodified view serializes exactly like the record. Fluent methods return new
views and never mutate the receiver.

A view keeps a reference to its record and never copies it. Serializing a
view reads the record; do not mutate a record while another thread serializes
a view of it.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Union

from pydantic import BaseModel, GetCoreSchemaHandler
from pydantic_core import core_schema

from record_view.catalog import FieldCatalog, catalog_for
from record_view.config import get_settings
from record_view.errors import ForeignFieldError
from record_view.selection import FieldLike, FieldSet
from record_view.sink import DictSink, JsonSink, SinkMode, StructuredSink

FieldsArg = Union[FieldSet, Iterable[FieldLike], str]


def _dump_options(
    by_alias: Optional[bool] = None,
    exclude_none: bool = False,
    exclude_defaults: bool = False,
    exclude_unset: bool = False,
    context: Optional[Any] = None,
    round_trip: bool = False,
    warnings: Union[bool, str] = True,
    serialize_as_any: bool = False,
) -> Dict[str, Any]:
    options: Dict[str, Any] = {
        "exclude_none": exclude_none,
        "exclude_defaults": exclude_defaults,
        "exclude_unset": exclude_unset,
        "round_trip": round_trip,
        "warnings": warnings,
    }
    # None defers to the model's own alias configuration.
    if by_alias is not None:
        options["by_alias"] = by_alias
    if context is not None:
        options["context"] = context
    if serialize_as_any:
        options["serialize_as_any"] = serialize_as_any
    return options

class View:
    """
    A record paired with a field selection.

    Parameters
    ----------
    record : BaseModel
        The record to serialize. Held by reference.
    fields : FieldSet | iterable | str, optional
        Initial selection. When omitted the configured default applies
        ("all" unless RECORD_VIEW_DEFAULT_SELECTION=none).
    """

    __slots__ = ("_record", "_catalog", "_selection")

    def __init__(self, record: BaseModel, fields: Optional[FieldsArg] = None) -> None:
        self._record = record
        self._catalog: FieldCatalog = catalog_for(type(record))
        if fields is None:
            if get_settings().default_selection == "all":
                self._selection = FieldSet.full(self._catalog.fields)
            else:
                self._selection = FieldSet.empty(self._catalog.fields)
        else:
            self._selection = self._to_selection(fields)

    def _to_selection(self, fields: FieldsArg) -> FieldSet:
        if isinstance(fields, FieldSet):
            if fields.fields is not self._catalog.fields:
                raise ForeignFieldError(fields, self._catalog.fields)
            return fields.copy()
        if isinstance(fields, str):
            return self._catalog.fields.from_str_split(fields)
        return FieldSet.from_fields(self._catalog.fields, fields)

    def _replace(self, selection: FieldSet) -> "View":
        view = type(self).__new__(type(self))
        view._record = self._record
        view._catalog = self._catalog
        view._selection = selection
        return view

    @property
    def record(self) -> BaseModel:
        return self._record

    @property
    def catalog(self) -> FieldCatalog:
        return self._catalog

    @property
    def fields(self) -> FieldSet:
        """A copy of the current selection."""
        return self._selection.copy()

    def with_fields(self, fields: FieldsArg) -> "View":
        """
        Return a view selecting exactly `fields`, replacing the current selection.

        `fields` may be a FieldSet, an iterable of identifiers or field names,
        or a separated string such as "id,name".
        """
        return self._replace(self._to_selection(fields))

    def add_fields(self, fields: FieldsArg) -> "View":
        """Return a view selecting the current fields plus `fields`."""
        return self._replace(self._selection.union(self._to_selection(fields)))

    def add_field(self, field: FieldLike) -> "View":
        selection = self._selection.copy()
        selection.insert(field)
        return self._replace(selection)

    def without_fields(self, fields: FieldsArg) -> "View":
        """Return a view with `fields` removed from the current selection."""
        return self._replace(self._selection.difference(self._to_selection(fields)))

    def serialize(self, sink: StructuredSink, **dump_options: Any) -> Any:
        """
        Write the selected fields into `sink` and return the sink's result.

        Fields are written in declaration order, each at most once, encoded by
        the record's own serializer. An empty selection produces an empty
        object. The first encoding error aborts serialization and propagates.
        """
        sink.begin_object(len(self._selection))
        for identifier in self._selection:
            self._catalog.serialize_field(self._record, identifier, sink, **dump_options)
        return sink.end_object()

    def model_dump(
        self,
        *,
        mode: SinkMode = "python",
        by_alias: Optional[bool] = None,
        exclude_none: bool = False,
        exclude_defaults: bool = False,
        exclude_unset: bool = False,
        context: Optional[Any] = None,
        round_trip: bool = False,
        warnings: Union[bool, str] = True,
        serialize_as_any: bool = False,
    ) -> Dict[str, Any]:
        """Serialize the view to a dict, like `BaseModel.model_dump`."""
        return self.serialize(
            DictSink(mode),
            **_dump_options(
                by_alias,
                exclude_none,
                exclude_defaults,
                exclude_unset,
                context,
                round_trip,
                warnings,
                serialize_as_any,
            ),
        )

    def model_dump_json(
        self,
        *,
        indent: Optional[int] = None,
        by_alias: Optional[bool] = None,
        exclude_none: bool = False,
        exclude_defaults: bool = False,
        exclude_unset: bool = False,
        context: Optional[Any] = None,
        round_trip: bool = False,
        warnings: Union[bool, str] = True,
        serialize_as_any: bool = False,
    ) -> str:
        """Serialize the view to JSON, like `BaseModel.model_dump_json`."""
        return self.serialize(
            JsonSink(indent=indent),
            **_dump_options(
                by_alias,
                exclude_none,
                exclude_defaults,
                exclude_unset,
                context,
                round_trip,
                warnings,
                serialize_as_any,
            ),
        )

    @staticmethod
    def _serialize_for_pydantic(view: "View", info: core_schema.SerializationInfo) -> Dict[str, Any]:
        return view.model_dump(
            mode="json" if info.mode_is_json() else "python",
            by_alias=info.by_alias,
            exclude_none=info.exclude_none,
            exclude_defaults=info.exclude_defaults,
            exclude_unset=info.exclude_unset,
            context=info.context,
            round_trip=info.round_trip,
            serialize_as_any=getattr(info, "serialize_as_any", False),
        )

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Views are output-only: validation accepts existing instances as-is.
        return core_schema.is_instance_schema(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(
                cls._serialize_for_pydantic, info_arg=True
            ),
        )

    def __repr__(self) -> str:
        return f"View({type(self._record).__name__}, {self._selection.names()!r})"


def as_view(record: BaseModel, fields: Optional[FieldsArg] = None) -> View:
    """Wrap `record` in a View (all fields selected unless `fields` is given)."""
    return View(record, fields)


__all__ = ["View", "as_view"]
