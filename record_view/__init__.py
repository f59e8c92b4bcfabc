"""
record-view - serialize run-time selected subsets of pydantic records.

A record type gets a closed enumeration of field identifiers generated from
its declared shape. A `View` pairs a record with a `FieldSet` of those
identifiers and serializes exactly the selected fields, in declaration order,
with the same per-field encoding as the full record:

    from record_view import ViewModel

    class Product(ViewModel):
        id: str
        name: str = ""
        tags: list[str] = []

    Product(id="a1", name="Widget").as_view().with_fields(
        [Product.Fields.ID, Product.Fields.NAME]
    ).model_dump()
    # {'id': 'a1', 'name': 'Widget'}
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from record_view.catalog import (
    CatalogEntry,
    FieldCatalog,
    build_catalog,
    catalog_for,
    identifiers_of,
    register,
)
from record_view.config import Settings, get_settings
from record_view.errors import ForeignFieldError, ShapeError, UnknownFieldError, ViewError
from record_view.fields import ViewField
from record_view.models import ViewModel, view_model
from record_view.selection import FieldSet
from record_view.sink import DictSink, JsonSink, StructuredSink
from record_view.utils.logging import configure_logging, get_logger
from record_view.view import View, as_view

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Field catalog
    "CatalogEntry",
    "FieldCatalog",
    "ViewField",
    "build_catalog",
    "catalog_for",
    "identifiers_of",
    "register",
    "ViewModel",
    "view_model",
    # Selection and views
    "FieldSet",
    "View",
    "as_view",
    # Sinks
    "StructuredSink",
    "DictSink",
    "JsonSink",
    # Errors
    "ViewError",
    "ShapeError",
    "UnknownFieldError",
    "ForeignFieldError",
    # Configuration
    "Settings",
    "get_settings",
    # Logging
    "configure_logging",
    "get_logger",
]
