"""
Base model for viewable records.

Subclasses of `ViewModel` get their field enumeration generated when the class
is created, exposed as `Model.Fields`, and an `as_view()` method:

    class Product(ViewModel):
        id: str
        name: str = ""
        tags: list[str] = []

    product.as_view().with_fields([Product.Fields.ID, Product.Fields.TAGS])

A nested `class Fields(ViewField)` may be declared instead of the generated
one; it must list the model fields in declaration order.

Plain `BaseModel` classes can opt in with the `view_model` decorator, or be
used with `as_view` directly (their catalog is generated on first use).
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, Optional, Type, TypeVar, overload

from pydantic import BaseModel

from record_view.catalog import register
from record_view.fields import ViewField
from record_view.view import FieldsArg, View

ModelT = TypeVar("ModelT", bound=Type[BaseModel])


class ViewModel(BaseModel):
    """Pydantic model with a generated field enumeration and `as_view()`."""

    Fields: ClassVar[Type[ViewField]]

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        register(cls, cls.__dict__.get("Fields"))

    def as_view(self, fields: Optional[FieldsArg] = None) -> View:
        return View(self, fields)


@overload
def view_model(record_type: ModelT) -> ModelT: ...


@overload
def view_model(*, fields: Type[ViewField]) -> Callable[[ModelT], ModelT]: ...


def view_model(record_type: Any = None, *, fields: Optional[Type[ViewField]] = None) -> Any:
    """
    Class decorator registering a plain pydantic model for views.

    Sets `Model.Fields` to the generated enumeration, or validates and binds
    the hand-written `fields` enumeration.
    """

    def decorator(cls: ModelT) -> ModelT:
        register(cls, fields)
        return cls

    if record_type is None:
        return decorator
    return decorator(record_type)


__all__ = ["ViewModel", "view_model"]
