"""Resolve "package.module:ClassName" references to record types."""

from __future__ import annotations

from importlib import import_module
from typing import Type

from pydantic import BaseModel


class RecordTypeLoadError(RuntimeError):
    """Raised when a record type reference cannot be imported or is not a model."""


def load_record_type(reference: str) -> Type[BaseModel]:
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise RecordTypeLoadError(
            f"Invalid record type '{reference}'; expected 'package.module:ClassName'"
        )
    try:
        target: object = import_module(module_name)
    except ImportError as exc:
        raise RecordTypeLoadError(f"Module '{module_name}' could not be imported") from exc

    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise RecordTypeLoadError(f"'{attr_path}' not found in module '{module_name}'") from exc

    if not (isinstance(target, type) and issubclass(target, BaseModel)):
        raise RecordTypeLoadError(f"'{reference}' is not a pydantic model class")
    return target


__all__ = ["RecordTypeLoadError", "load_record_type"]
