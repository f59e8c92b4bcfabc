"""
Structured-output sinks.

A sink receives (key, encoded value) pairs between `begin_object` and
`end_object`. Values arrive already encoded by pydantic for the sink's `mode`,
so a sink only assembles the object; it never encodes field values itself.
"""

from __future__ import annotations

from typing import Any, Dict, Literal, Optional, Protocol, runtime_checkable

import pydantic_core

SinkMode = Literal["python", "json"]


@runtime_checkable
class StructuredSink(Protocol):
    """
    Protocol every sink implements.

    Attributes
    ----------
    mode : str
        "python" for Python objects, "json" for JSON-compatible values.
    """

    mode: SinkMode

    def begin_object(self, length: Optional[int] = None) -> None:
        ...

    def write_field(self, key: str, value: Any) -> None:
        ...

    def end_object(self) -> Any:
        ...


class DictSink:
    """Collect fields into an insertion-ordered dict."""

    def __init__(self, mode: SinkMode = "python") -> None:
        self.mode: SinkMode = mode
        self._data: Optional[Dict[str, Any]] = None

    def begin_object(self, length: Optional[int] = None) -> None:
        if self._data is not None:
            raise RuntimeError("begin_object called twice without end_object")
        self._data = {}

    def write_field(self, key: str, value: Any) -> None:
        if self._data is None:
            raise RuntimeError("write_field called outside of an object")
        self._data[key] = value

    def end_object(self) -> Dict[str, Any]:
        if self._data is None:
            raise RuntimeError("end_object called without begin_object")
        data, self._data = self._data, None
        return data


class JsonSink(DictSink):
    """
    Emit a JSON document.

    Fields are buffered and rendered with pydantic-core on `end_object`, so the
    output matches `model_dump_json` of the same fields and a failure while
    encoding a field leaves nothing written.
    """

    def __init__(self, indent: Optional[int] = None) -> None:
        super().__init__(mode="json")
        self.indent = indent

    def end_object(self) -> str:  # type: ignore[override]
        data = super().end_object()
        return pydantic_core.to_json(data, indent=self.indent).decode("utf-8")


__all__ = ["StructuredSink", "DictSink", "JsonSink", "SinkMode"]
