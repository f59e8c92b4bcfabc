"""Record types shared by the test suite (importable as `sample_models`)."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, SerializationInfo, computed_field, field_serializer

from record_view import ViewField, ViewModel, view_model


class Product(ViewModel):
    id: str
    name: str = ""
    tags: List[str] = Field(default_factory=list)

    model_config = {"frozen": True}


class Reading(ViewModel):
    sensor_id: str = Field(..., serialization_alias="sensorId")
    value: Optional[float] = None
    taken_at: datetime
    unit: str = "C"

    @field_serializer("taken_at")
    def serialize_taken_at(self, taken_at: datetime) -> str:
        return taken_at.strftime("%Y-%m-%d %H:%M")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def label(self) -> str:
        return f"{self.sensor_id}:{self.unit}"


class MyRecordFields(ViewField):
    SOME_STRING = "some_string"
    FLAG = "flag"
    OPTIONAL_FLAG = "optional_flag"


@view_model(fields=MyRecordFields)
class MyRecord(BaseModel):
    some_string: str = "Hello World"
    flag: bool = True
    optional_flag: Optional[bool] = None


class Fragile(ViewModel):
    ok: int = 1
    broken: int = 2

    @field_serializer("broken")
    def serialize_broken(self, broken: int) -> int:
        raise ValueError("cannot encode broken")


class Plain(BaseModel):
    alpha: int
    beta: str = "b"


class Secret(ViewModel):
    owner: str = "ops"
    token: str = "abc"

    @field_serializer("token")
    def serialize_token(self, token: str, info: SerializationInfo) -> str:
        if info.context and info.context.get("mask"):
            return "***"
        return token
