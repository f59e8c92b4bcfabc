from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor
from itertools import combinations

import pytest
from pydantic import BaseModel, TypeAdapter

from record_view import ForeignFieldError, UnknownFieldError, View, as_view
from record_view.config import get_settings
from sample_models import Fragile, MyRecord, Plain, Product, Reading, Secret

F = Product.Fields


def test_example_selection_keeps_only_selected_fields(product: Product):
    view = product.as_view().with_fields([F.ID, F.NAME])

    assert view.model_dump() == {"id": "a1", "name": "Widget"}


def test_duplicate_and_reordered_selection_uses_declaration_order(product: Product):
    view = product.as_view().with_fields([F.TAGS, F.ID, F.TAGS])

    dumped = view.model_dump()
    assert list(dumped) == ["id", "tags"]
    assert dumped == {"id": "a1", "tags": ["x", "y"]}
    assert view.model_dump_json() == '{"id":"a1","tags":["x","y"]}'


def test_every_subset_matches_full_record_encoding(product: Product):
    members = list(F)
    for size in range(1, len(members) + 1):
        for subset in combinations(members, size):
            names = {member.value for member in subset}
            view = product.as_view().with_fields(reversed(subset))
            assert set(view.model_dump()) == names
            assert view.model_dump_json() == product.model_dump_json(include=names)


def test_empty_selection_serializes_to_empty_object(product: Product):
    view = product.as_view().with_fields([])

    assert view.model_dump() == {}
    assert view.model_dump_json() == "{}"


def test_default_view_serializes_like_the_record(product: Product, reading: Reading):
    assert product.as_view().model_dump() == product.model_dump()
    assert product.as_view().model_dump_json() == product.model_dump_json()
    assert as_view(reading).model_dump_json() == reading.model_dump_json()


def test_default_selection_none_from_settings(monkeypatch: pytest.MonkeyPatch, product: Product):
    monkeypatch.setenv("RECORD_VIEW_DEFAULT_SELECTION", "none")
    get_settings.cache_clear()

    view = product.as_view()

    assert len(view.fields) == 0
    assert view.model_dump() == {}


def test_with_fields_replaces_previous_selection(product: Product):
    view = product.as_view().with_fields([F.ID, F.NAME]).with_fields([F.TAGS])

    assert view.model_dump() == {"tags": ["x", "y"]}


def test_fluent_methods_do_not_mutate_source_view(product: Product):
    base = product.as_view().with_fields([F.ID])
    wider = base.add_field(F.NAME)

    assert base.model_dump() == {"id": "a1"}
    assert wider.model_dump() == {"id": "a1", "name": "Widget"}


def test_add_fields_unions_and_without_fields_removes(product: Product):
    view = product.as_view().with_fields([F.ID]).add_fields(["tags", F.ID])
    assert view.fields.names() == ["id", "tags"]

    assert view.without_fields([F.ID, F.NAME]).model_dump() == {"tags": ["x", "y"]}


def test_with_fields_accepts_names_and_separated_string(product: Product):
    assert product.as_view().with_fields(["name", "id"]).model_dump() == {
        "id": "a1",
        "name": "Widget",
    }
    assert product.as_view().with_fields("tags, id").model_dump() == {
        "id": "a1",
        "tags": ["x", "y"],
    }


def test_unknown_field_name_is_rejected(product: Product):
    with pytest.raises(UnknownFieldError):
        product.as_view().with_fields(["id", "price"])


def test_foreign_identifier_is_rejected(product: Product):
    with pytest.raises(ForeignFieldError):
        product.as_view().with_fields([F.ID, MyRecord.Fields.FLAG])


def test_foreign_field_set_is_rejected(product: Product):
    with pytest.raises(ForeignFieldError):
        product.as_view().with_fields(MyRecord.Fields.from_str_split("flag"))


def test_view_does_not_copy_record(product: Product):
    view = as_view(product)

    assert view.record is product


def test_serialization_can_repeat(product: Product):
    view = product.as_view().with_fields([F.NAME])

    assert view.model_dump() == view.model_dump() == {"name": "Widget"}


def test_manual_field_enumeration():
    view = as_view(MyRecord()).with_fields([MyRecord.Fields.SOME_STRING])

    assert view.model_dump() == {"some_string": "Hello World"}


def test_manual_enumeration_from_names():
    view = as_view(MyRecord()).with_fields(MyRecord.Fields.from_str_iter("some_string,flag".split(",")))

    assert view.model_dump() == {"some_string": "Hello World", "flag": True}


def test_plain_model_gets_catalog_on_first_use():
    view = as_view(Plain(alpha=3)).with_fields(["beta"])

    assert view.model_dump() == {"beta": "b"}


def test_aliases_follow_full_record_behaviour(reading: Reading):
    fields = [Reading.Fields.SENSOR_ID, Reading.Fields.UNIT]
    view = reading.as_view().with_fields(fields)

    assert view.model_dump(by_alias=True) == {"sensorId": "s-7", "unit": "C"}
    assert view.model_dump() == reading.model_dump(include={"sensor_id", "unit"})


def test_field_serializers_and_computed_fields_are_applied(reading: Reading):
    view = reading.as_view().with_fields([Reading.Fields.LABEL, Reading.Fields.TAKEN_AT])

    assert view.model_dump() == {"taken_at": "2024-05-01 12:30", "label": "s-7:C"}


def test_exclude_none_drops_selected_none_values(reading: Reading):
    record = reading.model_copy(update={"value": None})
    view = record.as_view().with_fields([Reading.Fields.VALUE, Reading.Fields.UNIT])

    assert view.model_dump() == {"value": None, "unit": "C"}
    assert view.model_dump(exclude_none=True) == {"unit": "C"}


def test_json_mode_python_dump(reading: Reading):
    view = reading.as_view().with_fields([Reading.Fields.VALUE])

    assert view.model_dump(mode="json") == {"value": 21.5}


def test_encoding_failure_propagates_unchanged():
    record = Fragile()
    with pytest.raises(Exception) as full_error:
        record.model_dump()

    with pytest.raises(type(full_error.value)) as view_error:
        record.as_view().model_dump()

    assert str(view_error.value) == str(full_error.value)


def test_unselected_broken_field_is_never_encoded():
    assert Fragile().as_view().with_fields([Fragile.Fields.OK]).model_dump_json() == '{"ok":1}'


def test_indent_matches_model_dump_json(product: Product):
    view = product.as_view().with_fields([F.ID, F.TAGS])

    assert view.model_dump_json(indent=2) == product.model_dump_json(indent=2, include={"id", "tags"})


def test_type_adapter_serializes_through_view(product: Product):
    view = product.as_view().with_fields([F.TAGS, F.ID])
    adapter = TypeAdapter(View)

    assert adapter.dump_python(view) == {"id": "a1", "tags": ["x", "y"]}
    assert json.loads(adapter.dump_json(view)) == {"id": "a1", "tags": ["x", "y"]}
    assert adapter.dump_json(view).decode() == view.model_dump_json()


def test_view_nested_in_model(product: Product):
    class Envelope(BaseModel):
        kind: str
        data: View

    envelope = Envelope(kind="product", data=product.as_view().with_fields("name"))

    assert envelope.model_dump() == {"kind": "product", "data": {"name": "Widget"}}
    assert envelope.model_dump_json() == '{"kind":"product","data":{"name":"Widget"}}'


def test_repr_lists_selected_fields(product: Product):
    assert repr(product.as_view().with_fields([F.TAGS, F.ID])) == "View(Product, ['id', 'tags'])"


def test_context_reaches_field_serializers():
    record = Secret()
    view = record.as_view().with_fields([Secret.Fields.TOKEN])

    assert view.model_dump(context={"mask": True}) == {"token": "***"}
    assert view.model_dump_json(context={"mask": True}) == '{"token":"***"}'
    assert view.model_dump() == {"token": "abc"}


def test_context_forwarded_when_nested_in_model():
    class Wrapped(BaseModel):
        data: View

    class WrappedRecord(BaseModel):
        data: Secret

    record = Secret()
    expected = WrappedRecord(data=record).model_dump(context={"mask": True})

    assert Wrapped(data=record.as_view()).model_dump(context={"mask": True}) == expected
    assert expected == {"data": {"owner": "ops", "token": "***"}}


def test_round_trip_option_matches_record(product: Product):
    view = product.as_view().with_fields([F.ID, F.TAGS])

    assert view.model_dump(round_trip=True) == product.model_dump(round_trip=True, include={"id", "tags"})


def test_concurrent_views_of_shared_record(product: Product):
    views = [product.as_view().with_fields([F.TAGS, F.ID]) for _ in range(8)]

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda v: [v.model_dump() for _ in range(50)], views))

    assert all(dump == {"id": "a1", "tags": ["x", "y"]} for batch in results for dump in batch)
