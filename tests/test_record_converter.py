"""Unit tests for typed record conversion."""

# Module responsibilities:
# - Validate key-to-field matching priority, zero values and value preparation.
# - Assert the batch aborts on the first record that cannot be converted.

from __future__ import annotations

from collections import OrderedDict
from dataclasses import MISSING, dataclass, field, make_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, Mapping, Optional, Union

import pytest
from pydantic import BaseModel, Field

from sheetflow_io.errors import RecordConversionError
from sheetflow_io.header_mapper import HeaderMapper
from sheetflow_io.record_converter import (
    RecordConverter,
    convert_records,
    header_field,
    is_mapping_target,
    normalize_name,
    prepare_value,
    record_schema,
    zero_value,
)
from sheetflow_io.workbook import GridSheet


class Status(Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Person:
    name: str
    age: int
    nickname: Optional[str] = None


@dataclass
class Order:
    order_id: int
    order_date: date
    amount: Decimal
    paid: bool = False
    status: Status = Status.OPEN
    tags: list = field(default_factory=list)


@dataclass
class Contact:
    full_name: str = header_field("Name")
    email: str = ""


@dataclass
class BadHeaders:
    first: str = header_field("X")
    second: str = header_field("X")


class PersonModel(BaseModel):
    name: str = Field(alias="Name")
    age: int = 0
    joined: Optional[datetime] = None


@dataclass
class Event:
    name: str
    when: date


class EventModel(BaseModel):
    name: str
    when: date


def _converter(rows: list) -> RecordConverter:
    return RecordConverter(HeaderMapper(GridSheet(rows)))


def test_mapping_targets_return_records_unchanged() -> None:
    records = [{"Name": "Bob"}]

    for target in (dict, OrderedDict, Mapping, Dict[str, object]):
        assert is_mapping_target(target)
        assert convert_records(records, target) is records


def test_dataclass_conversion_matches_normalized_headers() -> None:
    rows = [
        ["Order ID", "orderDate", "Amount", "Paid", "Status"],
        ["1001", datetime(2024, 5, 10), "1,200.50", "yes", "closed"],
        [1002.0, "2024-05-11", 99, 0, "open"],
    ]
    orders = _converter(rows).to_records(0, 1, None, Order)

    assert orders[0] == Order(1001, date(2024, 5, 10), Decimal("1200.50"), True, Status.CLOSED)
    assert orders[1] == Order(1002, date(2024, 5, 11), Decimal("99"), False, Status.OPEN)


def test_unmatched_fields_get_zero_or_default_and_extra_keys_are_ignored() -> None:
    people = _converter([["Name", "Unknown"], ["Bob", "ignored"]]).to_records(0, 1, None, Person)

    assert people == [Person(name="Bob", age=0, nickname=None)]


def test_blank_cell_counts_as_missing_for_non_text_fields() -> None:
    people = _converter([["name", "age", "nickname"], ["Ann", None, None]]).to_records(0, 1, None, Person)

    assert people == [Person(name="Ann", age=0, nickname=None)]


def test_declared_header_beats_exact_and_normalized_names() -> None:
    rows = [["full_name", "Name", "Full Name"], ["exact", "declared", "normalized"]]

    assert _converter(rows).to_records(0, 1, None, Contact) == [Contact(full_name="declared")]


def test_first_normalized_key_wins_on_collision() -> None:
    rows = [["Full Name", "full-name"], ["first", "second"]]

    assert _converter(rows).to_records(0, 1, None, Contact) == [Contact(full_name="first")]


def test_duplicate_declared_headers_are_rejected() -> None:
    with pytest.raises(TypeError):
        record_schema(BadHeaders)


def test_type_mismatch_aborts_whole_batch() -> None:
    rows = [["name", "age"], ["Ann", "31"], ["Bob", "thirty"], ["Cid", "40"]]

    with pytest.raises(RecordConversionError) as excinfo:
        _converter(rows).to_records(0, 1, None, Person)

    err = excinfo.value
    assert (err.position, err.field, err.value, err.target) == (1, "age", "thirty", "Person")
    assert isinstance(err, ValueError)


def test_pydantic_model_uses_alias_as_header() -> None:
    rows = [["Name", "Age", "Joined"], ["Bob", "30", datetime(2024, 1, 2, 3, 4, 5)]]
    models = _converter(rows).to_records(0, 1, None, PersonModel)

    assert models[0].name == "Bob"
    assert models[0].age == 30
    assert models[0].joined == datetime(2024, 1, 2, 3, 4, 5)


def test_pydantic_validation_error_becomes_conversion_error() -> None:
    rows = [["Name", "Age"], ["Bob", "old"]]

    with pytest.raises(RecordConversionError) as excinfo:
        _converter(rows).to_records(0, 1, None, PersonModel)

    assert excinfo.value.field == "age"
    assert excinfo.value.value == "old"


def test_unsupported_target_fails_before_reading() -> None:
    class Plain:
        pass

    with pytest.raises(TypeError):
        _converter([["a"], ["b"]]).to_records(0, 1, None, Plain)


@pytest.mark.parametrize(
    ("label", "expected"),
    [
        ("Order Date", "order_date"),
        ("orderDate", "order_date"),
        ("order-date", "order_date"),
        ("  ORDER_DATE ", "order_date"),
        ("金额", "金额"),
    ],
)
def test_normalize_name(label: str, expected: str) -> None:
    assert normalize_name(label) == expected


def test_zero_values() -> None:
    assert zero_value(str) == ""
    assert zero_value(int) == 0
    assert zero_value(bool) is False
    assert zero_value(Decimal) == Decimal(0)
    assert zero_value(Optional[int]) is None
    assert zero_value(list) == []
    assert zero_value(date) is MISSING
    assert zero_value(Status) is MISSING


def test_prepare_value_strips_separators_and_renders_text() -> None:
    assert prepare_value(" 1,200.50 ", Decimal) == "1200.50"
    assert prepare_value("1,001", Optional[int]) == "1001"
    assert prepare_value(30, str) == "30"
    assert prepare_value(datetime(2024, 5, 10, 9), str) == "2024-05-10 09:00:00"
    assert prepare_value("a,b", str) == "a,b"
    assert prepare_value(3, int) == 3
    assert prepare_value("1,2", Union[int, str]) == "1,2"


@pytest.mark.parametrize("target", [Event, EventModel])
def test_short_row_fails_alike_for_dataclass_and_model(target: type) -> None:
    with pytest.raises(RecordConversionError) as excinfo:
        _converter([["name"], ["Bob"]]).to_records(0, 1, None, target)

    err = excinfo.value
    assert (err.position, err.field, err.value, err.target) == (0, "when", None, target.__name__)
    assert err.reason == "Field required"


@pytest.mark.parametrize("target", [Event, EventModel])
def test_missing_text_field_gets_empty_string_for_both_kinds(target: type) -> None:
    records = _converter([["when"], ["2024-05-10"]]).to_records(0, 1, None, target)

    assert (records[0].name, records[0].when) == ("", date(2024, 5, 10))


def test_local_dataclass_with_unresolvable_annotation_raises_type_error() -> None:
    class Kind(Enum):
        A = "a"

    @dataclass
    class Local:
        kind: Kind

    with pytest.raises(TypeError, match="Local.kind"):
        _converter([["kind"], ["a"]]).to_records(0, 1, None, Local)


def test_local_dataclass_with_concrete_annotations_converts() -> None:
    class Kind(Enum):
        A = "a"

    Local = make_dataclass("Local", [("kind", Kind), ("count", int)])

    records = _converter([["kind", "count"], ["a", "2"]]).to_records(0, 1, None, Local)

    assert records == [Local(kind=Kind.A, count=2)]
