from __future__ import annotations

import pytest

import hurl
from hurl._fields import form_fields, json_body, parse_header, split_field


@pytest.mark.parametrize(
    "value, expected",
    [
        ("42", 42),
        ("-7", -7),
        ("+3", 3),
        ("1", 1),
        ("0", 0),
        ("3.14", 3.14),
        ("1e3", 1000.0),
        ("true", True),
        ("True", True),
        ("t", True),
        ("FALSE", False),
        ("f", False),
        ("Touka", "Touka"),
        ("", ""),
        ("yes", "yes"),
        ("1_000", "1_000"),
        (" 5", " 5"),
        ("nan", "nan"),
        ("inf", "inf"),
    ],
)
def test_autotype(value: str, expected: object) -> None:
    result = hurl.autotype(value)
    assert result == expected
    assert type(result) is type(expected)


def test_split_field() -> None:
    assert split_field("name=Touka") == ("name", "Touka")
    assert split_field("query=a=b") == ("query", "a=b")
    assert split_field("flag") == ("flag", "")


def test_split_field_requires_key() -> None:
    with pytest.raises(hurl.InvalidField):
        split_field("=value")


def test_parse_header() -> None:
    assert parse_header("Authorization: Bearer token") == ("Authorization", "Bearer token")
    assert parse_header("X-Time:12:30") == ("X-Time", "12:30")


def test_parse_header_invalid() -> None:
    with pytest.raises(hurl.InvalidField) as exc_info:
        parse_header("no-colon")
    assert "Expected 'Key: Value'" in str(exc_info.value)


def test_json_body_is_typed_and_ordered() -> None:
    body = json_body(["name=Touka", "age=3", "score=9.5", "admin=false"])
    assert body == {"name": "Touka", "age": 3, "score": 9.5, "admin": False}
    assert list(body) == ["name", "age", "score", "admin"]


def test_form_fields_keep_order_and_duplicates() -> None:
    assert form_fields(["b=2", "a=1", "b=3"]) == [("b", "2"), ("a", "1"), ("b", "3")]
