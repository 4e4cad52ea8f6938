"""Parsing of the ``key=value`` and ``Key: Value`` command-line items."""

from __future__ import annotations

import math
import typing

from ._exceptions import InvalidField

FieldValue = typing.Union[int, float, bool, str]

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def autotype(value: str) -> FieldValue:
    """Interpret a JSON field value as an int, a float, a bool, or a string.

    Only plain numeric literals are converted: Python's looser spellings
    (``1_000``, surrounding whitespace, ``nan``, ``inf``) stay strings since
    they have no JSON number form.
    """
    if value == value.strip() and "_" not in value:
        try:
            return int(value, 10)
        except ValueError:
            pass
        try:
            number = float(value)
        except ValueError:
            pass
        else:
            if math.isfinite(number):
                return number
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return value


def split_field(item: str) -> tuple[str, str]:
    """Split ``key=value``. A missing ``=`` gives an empty value."""
    key, _, value = item.partition("=")
    if not key:
        raise InvalidField(f"Invalid field format: '{item}'. Expected 'key=value'.")
    return key, value


def parse_header(header: str) -> tuple[str, str]:
    """Parse a 'Key: Value' header string."""
    if ":" not in header:
        raise InvalidField(
            f"Invalid header format: '{header}'. Expected 'Key: Value'."
        )
    key, _, value = header.partition(":")
    return key.strip(), value.strip()


def json_body(items: typing.Iterable[str]) -> dict[str, FieldValue]:
    body: dict[str, FieldValue] = {}
    for item in items:
        key, value = split_field(item)
        body[key] = autotype(value)
    return body


def form_fields(items: typing.Iterable[str]) -> list[tuple[str, str]]:
    return [split_field(item) for item in items]
