from __future__ import annotations

import pytest

import hurl
from hurl import parse_size, resolve_output_limit


@pytest.mark.parametrize(
    "spec, expected",
    [
        ("10KB", 10 * 1024),
        ("1M", 1024 * 1024),
        ("1mb", 1024 * 1024),
        ("0", 0),
        ("12", 12),
        ("7b", 7),
        ("5 k", 5 * 1024),
        (" 2 gb ", 2 * 1024**3),
        ("3T", 3 * 1024**4),
        ("8388607t", 8388607 * 1024**4),
    ],
)
def test_parse_size(spec: str, expected: int) -> None:
    assert parse_size(spec) == expected


@pytest.mark.parametrize("spec", ["", "-1"])
def test_parse_size_unlimited(spec: str) -> None:
    assert parse_size(spec) is hurl.UNLIMITED
    assert parse_size(spec) is None


@pytest.mark.parametrize(
    "spec",
    [
        "10XB",
        "abc",
        "-5",
        "1.5k",
        "k",
        "10 KB extra",
        "99999999999999999999",
        "8388608T",
    ],
)
def test_parse_size_invalid(spec: str) -> None:
    with pytest.raises(hurl.InvalidSizeFormat) as exc_info:
        parse_size(spec)
    assert exc_info.value.spec == spec


def test_explicit_limit_wins() -> None:
    limit = resolve_output_limit("10KB", interactive=True)
    assert limit == hurl.OutputLimit("10KB", implicit=False)
    assert limit.limit == 10 * 1024


def test_terminal_gets_default_limit() -> None:
    limit = resolve_output_limit("", interactive=True)
    assert limit.implicit
    assert limit.spec == hurl.DEFAULT_TERMINAL_MAX_SIZE
    assert limit.limit == 1024 * 1024


def test_redirected_output_is_unlimited() -> None:
    limit = resolve_output_limit("", interactive=False)
    assert not limit.implicit
    assert limit.limit is None


def test_explicit_unlimited_on_terminal() -> None:
    limit = resolve_output_limit("-1", interactive=True)
    assert not limit.implicit
    assert limit.limit is None


def test_invalid_limit_surfaces_when_read() -> None:
    limit = resolve_output_limit("lots", interactive=False)
    with pytest.raises(hurl.InvalidSizeFormat):
        limit.limit  # noqa: B018
