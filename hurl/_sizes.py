from __future__ import annotations

import dataclasses
import logging
import re
import typing

from ._exceptions import InvalidSizeFormat

logger = logging.getLogger(__name__)

#: ``None`` means the body may be read without limit.
SizeLimit = typing.Optional[int]

UNLIMITED: SizeLimit = None

DEFAULT_TERMINAL_MAX_SIZE = "1MB"

_INT64_MAX = (1 << 63) - 1

_SIZE_RE = re.compile(r"^(\d+)\s*([kmgt])?b?$", re.IGNORECASE | re.ASCII)

_MULTIPLIERS = {
    "": 1,
    "k": 1 << 10,
    "m": 1 << 20,
    "g": 1 << 30,
    "t": 1 << 40,
}


def parse_size(spec: str) -> SizeLimit:
    """Parse a human readable size such as ``"10KB"`` or ``"5m"``.

    Units are binary (``k`` is 1024 bytes). An empty string or ``"-1"``
    means unlimited and returns ``None``.
    """
    if spec == "" or spec == "-1":
        return UNLIMITED

    match = _SIZE_RE.match(spec.strip())
    if match is None:
        raise InvalidSizeFormat(spec)

    value = int(match.group(1))
    unit = (match.group(2) or "").lower()
    value *= _MULTIPLIERS[unit]
    if value > _INT64_MAX:
        raise InvalidSizeFormat(spec)
    return value


@dataclasses.dataclass(frozen=True)
class OutputLimit:
    """The limit governing a response printed to stdout."""

    spec: str
    implicit: bool = False

    @property
    def limit(self) -> SizeLimit:
        return parse_size(self.spec)


def resolve_output_limit(max_size: str, interactive: bool) -> OutputLimit:
    """Pick the limit for a rendered response.

    An explicit ``max_size`` always wins. Without one, interactive output is
    capped at :data:`DEFAULT_TERMINAL_MAX_SIZE` so a stray binary download
    does not flood the terminal; redirected output is never capped.
    """
    if max_size == "" and interactive:
        logger.debug("applying default terminal limit %s", DEFAULT_TERMINAL_MAX_SIZE)
        return OutputLimit(DEFAULT_TERMINAL_MAX_SIZE, implicit=True)
    return OutputLimit(max_size)
