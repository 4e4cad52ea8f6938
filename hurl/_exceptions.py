"""
Exception hierarchy:

    HurlError
    ├── InvalidSizeFormat   (malformed --max-size value)
    ├── BodyTooLarge        (response body exceeded the governing limit)
    ├── FileCreateError     (download output could not be opened)
    └── InvalidField        (malformed key=value, header or proxy flag)

Transport failures are not wrapped: they surface as ``httpx.HTTPError``.
"""

from __future__ import annotations

import typing


class HurlError(Exception):
    """Base class for errors raised by hurl itself."""


class InvalidSizeFormat(HurlError, ValueError):
    def __init__(self, spec: str) -> None:
        super().__init__(f"invalid size format: {spec}")
        self.spec = spec


class BodyTooLarge(HurlError):
    def __init__(self, limit: int) -> None:
        super().__init__("response body too large")
        self.limit = limit


class FileCreateError(HurlError):
    def __init__(self, path: str, cause: typing.Optional[BaseException] = None) -> None:
        message = f"cannot create {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.path = path


class InvalidField(HurlError, ValueError):
    pass
