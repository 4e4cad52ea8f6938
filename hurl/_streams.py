from __future__ import annotations

import logging
import typing

from ._exceptions import BodyTooLarge
from ._sizes import SizeLimit

if typing.TYPE_CHECKING:
    import httpx

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 32 * 1024


class Readable(typing.Protocol):
    def read(self, size: int = -1) -> bytes: ...

    def close(self) -> None: ...


class ResponseReader:
    """File-like view over the body of a streaming ``httpx.Response``.

    Content decoding (gzip, brotli ...) is done by httpx, so the bytes read
    here are the decoded body. Closing the reader closes the response.
    """

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._chunks = response.iter_bytes()
        self._buffer = b""
        self._exhausted = False

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            data = self._buffer + b"".join(self._chunks)
            self._buffer = b""
            self._exhausted = True
            return data

        while len(self._buffer) < size and not self._exhausted:
            try:
                self._buffer += next(self._chunks)
            except StopIteration:
                self._exhausted = True

        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def close(self) -> None:
        self._response.close()


class BoundedStream:
    """Wraps a readable source and refuses to deliver more than ``limit`` bytes.

    Once ``limit`` bytes have been delivered the next read probes the source
    for one more byte. If there is one, :class:`BodyTooLarge` is raised and
    nothing more is delivered; if the source is exhausted the read returns
    ``b""`` as usual, so a body of exactly ``limit`` bytes is accepted.

    The stream owns its source: :meth:`close` releases it exactly once, and
    using the stream as a context manager guarantees that on every exit path.
    """

    def __init__(self, source: Readable, limit: SizeLimit) -> None:
        if limit is not None and limit < 0:
            raise ValueError("limit must be a non-negative byte count or None")
        self._source = source
        self._limit = limit
        self._delivered = 0
        self._overflowed = False
        self._closed = False

    @property
    def limit(self) -> SizeLimit:
        return self._limit

    @property
    def delivered(self) -> int:
        return self._delivered

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1) -> bytes:
        if self._closed:
            raise ValueError("read from closed stream")
        if self._limit is None:
            data = self._source.read(size)
            self._delivered += len(data)
            return data

        if self._overflowed:
            raise BodyTooLarge(self._limit)

        remaining = self._limit - self._delivered
        if remaining == 0:
            if self._source.read(1):
                self._overflowed = True
                logger.debug("body exceeded limit of %d bytes", self._limit)
                raise BodyTooLarge(self._limit)
            return b""

        if size is None or size < 0 or size > remaining:
            size = remaining
        data = self._source.read(size)
        self._delivered += len(data)
        return data

    def read_all(self) -> bytes:
        """Read until end of stream. Raises :class:`BodyTooLarge` on overflow."""
        return b"".join(self.iter_chunks())

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> typing.Iterator[bytes]:
        while True:
            chunk = self.read(chunk_size)
            if not chunk:
                return
            yield chunk

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._source.close()

    def __enter__(self) -> BoundedStream:
        return self

    def __exit__(self, *args: typing.Any) -> None:
        self.close()
