import io
import os
import typing

import httpx
import pytest

import hurl

ENVIRONMENT_VARIABLES = {
    "SSL_CERT_FILE",
    "SSL_CERT_DIR",
    "HTTP_PROXY",
    "HTTPS_PROXY",
    "ALL_PROXY",
    "NO_PROXY",
    "SSLKEYLOGFILE",
}


@pytest.fixture(scope="function", autouse=True)
def clean_environ():
    """Keeps os.environ clean for every test without having to mock os.environ"""
    original_environ = os.environ.copy()
    os.environ.clear()
    os.environ.update(
        {
            k: v
            for k, v in original_environ.items()
            if k not in ENVIRONMENT_VARIABLES and k.lower() not in ENVIRONMENT_VARIABLES
        }
    )
    yield
    os.environ.clear()
    os.environ.update(original_environ)


Handler = typing.Callable[[httpx.Request], httpx.Response]


class ChunkedBody(httpx.SyncByteStream):
    """A response body delivered in fixed-size chunks, without Content-Length."""

    def __init__(self, data: bytes, chunk_size: int = 1000) -> None:
        self.data = data
        self.chunk_size = chunk_size
        self.close_calls = 0

    def __iter__(self) -> typing.Iterator[bytes]:
        for start in range(0, len(self.data), self.chunk_size):
            yield self.data[start : start + self.chunk_size]

    def close(self) -> None:
        self.close_calls += 1


class CountingSource(io.BytesIO):
    """BytesIO that remembers how often it was closed and how much was read."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(data)
        self.close_calls = 0
        self.bytes_read = 0

    def read(self, size: typing.Optional[int] = -1) -> bytes:
        data = super().read(size)
        self.bytes_read += len(data)
        return data

    def close(self) -> None:
        self.close_calls += 1
        super().close()


class ExplodingSource:
    """A source that must never be read."""

    def __init__(self) -> None:
        self.close_calls = 0

    def read(self, size: int = -1) -> bytes:
        raise AssertionError("body must not be read")

    def close(self) -> None:
        self.close_calls += 1


def make_client(handler: Handler, config: typing.Optional[hurl.Config] = None) -> httpx.Client:
    return hurl.build_client(config or hurl.Config(), transport=httpx.MockTransport(handler))


def text_response(text: str, content_type: str = "text/plain", status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=text.encode("utf-8"), headers={"Content-Type": content_type})
