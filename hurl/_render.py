from __future__ import annotations

import dataclasses
import io
import json
import typing

import httpx
from rich.console import Console
from rich.syntax import Syntax
from rich.text import Text

from ._streams import BoundedStream

# ---------------------------------------------------------------------------
# Response metadata
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class ResponseContext:
    method: str
    status_code: int
    reason_phrase: str = ""
    http_version: str = "HTTP/1.1"
    headers: httpx.Headers = dataclasses.field(default_factory=httpx.Headers)
    encoding: typing.Optional[str] = None

    @classmethod
    def from_response(cls, response: httpx.Response) -> ResponseContext:
        return cls(
            method=response.request.method,
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            http_version=response.http_version,
            headers=response.headers,
            encoding=response.charset_encoding,
        )

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def is_head(self) -> bool:
        return self.method.upper() == "HEAD"


@dataclasses.dataclass(frozen=True)
class RenderDecision:
    headers: bool
    body: bool
    structured: bool


def decide(context: ResponseContext, show_headers: bool = False) -> RenderDecision:
    return RenderDecision(
        headers=show_headers or context.is_head,
        body=not context.is_head,
        structured="application/json" in context.content_type,
    )


def _status_color(status_code: int) -> str:
    """Return a rich color name based on HTTP status category."""
    if status_code < 200:
        return "cyan"
    elif status_code < 300:
        return "green"
    elif status_code < 400:
        return "yellow"
    elif status_code < 500:
        return "dark_orange"
    else:
        return "red"


def status_line(context: ResponseContext) -> str:
    return f"{context.http_version} {context.status_code} {context.reason_phrase}".rstrip()


def grouped_headers(headers: httpx.Headers) -> list[tuple[str, list[str]]]:
    """Header values grouped case-insensitively, keyed by the first spelling seen."""
    groups: dict[str, tuple[str, list[str]]] = {}
    for raw_key, raw_value in headers.raw:
        key = raw_key.decode(headers.encoding)
        value = raw_value.decode(headers.encoding)
        entry = groups.setdefault(key.lower(), (key, []))
        entry[1].append(value)
    return list(groups.values())


def format_head(context: ResponseContext) -> list[str]:
    lines = [status_line(context)]
    for key, values in grouped_headers(context.headers):
        lines.append(f"{key}: {', '.join(values)}")
    lines.append("")
    return lines


# ---------------------------------------------------------------------------
# Body formatting
# ---------------------------------------------------------------------------


def decode_body(context: ResponseContext, content: bytes) -> str:
    encoding = context.encoding or "utf-8"
    try:
        return content.decode(encoding, errors="replace")
    except LookupError:
        return content.decode("utf-8", errors="replace")


def pretty_json(content: bytes) -> typing.Optional[str]:
    """2-space indented rendering of ``content``, or ``None`` if it is not JSON."""
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_body(context: ResponseContext, content: bytes) -> tuple[str, bool]:
    """Return the body text and whether it was rendered as JSON."""
    if decide(context).structured:
        formatted = pretty_json(content)
        if formatted is not None:
            return formatted, True
    return decode_body(context, content), False


# ---------------------------------------------------------------------------
# Plain renderer (redirected output or --no-color)
# ---------------------------------------------------------------------------


def body_bytes(context: ResponseContext, content: bytes) -> bytes:
    """The body as written to a plain stream: pretty JSON, else ``content`` as is."""
    if decide(context).structured:
        formatted = pretty_json(content)
        if formatted is not None:
            return formatted.encode("utf-8")
    return content


def write_response(
    write: typing.Callable[[bytes], typing.Any],
    context: ResponseContext,
    body: BoundedStream,
    show_headers: bool = False,
) -> None:
    """Write a response to ``write`` as bytes.

    The head goes out before the body is read, so it is shown even when the
    body then overflows. :class:`~hurl.BodyTooLarge` propagates to the
    caller, which knows what limit was applied. A HEAD response never
    touches the body. Non-JSON bodies are written byte for byte.
    """
    decision = decide(context, show_headers)
    if decision.headers:
        write("".join(f"{line}\n" for line in format_head(context)).encode("utf-8"))
    if not decision.body:
        return
    write(body_bytes(context, body.read_all()) + b"\n")


def render(
    context: ResponseContext,
    body: BoundedStream,
    show_headers: bool = False,
) -> bytes:
    """Render a response to bytes, as :func:`write_response` writes it."""
    buffer = io.BytesIO()
    write_response(buffer.write, context, body, show_headers)
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Rich renderer
# ---------------------------------------------------------------------------


def print_head_rich(console: Console, context: ResponseContext) -> None:
    color = _status_color(context.status_code)

    line = Text()
    line.append(f"{context.http_version} ", style="cyan")
    line.append(f"{context.status_code}", style=f"bold {color}")
    if context.reason_phrase:
        line.append(f" {context.reason_phrase}", style=color)
    console.print(line)

    for key, values in grouped_headers(context.headers):
        header_text = Text()
        header_text.append(key, style="blue")
        header_text.append(": ", style="dim")
        header_text.append(", ".join(values))
        console.print(header_text)

    console.print()


def print_response_rich(
    console: Console,
    context: ResponseContext,
    body: BoundedStream,
    show_headers: bool = False,
) -> None:
    """Same decisions as :func:`write_response`, printed with colors.

    Bodies are decoded for the terminal; undecodable bytes are replaced.
    """
    decision = decide(context, show_headers)
    if decision.headers:
        print_head_rich(console, context)
    if not decision.body:
        return

    text, structured = format_body(context, body.read_all())
    if structured:
        console.print(Syntax(text, "json", theme="monokai", background_color="default"))
    else:
        console.print(text, markup=False, highlight=False, emoji=False, soft_wrap=True)
