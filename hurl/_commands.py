"""The commands hurl can run.

Each command is an orchestrator: it composes the size limit, the bounded
stream, the copier and the renderer into one user-facing flow, and it is the
only layer that prints messages and decides the exit status.
"""

from __future__ import annotations

import abc
import functools
import logging
import os
import typing

import click
import httpx
from rich.console import Console
from rich.markup import escape

from ._client import build_request
from ._config import Config
from ._copy import TransferOutcome, copy
from ._exceptions import BodyTooLarge, FileCreateError, InvalidField, InvalidSizeFormat
from ._fields import form_fields
from ._progress import DownloadProgress
from ._render import ResponseContext, print_response_rich, write_response
from ._sizes import OutputLimit, parse_size, resolve_output_limit
from ._streams import BoundedStream, ResponseReader

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head")


def describe(exc: BaseException) -> str:
    if isinstance(exc, httpx.HTTPError):
        return f"{type(exc).__name__}: {exc}"
    return str(exc)


def overflow_message(limit: OutputLimit) -> str:
    if limit.implicit:
        return (
            f"response body too large (default terminal limit: {limit.spec}). "
            "Use --max-size to override."
        )
    return f"response body too large (limit: {limit.spec})"


def content_length(response: httpx.Response) -> int:
    """Declared body length, or 0 when absent or unparseable."""
    try:
        length = int(response.headers.get("content-length", ""))
    except ValueError:
        return 0
    return max(length, 0)


def create_output_file(path: str) -> typing.BinaryIO:
    try:
        return open(path, "wb")
    except OSError as exc:
        raise FileCreateError(path, exc) from exc


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class Output:
    """Where commands send responses, progress and messages."""

    def __init__(self, config: Config) -> None:
        self.use_rich = config.use_rich
        self.console = Console(no_color=config.no_color)
        self.err_console = Console(stderr=True, no_color=config.no_color)

    def response(
        self,
        context: ResponseContext,
        body: BoundedStream,
        show_headers: bool = False,
    ) -> None:
        if self.use_rich:
            print_response_rich(self.console, context, body, show_headers)
        else:
            write_response(functools.partial(click.echo, nl=False), context, body, show_headers)

    def progress(self, total: int) -> DownloadProgress:
        return DownloadProgress(total, console=self.err_console)

    def error(self, message: str, exc: typing.Optional[BaseException] = None) -> None:
        if exc is not None:
            message = f"{message}: {describe(exc)}"
        if self.use_rich:
            self.err_console.print(f"[bold red]{escape(message)}[/bold red]")
        else:
            click.echo(message, err=True)

    def success(self, message: str) -> None:
        if self.use_rich:
            self.console.print(f"[green]{escape(message)}[/green]")
        else:
            click.echo(message)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class Command(abc.ABC):
    name: typing.ClassVar[str]
    short_help: typing.ClassVar[str]

    def __init__(self, url: str) -> None:
        self.url = url

    @abc.abstractmethod
    def run(self, config: Config, client: httpx.Client, output: Output) -> int:
        """Execute the command and return the process exit status."""


class RequestCommand(Command):
    """Send one request and print the response."""

    name = "request"
    short_help = "Sends a request and prints the response"

    def __init__(self, url: str, method: str = "GET") -> None:
        super().__init__(url)
        self.method = method.upper()

    def build(self, client: httpx.Client, config: Config) -> httpx.Request:
        return build_request(client, self.method, self.url, config)

    def run(self, config: Config, client: httpx.Client, output: Output) -> int:
        try:
            request = self.build(client, config)
        except (InvalidField, httpx.InvalidURL) as exc:
            output.error("Error applying request flags", exc)
            return 1
        return self.send(request, config, client, output)

    def send(
        self,
        request: httpx.Request,
        config: Config,
        client: httpx.Client,
        output: Output,
    ) -> int:
        limit = resolve_output_limit(config.max_size, config.interactive)
        try:
            max_bytes = limit.limit
        except InvalidSizeFormat as exc:
            output.error("Error processing response", exc)
            return 1

        try:
            response = client.send(request, stream=True)
        except httpx.HTTPError as exc:
            output.error("Error executing request", exc)
            return 1

        with BoundedStream(ResponseReader(response), max_bytes) as body:
            context = ResponseContext.from_response(response)
            try:
                output.response(context, body, config.include_headers)
            except BodyTooLarge:
                output.error(f"Error processing response: {overflow_message(limit)}")
                return 1
            except httpx.HTTPError as exc:
                output.error("Error processing response: failed to read response body", exc)
                return 1
        return 0


class UploadCommand(RequestCommand):
    """POST a file as multipart/form-data and print the response."""

    name = "upload"
    short_help = "Uploads a file using multipart/form-data"

    def __init__(self, url: str, file_path: str, field: str = "file") -> None:
        super().__init__(url, "POST")
        self.file_path = file_path
        self.field = field

    def run(self, config: Config, client: httpx.Client, output: Output) -> int:
        try:
            upload = open(self.file_path, "rb")
        except OSError as exc:
            output.error("Error opening file", exc)
            return 1

        with upload:
            data: dict[str, list[str]] = {}
            try:
                for key, value in form_fields(config.form_fields):
                    data.setdefault(key, []).append(value)
                request = build_request(
                    client,
                    self.method,
                    self.url,
                    config,
                    with_body=False,
                    files={self.field: (os.path.basename(self.file_path), upload)},
                    data=data,
                )
            except (InvalidField, httpx.InvalidURL) as exc:
                output.error("Error applying request flags", exc)
                return 1
            return self.send(request, config, client, output)


class DownloadCommand(Command):
    """Stream a response body into a file with a progress bar."""

    name = "download"
    short_help = "Downloads a file from a URL with a progress bar"

    def __init__(self, url: str, output_path: str) -> None:
        super().__init__(url)
        self.output_path = output_path

    def run(self, config: Config, client: httpx.Client, output: Output) -> int:
        try:
            max_bytes = parse_size(config.max_size)
        except InvalidSizeFormat as exc:
            output.error("Error parsing max-size", exc)
            return 1

        try:
            request = build_request(client, "GET", self.url, config)
        except (InvalidField, httpx.InvalidURL) as exc:
            output.error("Error applying request flags", exc)
            return 1

        try:
            response = client.send(request, stream=True)
        except httpx.HTTPError as exc:
            output.error("Error starting download", exc)
            return 1

        with BoundedStream(ResponseReader(response), max_bytes) as body:
            if response.status_code >= 400:
                output.error(
                    f"Error: download failed with status "
                    f"{response.status_code} {response.reason_phrase}".rstrip()
                )
                return 1

            try:
                sink = create_output_file(self.output_path)
            except FileCreateError as exc:
                output.error("Error creating output file", exc.__cause__ or exc)
                return 1

            with sink, output.progress(content_length(response)) as progress:
                try:
                    result = copy(body, [sink, progress])
                except httpx.HTTPError as exc:
                    output.error("Error writing to output file", exc)
                    return 1

        if result.outcome is TransferOutcome.OVERFLOW:
            output.error(f"Error: response body too large (limit: {config.max_size})")
            return 1
        if result.outcome is TransferOutcome.IO_ERROR:
            output.error("Error writing to output file", result.error)
            return 1

        logger.debug("downloaded %d bytes to %s", result.bytes_copied, self.output_path)
        output.success(f"Downloaded successfully to {self.output_path}")
        return 0
