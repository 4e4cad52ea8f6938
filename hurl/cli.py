from __future__ import annotations

import logging
import sys
import typing

import click
from rich.console import Console
from rich.logging import RichHandler

from ._client import build_client
from ._commands import (
    HTTP_METHODS,
    Command,
    DownloadCommand,
    Output,
    RequestCommand,
    UploadCommand,
)
from ._config import DEFAULT_RETRIES, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, Config
from ._exceptions import InvalidField

F = typing.TypeVar("F", bound=typing.Callable[..., typing.Any])

# ---------------------------------------------------------------------------
# Options shared by every command
# ---------------------------------------------------------------------------

_COMMON_OPTIONS = (
    click.option("--timeout", type=float, default=DEFAULT_TIMEOUT, show_default=True, help="Request timeout in seconds."),
    click.option("--retries", type=int, default=DEFAULT_RETRIES, show_default=True, help="Maximum number of retries for failed connections."),
    click.option("--user-agent", default=DEFAULT_USER_AGENT, show_default=True, help="Set custom User-Agent."),
    click.option("-v", "--verbose", is_flag=True, default=False, help="Log request and response details to stderr."),
    click.option("-i", "--include", "include_headers", is_flag=True, default=False, help="Include response headers in the output."),
    click.option("--user", "basic_auth", default="", help="HTTP Basic Auth ('user:pass')."),
    click.option("--bearer", "bearer_token", default="", help="Bearer token for authentication."),
    click.option("-x", "--proxy", default="", help="Proxy URL (http, https, socks5 or socks5h)."),
    click.option("--http-proxy", default="", help="HTTP/HTTPS proxy URL (legacy)."),
    click.option("--socks5-proxy", default="", help="SOCKS5 proxy URL (legacy)."),
    click.option("-H", "--header", "headers", multiple=True, help='Custom header, e.g. -H "Authorization: Bearer token".'),
    click.option("-f", "--form", "form_fields", multiple=True, help="Add a form field (key=value)."),
    click.option("-j", "--json", "json_fields", multiple=True, help="Add a JSON field (key=value)."),
    click.option("-d", "--data", "raw_data", default="", help="Set raw request body from a string."),
    click.option(
        "--max-size",
        default="",
        help="Max response size (e.g. 10KB, 5MB). Defaults to 1MB for terminal output. Use -1 for no limit.",
    ),
    click.option("--no-color", is_flag=True, default=False, help="Disable colored output."),
)


def common_options(f: F) -> F:
    for option in reversed(_COMMON_OPTIONS):
        f = option(f)
    return f


def _stdout_is_terminal() -> bool:
    return sys.stdout.isatty()


def configure_logging(config: Config) -> None:
    if not config.verbose:
        return
    logger = logging.getLogger("hurl")
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        logger.addHandler(
            RichHandler(console=Console(stderr=True, no_color=config.no_color), show_path=False)
        )
    logger.setLevel(logging.DEBUG)


def invoke(
    make_command: typing.Callable[[Config], Command],
    options: typing.Mapping[str, typing.Any],
) -> None:
    config = Config.from_options(options, interactive=_stdout_is_terminal())
    configure_logging(config)
    output = Output(config)
    command = make_command(config)

    try:
        client = build_client(config)
    except InvalidField as exc:
        output.error("Error building client", exc)
        sys.exit(1)

    with client:
        status = command.run(config, client, output)
    sys.exit(status)


# ---------------------------------------------------------------------------
# Command group
# ---------------------------------------------------------------------------


class HurlGroup(click.Group):
    """Runs the hidden ``request`` command when no command name is given,
    so ``hurl example.org`` works like ``hurl request example.org``."""

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[typing.Optional[str], typing.Optional[click.Command], list[str]]:
        if args and self.get_command(ctx, args[0]) is None:
            return RequestCommand.name, self.get_command(ctx, RequestCommand.name), args
        return super().resolve_command(ctx, args)


@click.group(
    cls=HurlGroup,
    context_settings={"help_option_names": ["-h", "--help"], "ignore_unknown_options": True},
    help="hurl is a modern command-line HTTP client to replace curl and wget.",
    epilog=(
        "\b\nExamples:\n"
        "  hurl example.org\n"
        "  hurl post example.org -j name=Touka\n"
        "  hurl download example.org/file.zip -o my_file.zip"
    ),
)
def main() -> None:
    pass


@main.command(RequestCommand.name, hidden=True)
@click.argument("url")
@click.option("-X", "--method", default="", help="HTTP method to use (e.g., GET, POST).")
@common_options
def request_command(url: str, **options: typing.Any) -> None:
    invoke(lambda config: RequestCommand(url, config.request_method()), options)


def _register_method(method: str) -> None:
    @main.command(method, short_help=f"Sends a {method.upper()} request")
    @click.argument("url")
    @common_options
    def method_command(url: str, **options: typing.Any) -> None:
        invoke(lambda config: RequestCommand(url, method), options)


for _method in HTTP_METHODS:
    _register_method(_method)


@main.command(DownloadCommand.name, short_help=DownloadCommand.short_help)
@click.argument("url")
@click.option("-o", "--output", "output_path", required=True, help="Output file path.")
@common_options
def download_command(url: str, output_path: str, **options: typing.Any) -> None:
    invoke(lambda config: DownloadCommand(url, output_path), options)


@main.command(UploadCommand.name, short_help=UploadCommand.short_help)
@click.argument("url")
@click.option("--file", "file_path", required=True, help="Path to the file to upload.")
@click.option("--field", default="file", show_default=True, help="Name of the form field for the file.")
@common_options
def upload_command(url: str, file_path: str, field: str, **options: typing.Any) -> None:
    invoke(lambda config: UploadCommand(url, file_path, field), options)
