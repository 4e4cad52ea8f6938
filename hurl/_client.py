from __future__ import annotations

import base64
import logging
import typing
from urllib.parse import urlencode

import httpx

from ._config import Config
from ._exceptions import InvalidField
from ._fields import form_fields, json_body, parse_header

logger = logging.getLogger(__name__)

_PROXY_SCHEMES = ("http", "https", "socks5", "socks5h")


def _log_request(request: httpx.Request) -> None:
    logger.debug("> %s %s", request.method, request.url)
    for key, value in request.headers.multi_items():
        logger.debug("> %s: %s", key, value)


def _log_response(response: httpx.Response) -> None:
    logger.debug(
        "< %s %d %s", response.http_version, response.status_code, response.reason_phrase
    )
    for key, value in response.headers.multi_items():
        logger.debug("< %s: %s", key, value)


def resolve_proxy(config: Config) -> typing.Optional[str]:
    """The proxy URL to use, or ``None``.

    ``--proxy`` takes precedence over the legacy ``--http-proxy``; the legacy
    ``--socks5-proxy`` is applied last and wins when given.
    """
    if config.proxy:
        try:
            scheme = httpx.URL(config.proxy).scheme
        except httpx.InvalidURL as exc:
            raise InvalidField(f"invalid proxy URL {config.proxy!r}: {exc}") from exc
        if scheme not in _PROXY_SCHEMES:
            raise InvalidField(f"unsupported proxy scheme: {scheme!r}")
    proxy = config.proxy or config.http_proxy
    if config.socks5_proxy:
        proxy = config.socks5_proxy
    return proxy or None


def build_client(
    config: Config,
    transport: typing.Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    proxy = resolve_proxy(config)
    if transport is None:
        transport = httpx.HTTPTransport(retries=max(config.retries, 0), proxy=proxy)

    event_hooks: dict[str, list[typing.Callable[..., typing.Any]]] = {
        "request": [],
        "response": [],
    }
    if config.verbose:
        event_hooks["request"].append(_log_request)
        event_hooks["response"].append(_log_response)

    return httpx.Client(
        timeout=config.timeout,
        headers={"User-Agent": config.user_agent},
        transport=transport,
        event_hooks=event_hooks,
    )


def auth_headers(config: Config) -> list[tuple[str, str]]:
    # Bearer replaces Basic when both are given.
    if config.bearer_token:
        return [("Authorization", f"Bearer {config.bearer_token}")]
    if config.basic_auth:
        token = base64.b64encode(config.basic_auth.encode("utf-8")).decode("ascii")
        return [("Authorization", f"Basic {token}")]
    return []


def build_request(
    client: httpx.Client,
    method: str,
    url: str,
    config: Config,
    *,
    with_body: bool = True,
    files: typing.Optional[typing.Mapping[str, typing.Any]] = None,
    data: typing.Optional[typing.Mapping[str, typing.Any]] = None,
) -> httpx.Request:
    """Turn the request flags of ``config`` into an ``httpx.Request``.

    Body flags override each other in the order raw (``-d``), JSON (``-j``),
    form (``-f``). ``with_body=False`` skips them, for callers that bring
    their own ``files``/``data`` body.
    """
    header_items = auth_headers(config)
    for header in config.headers:
        header_items.append(parse_header(header))

    kwargs: dict[str, typing.Any] = {}
    if with_body:
        if config.raw_data:
            kwargs = {"content": config.raw_data.encode("utf-8")}
        if config.json_fields:
            kwargs = {"json": json_body(config.json_fields)}
        if config.form_fields:
            kwargs = {"content": urlencode(form_fields(config.form_fields))}
            header_items.append(("Content-Type", "application/x-www-form-urlencoded"))
    if files is not None:
        kwargs["files"] = files
    if data is not None:
        kwargs["data"] = data

    return client.build_request(method, url, headers=httpx.Headers(header_items), **kwargs)
