from __future__ import annotations

import dataclasses
import typing

DEFAULT_TIMEOUT = 30.0
DEFAULT_RETRIES = 2
DEFAULT_USER_AGENT = "hurl/0.1 Touka HTTP Client/v0"


@dataclasses.dataclass(frozen=True)
class Config:
    """Everything one invocation needs, built once from the command line.

    Components receive the config explicitly; none of them read flags or
    terminal state on their own.
    """

    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False
    include_headers: bool = False
    basic_auth: str = ""
    bearer_token: str = ""
    proxy: str = ""
    http_proxy: str = ""
    socks5_proxy: str = ""
    headers: tuple[str, ...] = ()
    form_fields: tuple[str, ...] = ()
    json_fields: tuple[str, ...] = ()
    raw_data: str = ""
    method: str = ""
    max_size: str = ""
    no_color: bool = False
    interactive: bool = False

    @classmethod
    def from_options(cls, options: typing.Mapping[str, typing.Any], interactive: bool) -> Config:
        """Build a config from click's parameter mapping, ignoring unknown keys."""
        names = {field.name for field in dataclasses.fields(cls)}
        values = {
            name: tuple(value) if isinstance(value, (list, tuple)) else value
            for name, value in options.items()
            if name in names and value is not None
        }
        values["interactive"] = interactive
        return cls(**values)

    @property
    def has_body(self) -> bool:
        return bool(self.raw_data or self.json_fields or self.form_fields)

    @property
    def use_rich(self) -> bool:
        return self.interactive and not self.no_color

    def request_method(self, default: str = "GET") -> str:
        """The method for no-command mode: ``-X``, else POST when a body is given."""
        if self.method:
            return self.method.upper()
        if self.has_body:
            return "POST"
        return default
