from ._client import build_client, build_request
from ._commands import Command, DownloadCommand, Output, RequestCommand, UploadCommand
from ._config import Config
from ._copy import ProgressTracker, TransferOutcome, TransferResult, copy
from ._exceptions import (
    BodyTooLarge,
    FileCreateError,
    HurlError,
    InvalidField,
    InvalidSizeFormat,
)
from ._fields import autotype
from ._progress import DownloadProgress
from ._render import RenderDecision, ResponseContext, decide, render, write_response
from ._sizes import (
    DEFAULT_TERMINAL_MAX_SIZE,
    UNLIMITED,
    OutputLimit,
    parse_size,
    resolve_output_limit,
)
from ._streams import BoundedStream, ResponseReader
from .cli import main

__title__ = "hurl"
__description__ = "A command-line HTTP client with bounded, streaming responses."
__version__ = "0.1.0"

_EXCLUDED_FROM_ALL = {"cli", "main"}

_members = [
    member
    for member in list(vars().keys())
    if (
        not member.startswith("_")
        or member in ["__description__", "__title__", "__version__"]
    )
    and member not in _EXCLUDED_FROM_ALL
]

__all__ = sorted(_members, key=str.casefold)  # pyright: ignore[reportUnsupportedDunderAll]
