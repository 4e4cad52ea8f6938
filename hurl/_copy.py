from __future__ import annotations

import dataclasses
import enum
import logging
import typing

from ._exceptions import BodyTooLarge
from ._streams import DEFAULT_CHUNK_SIZE, BoundedStream

logger = logging.getLogger(__name__)


class Destination(typing.Protocol):
    def write(self, data: bytes) -> typing.Any: ...


@typing.runtime_checkable
class ProgressTracker(typing.Protocol):
    """A destination that also wants to hear when the transfer succeeded."""

    def write(self, data: bytes) -> typing.Any: ...

    def complete(self) -> None: ...


class TransferOutcome(enum.Enum):
    COMPLETED = "completed"
    OVERFLOW = "overflow"
    IO_ERROR = "io_error"


@dataclasses.dataclass(frozen=True)
class TransferResult:
    outcome: TransferOutcome
    bytes_copied: int
    error: typing.Optional[BaseException] = None
    destination: typing.Optional[Destination] = None

    @property
    def ok(self) -> bool:
        return self.outcome is TransferOutcome.COMPLETED


def copy(
    source: BoundedStream,
    destinations: typing.Sequence[Destination],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> TransferResult:
    """Copy ``source`` into every destination, one chunk at a time.

    Each chunk is written to all destinations, in order, before the next
    chunk is read. ``bytes_copied`` counts what the first destination
    accepted. Progress trackers are completed only when the copy reaches
    the end of the source; overflow and write failures leave them as-is.

    Errors raised by the source other than :class:`BodyTooLarge` (transport
    failures) propagate unchanged.
    """
    if not destinations:
        raise ValueError("copy() needs at least one destination")

    copied = 0
    while True:
        try:
            chunk = source.read(chunk_size)
        except BodyTooLarge:
            logger.debug("transfer stopped at limit after %d bytes", copied)
            return TransferResult(TransferOutcome.OVERFLOW, copied)
        if not chunk:
            break

        for index, destination in enumerate(destinations):
            try:
                destination.write(chunk)
            except (OSError, ValueError) as exc:
                logger.debug("write to %r failed after %d bytes: %s", destination, copied, exc)
                return TransferResult(
                    TransferOutcome.IO_ERROR,
                    copied,
                    error=exc,
                    destination=destination,
                )
            if index == 0:
                copied += len(chunk)

    for destination in destinations:
        if isinstance(destination, ProgressTracker):
            destination.complete()
    logger.debug("transfer completed, %d bytes", copied)
    return TransferResult(TransferOutcome.COMPLETED, copied)
