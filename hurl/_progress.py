from __future__ import annotations

import typing

from rich.console import Console
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)


class DownloadProgress:
    """Copier destination that drives a rich progress bar.

    ``total`` is the declared Content-Length; ``0`` means unknown and the bar
    is shown as indeterminate. The bar is filled to 100% only by
    :meth:`complete`, which the copier calls after a successful transfer.
    """

    def __init__(
        self,
        total: int,
        console: typing.Optional[Console] = None,
        description: str = "Downloading",
    ) -> None:
        self.total = total
        self.transferred = 0
        self.completed = False
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=console or Console(stderr=True),
            transient=False,
        )
        self._task = self._progress.add_task(description, total=total or None)

    def write(self, data: bytes) -> int:
        self.transferred += len(data)
        self._progress.advance(self._task, len(data))
        return len(data)

    def complete(self) -> None:
        self.completed = True
        self._progress.update(
            self._task, total=self.transferred, completed=self.transferred
        )

    def start(self) -> None:
        self._progress.start()

    def stop(self) -> None:
        self._progress.stop()

    def __enter__(self) -> DownloadProgress:
        self.start()
        return self

    def __exit__(self, *args: typing.Any) -> None:
        self.stop()
