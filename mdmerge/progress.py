"""Progress sinks fed by the merge pipeline.

The pipeline reports through :class:`ProgressSink` only; it never reads
anything back, so swapping in :class:`NullProgress` leaves the merge result
untouched.
"""

from __future__ import annotations

from types import TracebackType
from typing import Protocol

from rich.console import Console
from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn

_LABEL_LIMIT = 160


class ProgressSink(Protocol):
    def set_total(self, total: int) -> None: ...

    def item_started(self, label: str) -> None: ...

    def item_done(self) -> None: ...


class NullProgress:
    """Sink that ignores every update."""

    def set_total(self, total: int) -> None:
        return None

    def item_started(self, label: str) -> None:
        return None

    def item_done(self) -> None:
        return None


def _shorten(label: str, limit: int = _LABEL_LIMIT) -> str:
    if len(label) <= limit:
        return label
    return label[: limit - 3] + "..."


class RichProgress:
    """Transient spinner showing ``processed/total`` and the current item.

    rich redraws from its own refresh thread; leaving the context stops that
    thread and clears the line.
    """

    def __init__(self, console: Console, *, refresh_per_second: float = 10) -> None:
        self._progress = Progress(
            SpinnerColumn(spinner_name="line"),
            TextColumn("{task.completed}/{task.total}"),
            TextColumn("processing: {task.description}"),
            console=console,
            transient=True,
            refresh_per_second=refresh_per_second,
        )
        self._task: TaskID | None = None

    def __enter__(self) -> RichProgress:
        self._progress.start()
        self._task = self._progress.add_task("", total=1)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def set_total(self, total: int) -> None:
        if self._task is not None:
            self._progress.update(self._task, total=max(total, 1))

    def item_started(self, label: str) -> None:
        if self._task is not None:
            self._progress.update(self._task, description=escape(_shorten(label)))

    def item_done(self) -> None:
        if self._task is not None:
            self._progress.advance(self._task)
