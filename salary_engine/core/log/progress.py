"""Rich progress bars for the batch CLI, drawn on the logging console."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn, TimeElapsedColumn

Tick = Callable[[], None]


class ProgressManager:
    """Hands batch jobs a zero-argument ``tick`` callback backed by a transient bar."""

    def __init__(self) -> None:
        self._console = Console(stderr=True)

    def use_console(self, console: Console) -> None:
        self._console = console

    def reset_console(self) -> None:
        self._console = Console(stderr=True)

    def _progress(self) -> Progress:
        return Progress(
            TextColumn("[bold blue]{task.description}[/]"),
            BarColumn(bar_width=None),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self._console,
            transient=True,
        )

    @contextmanager
    def ticker(self, description: str, *, total: Optional[int] = None) -> Iterator[Tick]:
        """Yield a callback that advances the bar by one item per call.

        ``total=None`` renders an indeterminate bar, for jobs whose item count
        is only known after a download.
        """

        progress = self._progress()
        with progress:
            task_id = progress.add_task(description, total=total)
            yield lambda: progress.advance(task_id, 1)


progress_manager = ProgressManager()
