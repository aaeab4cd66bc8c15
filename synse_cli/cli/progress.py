"""
Progress Reporting.

A progress sink for the query pipeline that draws a transient rich progress
bar on stderr. The bar is only drawn on an interactive terminal, so piped
output and tests see nothing.
"""

from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

err_console = Console(stderr=True, soft_wrap=True)


class ProgressReporter:
    """
    Callable progress sink: reporter(completed, total).

    Usage:
        with ProgressReporter("Reading power devices") as progress:
            await query(..., on_progress=progress)
    """

    def __init__(self, description: str, console: Console | None = None) -> None:
        console = console or err_console
        self.description = description
        self.completed = 0
        self.total = 0
        self._task_id = None
        self._progress = Progress(
            TextColumn("{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            console=console,
            transient=True,
            disable=not console.is_terminal,
        )

    def __enter__(self) -> "ProgressReporter":
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def __call__(self, completed: int, total: int) -> None:
        self.completed = completed
        self.total = total
        if self._task_id is None:
            self._task_id = self._progress.add_task(self.description, total=total)
        self._progress.update(self._task_id, completed=completed)
