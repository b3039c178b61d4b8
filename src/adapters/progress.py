"""Progreso en terminal (Rich).

Por qué Rich Progress y no `console.status`:
- Las ramas proyecto/boards corren en paralelo; un único `Progress` admite
  varios spinners simultáneos, `status` solo uno.
"""

from __future__ import annotations

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TaskID, TextColumn


def build_progress(console: Console) -> Progress:
    return Progress(
        SpinnerColumn(finished_text=" "),
        TextColumn("{task.description}"),
        console=console,
        transient=False,
    )


class _RichHandle:
    def __init__(self, progress: Progress, task_id: TaskID, message: str) -> None:
        self._progress = progress
        self._task_id = task_id
        self._message = message

    def _finish(self, description: str) -> None:
        self._progress.update(self._task_id, description=description, total=1, completed=1)

    def success(self) -> None:
        self._finish(f"[green]✔[/green] {self._message}")

    def fail(self) -> None:
        self._finish(f"[red]✖[/red] {self._message}")


class RichProgressReporter:
    """Un spinner por llamada remota dentro de un `Progress` compartido."""

    def __init__(self, progress: Progress) -> None:
        self._progress = progress

    def start(self, message: str) -> _RichHandle:
        task_id = self._progress.add_task(message, total=None)
        return _RichHandle(self._progress, task_id, message)
