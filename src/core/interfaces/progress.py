"""Contrato del sumidero de progreso.

Solo observacional: nunca altera el flujo del pipeline.
"""

from __future__ import annotations

from typing import Protocol


class ProgressHandle(Protocol):
    def success(self) -> None: ...

    def fail(self) -> None: ...


class ProgressReporter(Protocol):
    def start(self, message: str) -> ProgressHandle:
        """Se llama justo antes de iniciar una llamada remota."""

        ...
