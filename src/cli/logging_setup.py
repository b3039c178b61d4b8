"""Logging de la CLI (stdlib `logging` + `RichHandler`).

Los módulos del Core y adapters solo hacen `logging.getLogger(__name__)`;
aquí se decide formato y destino (stderr, para no mezclarse con el reporte).
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_LOGGERS = ("adapters", "core", "cli")


def configure_logging(level: str, *, console: Console | None = None) -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    for name in _LOGGERS:
        logger = logging.getLogger(name)
        logger.handlers = [handler]
        logger.setLevel(resolved)
        logger.propagate = False

    # httpx loguea cada request en INFO; solo lo queremos en modo debug.
    logging.getLogger("httpx").setLevel(logging.DEBUG if resolved <= logging.DEBUG else logging.WARNING)
