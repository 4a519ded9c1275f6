# src/quarry/core/logging.py
"""
Console logging for quarry, rendered with rich.

    from quarry.core.logging import log, color_palette

    log.section("Registering builders")
    with log.indented():
        log.info(f"Builder {color_palette['builder']('build_post_query')}")
"""

import os
import time
from contextlib import contextmanager
from enum import IntEnum
from typing import Any, Callable, Dict, Iterator, List, Optional

from rich.console import Console
from rich.table import Table
from rich.markup import escape


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


def _markup(style: str) -> Callable[[Any], str]:
    return lambda value: f"[{style}]{escape(str(value))}[/{style}]"


# Markup helpers for the names that show up in log lines.
color_palette: Dict[str, Callable[[Any], str]] = {
    "entity": _markup("bold cyan"),
    "builder": _markup("magenta"),
    "field": _markup("green"),
    "value": _markup("yellow"),
    "override": _markup("bold blue"),
    "dim": _markup("dim"),
}


class Logger:
    """Leveled console logger with indentation and timing helpers."""

    def __init__(self, level: LogLevel = LogLevel.INFO, console: Optional[Console] = None):
        self.level = level
        self.console = console or Console(stderr=True)
        self._indent = 0

    def set_level(self, level: "LogLevel | str") -> None:
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.level = level

    def is_enabled(self, level: LogLevel) -> bool:
        return level >= self.level

    def _emit(self, level: LogLevel, symbol: str, message: str) -> None:
        if not self.is_enabled(level):
            return
        padding = "  " * self._indent
        self.console.print(f"{padding}{symbol} {message}", highlight=False)

    def debug(self, message: str) -> None:
        self._emit(LogLevel.DEBUG, "[dim]·[/dim]", f"[dim]{message}[/dim]")

    def info(self, message: str) -> None:
        self._emit(LogLevel.INFO, "[blue]ℹ[/blue]", message)

    def success(self, message: str) -> None:
        self._emit(LogLevel.INFO, "[green]✓[/green]", message)

    def warn(self, message: str) -> None:
        self._emit(LogLevel.WARNING, "[yellow]⚠[/yellow]", message)

    def error(self, message: str) -> None:
        self._emit(LogLevel.ERROR, "[red]✗[/red]", message)

    def section(self, title: str) -> None:
        if self.is_enabled(LogLevel.INFO):
            self.console.rule(f"[bold]{title}[/bold]")

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._indent += 1
        try:
            yield
        finally:
            self._indent -= 1

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.info(f"{label} {color_palette['dim'](f'({elapsed:.4f}s)')}")

    def table(self, headers: List[str], rows: List[List[Any]], title: Optional[str] = None) -> None:
        if not self.is_enabled(LogLevel.INFO):
            return
        table = Table(title=title)
        for header in headers:
            table.add_column(header)
        for row in rows:
            table.add_row(*(str(cell) for cell in row))
        self.console.print(table)


def level_from_env(default: LogLevel = LogLevel.INFO) -> LogLevel:
    """Level named by `QUARRY_LOG_LEVEL`, falling back to `default` for unknown names."""
    name = os.environ.get("QUARRY_LOG_LEVEL", default.name).upper()
    return LogLevel.__members__.get(name, default)


log = Logger(level_from_env())
