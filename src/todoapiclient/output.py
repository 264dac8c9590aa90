"""Rendering of tasks and diagnostics for the ``todoapi`` command line.

Task data goes to stdout, everything else (status lines, errors, request
traces) to stderr, so ``todoapi --json list | jq`` never sees a stray
message. Three formats are supported:

* ``json`` -- tasks as wire-shaped objects (``userId``, ``completed``),
  exactly as the API sends them.
* ``plain`` -- tab-separated text; booleans are written ``true``/``false``
  in every command.
* ``rich`` -- a Rich table for task lists, highlighted JSON otherwise.

``auto`` picks ``rich`` on a colour-capable terminal and ``plain`` when
stdout is piped. ``NO_COLOR``, ``TERM=dumb`` and ``--no-color`` disable
colour.

The CLI callback installs one :class:`OutputManager` with
:func:`set_output`; commands and the client reach it through
:func:`get_output` or the helpers at the bottom of this module.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

if TYPE_CHECKING:
    from todoapiclient.models import TaskDto

TASK_COLUMNS = ["id", "userId", "title", "completed"]


class OutputFormat(str, Enum):
    """Output formats accepted by ``--json``/``--plain`` and ``output.format``."""

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


class OutputManager:
    """Writes task data to stdout and diagnostics to stderr.

    Args:
        format: Desired output format. ``AUTO`` is resolved at construction.
        no_color: Disable colour and Rich markup.
        quiet: Hide ``info`` and ``success`` messages.
        verbose: Show ``debug`` messages (request traces).
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        """The resolved output format (never ``AUTO``)."""
        return self._format

    # ------------------------------------------------------------------ #
    # Task data (stdout)
    # ------------------------------------------------------------------ #

    def print_tasks(self, tasks: list[TaskDto]) -> None:
        """Render a task list: a JSON array, TSV with a header, or a table."""
        records = [task.to_wire() for task in tasks]
        if self._format == OutputFormat.JSON:
            self.format_response(records)
            return

        rows = [[_plain_value(record[col]) for col in TASK_COLUMNS] for record in records]
        if self._format == OutputFormat.PLAIN:
            self.print_data("\t".join(TASK_COLUMNS))
            for row in rows:
                self.print_data("\t".join(row))
        else:
            table = Table(title="Tasks", show_header=True, header_style="bold cyan")
            for col in TASK_COLUMNS:
                table.add_column(col)
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)

    def print_task(self, task: Optional[TaskDto]) -> None:
        """Render one task by its wire names; ``None`` prints nothing."""
        if task is not None:
            self.format_response(task.to_wire())

    def format_response(self, data: Any) -> None:
        """Render a JSON-compatible value in the active format."""
        if self._format == OutputFormat.PLAIN:
            self._print_plain(data)
            return
        text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
        if self._format == OutputFormat.JSON:
            self.print_data(text)
        else:
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))

    def print_data(self, text: str) -> None:
        """Print raw text to stdout."""
        print(text, file=sys.stdout, flush=True)

    def _print_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                self.print_data(f"{key}\t{_plain_value(value)}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self.print_data("\t".join(_plain_value(v) for v in item.values()))
                else:
                    self.print_data(_plain_value(item))
        else:
            self.print_data(_plain_value(data))

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Status line; hidden by ``--quiet``."""
        if not self._quiet:
            self._emit(message, escape(message))

    def success(self, message: str) -> None:
        """Green status line; hidden by ``--quiet``."""
        if not self._quiet:
            self._emit(message, f"[green]{escape(message)}[/green]")

    def error(self, message: str) -> None:
        """Error line; always shown."""
        self._emit(f"Error: {message}", f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Request trace; only shown with ``--verbose``."""
        if self._verbose:
            self._emit(f"[debug] {message}", f"[dim]\\[debug] {escape(message)}[/dim]")

    def _emit(self, plain: str, markup: str) -> None:
        if self._no_color:
            print(plain, file=sys.stderr, flush=True)
        else:
            self._stderr.print(markup, highlight=False)


def _plain_value(value: Any) -> str:
    # match the JSON spelling so list and get agree
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    return os.environ.get("NO_COLOR") is not None or os.environ.get("TERM") == "dumb"


# ------------------------------------------------------------------ #
# Global instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager` (used between tests)."""
    global _output
    _output = None


def format_response(data: Any) -> None:
    get_output().format_response(data)


def info(message: str) -> None:
    get_output().info(message)


def success(message: str) -> None:
    get_output().success(message)


def error(message: str) -> None:
    get_output().error(message)
