"""Typer application and CLI entry point for todoapiclient.

This module builds the ``todoapi`` command: a root callback that installs
the global :class:`~todoapiclient.output.OutputManager` and records the
connection overrides, the task commands from
:mod:`todoapiclient.commands.tasks`, and the ``config`` group.

:func:`main` is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import sys
import traceback
from datetime import datetime
from typing import Optional

import typer

from todoapiclient import __version__
from todoapiclient.commands.config import config_app
from todoapiclient.commands.tasks import (
    add_task,
    delete_task,
    get_task,
    list_tasks,
    update_task,
)
from todoapiclient.exceptions import ConfigError, TodoApiClientError
from todoapiclient.exit_codes import EXIT_GENERIC_FAILURE
from todoapiclient.output import OutputFormat, OutputManager, error, set_output


app = typer.Typer(
    name="todoapi",
    help="Manage tasks on a todo REST API.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("list")(list_tasks)
app.command("get")(get_task)
app.command("add")(add_task)
app.command("update")(update_task)
app.command("delete")(delete_task)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"todoapi {__version__}")
        raise typer.Exit()


def _configured_format() -> OutputFormat:
    """The ``output.format`` setting, or ``AUTO`` when the config is unreadable."""
    from todoapiclient.config import resolve_settings

    try:
        return OutputFormat(resolve_settings().output.format)
    except ConfigError:
        # the command that needs the settings reports the error
        return OutputFormat.AUTO


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", "-b", help="Base endpoint of the todo API."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Request timeout in seconds."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress status messages."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Trace every request on stderr."
    ),
) -> None:
    """Install the output manager and store connection overrides in ``ctx.obj``."""
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    else:
        fmt = _configured_format()

    set_output(
        OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    )

    ctx.ensure_object(dict)
    ctx.obj["base_url"] = base_url
    ctx.obj["timeout"] = timeout


def _write_crash_log(exc: Exception) -> str:
    """Write the current traceback to the data directory and return its path."""
    from todoapiclient.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(f"{exc!r}\n\n{traceback.format_exc()}")
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``todoapi`` console script.

    A :class:`~todoapiclient.exceptions.TodoApiClientError` that escapes a
    command exits with its ``exit_code``. Any other exception produces a
    crash log and a generic failure exit; Ctrl-C exits with 130.
    """
    try:
        app()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except TodoApiClientError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
