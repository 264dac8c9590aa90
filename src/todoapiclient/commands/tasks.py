"""Task commands -- CRUD calls against the configured todo API.

Each command resolves the effective settings (see
:func:`~todoapiclient.config.resolve_settings`), opens a
:class:`~todoapiclient.client.TodoApiClient` for the duration of one call,
and renders the result through the global output manager. Classified
client errors are printed to stderr and turned into the matching exit
code.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import typer

from todoapiclient.client import TodoApiClient
from todoapiclient.exceptions import TodoApiClientError
from todoapiclient.models import TaskDto
from todoapiclient.output import error, get_output, success


@contextmanager
def _api_client(ctx: typer.Context) -> Iterator[TodoApiClient]:
    """Yield a client built from the CLI context; map client errors to exit codes."""
    from todoapiclient.config import resolve_settings

    obj = ctx.obj or {}
    try:
        settings = resolve_settings(
            cli_base_url=obj.get("base_url"),
            cli_timeout=obj.get("timeout"),
        )
        with TodoApiClient(settings.base_url, request=settings.request) as client:
            yield client
    except TodoApiClientError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def list_tasks(ctx: typer.Context) -> None:
    """List every task.

    Example::

        todoapi list
        todoapi --json list
    """
    with _api_client(ctx) as client:
        tasks = client.get_all_tasks()
    get_output().print_tasks(tasks)


def get_task(
    ctx: typer.Context,
    task_id: str = typer.Argument(help="Task identifier."),
) -> None:
    """Show a single task."""
    with _api_client(ctx) as client:
        task = client.get_task_by_id(task_id)
    get_output().print_task(task)


def add_task(
    ctx: typer.Context,
    task_id: str = typer.Argument(help="Identifier of the new task."),
    user_id: str = typer.Option(..., "--user-id", "-u", help="Owning user id."),
    title: str = typer.Option(..., "--title", "-t", help="Task title."),
    finished: bool = typer.Option(False, "--finished", help="Mark the task as completed."),
) -> None:
    """Create a task."""
    task = TaskDto(id=task_id, user_id=user_id, title=title, finished=finished)
    with _api_client(ctx) as client:
        created = client.add_task(task)
    success(f"Created task {task.id}")
    get_output().print_task(created)


def update_task(
    ctx: typer.Context,
    task_id: str = typer.Argument(help="Identifier of the task to replace."),
    user_id: str = typer.Option(..., "--user-id", "-u", help="Owning user id."),
    title: str = typer.Option(..., "--title", "-t", help="Task title."),
    finished: bool = typer.Option(
        False, "--finished/--not-finished", help="Completion flag."
    ),
) -> None:
    """Replace a task."""
    task = TaskDto(id=task_id, user_id=user_id, title=title, finished=finished)
    with _api_client(ctx) as client:
        updated = client.update_task(task)
    success(f"Updated task {task.id}")
    get_output().print_task(updated)


def delete_task(
    ctx: typer.Context,
    task_id: str = typer.Argument(help="Identifier of the task to delete."),
) -> None:
    """Delete a task."""
    with _api_client(ctx) as client:
        client.delete_task_by_id(task_id)
    success(f"Deleted task {task_id}")
