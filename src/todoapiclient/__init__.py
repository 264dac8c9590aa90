"""todoapiclient -- a small typed HTTP client for a todo REST API.

The package talks to a remote collection of todo items exposed under
``{base}/todos`` and turns HTTP outcomes into typed results::

    from todoapiclient import TaskDto, TodoApiClient

    with TodoApiClient("https://jsonplaceholder.typicode.com") as client:
        tasks = client.get_all_tasks()
        client.add_task(TaskDto(id="201", user_id="1", title="Write docs", finished=False))

Failed calls raise a subclass of
:class:`~todoapiclient.exceptions.TodoApiClientError` tagged with an
:class:`~todoapiclient.exceptions.ErrorKind`.

Modules:
    client: :class:`TodoApiClient` and status classification.
    models: Pydantic models (:class:`TaskDto`, settings).
    exceptions: Exception hierarchy with exit-code mapping.
    config: XDG-aware settings and precedence resolution.
    output: stdout/stderr formatting with Rich support.
    app: Typer application and the ``todoapi`` entry point.
"""

__version__ = "0.1.0"

from todoapiclient.client import TodoApiClient, classify_status  # noqa: E402
from todoapiclient.exceptions import (  # noqa: E402
    ErrorKind,
    ItemNotFoundError,
    ServerError,
    TodoApiClientError,
    TransportError,
    UnknownError,
)
from todoapiclient.models import TaskDto  # noqa: E402

__all__ = [
    "ErrorKind",
    "ItemNotFoundError",
    "ServerError",
    "TaskDto",
    "TodoApiClient",
    "TodoApiClientError",
    "TransportError",
    "UnknownError",
    "classify_status",
    "__version__",
]
