"""HTTP client module for todoapiclient.

Provides :class:`TodoApiClient`, a blocking client backed by
:class:`httpx.Client` that performs CRUD calls against a remote todo
collection and raises a classified
:class:`~todoapiclient.exceptions.TodoApiClientError` on failure.

Example::

    from todoapiclient.client import TodoApiClient

    with TodoApiClient("https://jsonplaceholder.typicode.com") as client:
        tasks = client.get_all_tasks()
"""

from todoapiclient.client.todo_client import TodoApiClient, classify_status

__all__ = ["TodoApiClient", "classify_status"]
