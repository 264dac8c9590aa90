"""Synchronous client for the remote todo collection.

This module provides :class:`TodoApiClient`, which wraps
:class:`httpx.Client` and exposes the five CRUD operations of the todo
API:

=====================  ==========  ====================
method                 verb        path
=====================  ==========  ====================
``get_all_tasks``      ``GET``     ``/todos``
``get_task_by_id``     ``GET``     ``/todos/{id}``
``add_task``           ``POST``    ``/todos``
``update_task``        ``PUT``     ``/todos/{id}``
``delete_task_by_id``  ``DELETE``  ``/todos/{id}``
=====================  ==========  ====================

Every call issues exactly one request. Non-2xx statuses are mapped to a
typed exception by :func:`classify_status`; network failures and
undecodable bodies surface as
:class:`~todoapiclient.exceptions.TransportError`.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from todoapiclient.client.response import error_detail, extract_response_data
from todoapiclient.exceptions import (
    ApiStatusError,
    ErrorKind,
    ItemNotFoundError,
    ServerError,
    TransportError,
    UnknownError,
)
from todoapiclient.models import RequestConfig, TaskDto
from todoapiclient.output import get_output

logger = logging.getLogger(__name__)

TODOS_PATH = "/todos"

_ERRORS_BY_KIND: dict[ErrorKind, type[ApiStatusError]] = {
    ErrorKind.NOT_FOUND: ItemNotFoundError,
    ErrorKind.SERVER_ERROR: ServerError,
    ErrorKind.UNKNOWN_ERROR: UnknownError,
}


def classify_status(status: int) -> Optional[ErrorKind]:
    """Classify an HTTP status code.

    Returns ``None`` for 2xx statuses, :attr:`ErrorKind.NOT_FOUND` for 404,
    :attr:`ErrorKind.SERVER_ERROR` for 5xx and
    :attr:`ErrorKind.UNKNOWN_ERROR` for everything else (other 4xx such as
    418, and stray 1xx/3xx).
    """
    if 200 <= status < 300:
        return None
    if status == 404:
        return ErrorKind.NOT_FOUND
    if 500 <= status < 600:
        return ErrorKind.SERVER_ERROR
    return ErrorKind.UNKNOWN_ERROR


class TodoApiClient:
    """Blocking client for a todo REST collection.

    Holds no state besides the base endpoint and the underlying
    :class:`httpx.Client`, so a single instance may be shared between
    threads. Can be used directly or as a context manager; in both cases
    :meth:`close` releases the connection pool.

    Args:
        base_endpoint: Root URL of the API; ``/todos`` is resolved
            against it. A trailing slash is ignored.
        request: Optional transport settings (timeout, SSL verification,
            redirect handling).
        transport: Optional :class:`httpx.BaseTransport`, mainly for
            tests (e.g. :class:`httpx.MockTransport`).

    Example::

        with TodoApiClient("https://jsonplaceholder.typicode.com") as client:
            task = client.get_task_by_id("1")
    """

    def __init__(
        self,
        base_endpoint: str,
        request: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        config = request or RequestConfig()
        self._base_endpoint = base_endpoint.rstrip("/")
        self._client: Optional[httpx.Client] = httpx.Client(
            base_url=self._base_endpoint,
            timeout=config.timeout,
            verify=config.verify_ssl,
            follow_redirects=config.follow_redirects,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @property
    def base_endpoint(self) -> str:
        """The base URL all task paths are resolved against."""
        return self._base_endpoint

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> TodoApiClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client. Safe to call more than once."""
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def get_all_tasks(self) -> list[TaskDto]:
        """Fetch every task in server order.

        Raises:
            ItemNotFoundError: On 404.
            ServerError: On 5xx.
            UnknownError: On any other non-2xx status.
            TransportError: On network failure or a body that is not a
                JSON array of tasks.
        """
        response = self._send("GET", TODOS_PATH)
        payload = self._decode_json(response)
        if not isinstance(payload, list):
            raise TransportError(
                f"Malformed response from GET {TODOS_PATH}: expected a JSON array"
            )
        try:
            return [TaskDto.from_wire(item) for item in payload]
        except ValidationError as exc:
            raise TransportError(
                f"Malformed task in response from GET {TODOS_PATH}: {exc}"
            ) from exc

    def get_task_by_id(self, task_id: str) -> TaskDto:
        """Fetch a single task.

        Raises:
            ItemNotFoundError: When the task does not exist (404).
            ServerError: On 5xx.
            UnknownError: On any other non-2xx status.
            TransportError: On network failure or an undecodable body.
        """
        path = _task_path(task_id)
        response = self._send("GET", path)
        payload = self._decode_json(response)
        try:
            return TaskDto.from_wire(payload)
        except ValidationError as exc:
            raise TransportError(
                f"Malformed task in response from GET {path}: {exc}"
            ) from exc

    def add_task(self, task: TaskDto) -> Optional[TaskDto]:
        """Create *task* on the server.

        Returns:
            The task echoed back by the server, or ``None`` when the body
            is empty or not a task. The body never decides success.
        """
        response = self._send("POST", TODOS_PATH, task=task)
        return _echoed_task(response)

    def update_task(self, task: TaskDto) -> Optional[TaskDto]:
        """Replace the task identified by ``task.id`` with *task*.

        Returns:
            The task echoed back by the server, or ``None``.
        """
        response = self._send("PUT", _task_path(task.id), task=task)
        return _echoed_task(response)

    def delete_task_by_id(self, task_id: str) -> None:
        """Delete a single task.

        Raises:
            ItemNotFoundError: When the task does not exist (404).
        """
        self._send("DELETE", _task_path(task_id))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _send(
        self,
        method: str,
        path: str,
        task: Optional[TaskDto] = None,
    ) -> httpx.Response:
        """Send one request and raise a classified error on failure."""
        if self._client is None:
            raise TransportError("Client is closed")

        output = get_output()
        kwargs: dict[str, Any] = {}
        if task is not None:
            kwargs["content"] = task.to_json().encode("utf-8")
            kwargs["headers"] = {"Content-Type": "application/json"}

        output.debug(f"{method} {self._base_endpoint}{path}")
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc
        output.debug(f"HTTP {response.status_code} {response.reason_phrase}")

        self._map_response_error(response)
        return response

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for non-2xx HTTP status codes."""
        status = response.status_code
        kind = classify_status(status)
        if kind is None:
            return

        msg = error_detail(response)
        full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"
        raise _ERRORS_BY_KIND[kind](full_msg, status_code=status)

    def _decode_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"Malformed response from {response.request.method} "
                f"{response.request.url.path}: {exc}"
            ) from exc


def _task_path(task_id: str) -> str:
    """Return ``/todos/{id}`` with *task_id* encoded as one path segment."""
    return f"{TODOS_PATH}/{quote(str(task_id), safe='')}"


def _echoed_task(response: httpx.Response) -> Optional[TaskDto]:
    data = extract_response_data(response)
    if not isinstance(data, dict):
        return None
    try:
        return TaskDto.from_wire(data)
    except ValidationError as exc:
        logger.debug("Ignoring response body that is not a complete task: %s", exc)
        return None
