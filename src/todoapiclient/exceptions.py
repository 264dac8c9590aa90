"""Exception hierarchy for todoapiclient.

Every failed client operation raises a subclass of
:class:`TodoApiClientError`. Each subclass carries two class-level tags:

* ``kind`` -- the :class:`ErrorKind` the failure was classified as, so
  callers can branch on a value instead of an ``isinstance`` chain.
* ``exit_code`` -- the process exit code used by the ``todoapi`` CLI.

Subclass hierarchy::

    TodoApiClientError (exit 1)
    +-- InvalidUsageError   (exit 2)
    +-- ConfigError         (exit 1)
    +-- ItemNotFoundError   (exit 4, NOT_FOUND)
    +-- ServerError         (exit 5, SERVER_ERROR)
    +-- UnknownError        (exit 7, UNKNOWN_ERROR)
    +-- TransportError      (exit 6, TRANSPORT)
"""

from __future__ import annotations

import enum
from typing import Optional

from todoapiclient.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SERVER_ERROR,
    EXIT_TRANSPORT_ERROR,
    EXIT_UNKNOWN_ERROR,
)


class ErrorKind(str, enum.Enum):
    """Classification tag attached to every failed API call."""

    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    UNKNOWN_ERROR = "unknown_error"
    TRANSPORT = "transport"


class TodoApiClientError(Exception):
    """Base exception for all todoapiclient errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE
    kind: Optional[ErrorKind] = None

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(TodoApiClientError):
    """Raised for invalid CLI arguments or values."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(TodoApiClientError):
    """Raised for unreadable or invalid configuration files."""

    exit_code = EXIT_GENERIC_FAILURE


class ApiStatusError(TodoApiClientError):
    """Base for failures derived from an HTTP status code.

    Args:
        message: Human-readable error description.
        status_code: The HTTP status returned by the server.
    """

    def __init__(self, message: str, status_code: int):
        super().__init__(message)
        self.status_code = status_code


class ItemNotFoundError(ApiStatusError):
    """Raised when the API returns HTTP 404 for a task."""

    exit_code = EXIT_NOT_FOUND
    kind = ErrorKind.NOT_FOUND


class ServerError(ApiStatusError):
    """Raised when the API returns an HTTP 5xx status."""

    exit_code = EXIT_SERVER_ERROR
    kind = ErrorKind.SERVER_ERROR


class UnknownError(ApiStatusError):
    """Raised for any non-2xx status that is neither 404 nor 5xx (e.g. 418)."""

    exit_code = EXIT_UNKNOWN_ERROR
    kind = ErrorKind.UNKNOWN_ERROR


class TransportError(TodoApiClientError):
    """Raised when a request cannot be completed at all.

    Covers network-level failures (connection refused, DNS, timeouts),
    responses whose body cannot be decoded into the expected shape, and
    calls on a closed client. When an httpx or decoding error triggered
    it, that error is chained as ``__cause__``; a list body that is not an
    array and a closed client have no cause.
    """

    exit_code = EXIT_TRANSPORT_ERROR
    kind = ErrorKind.TRANSPORT
