"""Numeric process exit codes used by the ``todoapi`` command line.

Each constant maps to one failure category and is referenced by the
corresponding :class:`~todoapiclient.exceptions.TodoApiClientError`
subclass. Shell scripts can branch on the exit code instead of parsing
stderr.

Example::

    $ todoapi get 9999
    Error: HTTP 404
    $ echo $?
    4   # EXIT_NOT_FOUND
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""The requested task does not exist (HTTP 404)."""

EXIT_SERVER_ERROR = 5
"""The todo API answered with an HTTP 5xx status."""

EXIT_TRANSPORT_ERROR = 6
"""The request could not be completed (network failure or malformed response)."""

EXIT_UNKNOWN_ERROR = 7
"""The todo API answered with a status the client does not recognise."""
