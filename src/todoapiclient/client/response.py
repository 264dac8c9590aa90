"""Helpers for reading bodies out of :class:`httpx.Response` objects.

The client uses :func:`extract_response_data` wherever a body is optional
(create/update) and :func:`error_detail` to enrich error messages.
"""

from __future__ import annotations

import json
from typing import Any

import httpx


def extract_response_data(response: httpx.Response) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first. If that fails (e.g. the
    response is HTML or plain text), returns the raw text. Returns
    ``None`` for responses with no content.

    Args:
        response: The :class:`httpx.Response` to extract data from.

    Returns:
        A JSON-decoded object (``dict``, ``list``, etc.), a ``str`` of raw
        text, or ``None`` if the body is empty.
    """
    if not response.content:
        return None

    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def error_detail(response: httpx.Response) -> str:
    """Return a short error description from an error response body.

    Looks for ``message``, ``error`` or ``detail`` keys in a JSON object
    body, and otherwise uses the first 200 characters of the raw text.
    """
    data = extract_response_data(response)
    if data is None:
        return ""
    if isinstance(data, dict):
        msg = data.get("message") or data.get("error") or data.get("detail") or ""
        return str(msg)
    if isinstance(data, str):
        return data[:200]
    return str(data)[:200]
