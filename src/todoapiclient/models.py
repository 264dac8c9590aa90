"""Pydantic models shared across todoapiclient.

The models fall into two groups:

**Wire models** -- mirror the JSON exchanged with the todo API:
    :class:`TaskDto`.

**Configuration models** -- serialised as JSON in the user's config
directory: :class:`RequestConfig`, :class:`OutputConfig` and
:class:`ClientSettings`.

All models use Pydantic v2.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://jsonplaceholder.typicode.com"


# --- Wire models ---


class TaskDto(BaseModel):
    """One todo item as exchanged with the remote API.

    Attribute names are Pythonic; the wire names are kept as aliases. Note
    that the completion flag is called ``finished`` in memory but
    ``completed`` on the wire.

    ===========  ============
    attribute    wire name
    ===========  ============
    ``id``       ``id``
    ``user_id``  ``userId``
    ``title``    ``title``
    ``finished`` ``completed``
    ===========  ============

    Instances are frozen and compare by value. Numeric identifiers in
    server payloads are converted to their decimal string.

    Example::

        TaskDto(id="1", user_id="2", title="Finish this kata", finished=False)
        TaskDto.from_wire({"id": 1, "userId": 2, "title": "...", "completed": True})
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    title: str
    finished: bool = Field(alias="completed")

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        # bool is an int subclass but never a valid identifier
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @classmethod
    def from_wire(cls, payload: Any) -> TaskDto:
        """Decode a single JSON object into a :class:`TaskDto`.

        Only the wire names are accepted here; ``user_id`` and ``finished``
        work for keyword construction but not in server payloads.

        Raises:
            pydantic.ValidationError: If a field is missing or mistyped.
        """
        return cls.model_validate(payload, by_alias=True, by_name=False)

    def to_wire(self) -> dict[str, Any]:
        """Return the wire-shaped dict (``userId`` / ``completed`` keys)."""
        return self.model_dump(by_alias=True)

    def to_json(self) -> str:
        """Return the compact JSON request body for this task."""
        return self.model_dump_json(by_alias=True)


# --- Configuration models ---


class RequestConfig(BaseModel):
    """HTTP settings applied to every request the client sends."""

    timeout: float = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(
        default=True, description="Follow 3xx redirects in the transport"
    )


class OutputConfig(BaseModel):
    """Output format used when neither ``--json`` nor ``--plain`` is given."""

    format: Literal["auto", "json", "plain", "rich"] = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class ClientSettings(BaseModel):
    """User-wide configuration persisted at ``~/.config/todoapi/config.json``.

    Loaded and saved by :func:`~todoapiclient.config.load_settings` and
    :func:`~todoapiclient.config.save_settings`. See
    :func:`~todoapiclient.config.resolve_settings` for how CLI flags,
    environment variables and project config override these values.
    """

    base_url: str = Field(
        default=DEFAULT_BASE_URL, description="Base endpoint of the todo API"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
