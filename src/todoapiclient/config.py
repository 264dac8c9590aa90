"""Configuration management with XDG paths, atomic writes, and precedence resolution.

The client itself only needs a base endpoint. The ``todoapi`` command line
resolves that endpoint (and request settings) from several layers:

* **User config** -- a single :class:`~todoapiclient.models.ClientSettings`
  JSON file under the XDG config directory. See :func:`load_settings` and
  :func:`save_settings`.
* **Project config** -- an optional ``./todoapi.json`` with the same keys.
* **Environment** -- ``TODO_API_BASE_URL`` and ``TODO_API_TIMEOUT``.
* **CLI flags** -- ``--base-url`` and ``--timeout``.

:func:`resolve_settings` merges them, highest precedence last in the list
above. All writes go through :func:`_atomic_write`.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from todoapiclient.exceptions import ConfigError
from todoapiclient.models import ClientSettings

_APP_NAME = "todoapi"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "todoapi.json"

ENV_BASE_URL = "TODO_API_BASE_URL"
ENV_TIMEOUT = "TODO_API_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True on Linux/BSD, where the XDG Base Directory spec applies."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from *env_var*, falling back under ``$HOME``."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/todoapi/`` (default ``~/.config/todoapi/``).
    On macOS/Windows: ``~/.todoapi/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_CONFIG_HOME", (".config",)) / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/todoapi/`` (default ``~/.local/share/todoapi/``).
    On macOS/Windows: ``~/.todoapi/logs/``.
    """
    if _is_xdg_platform():
        path = _xdg_base("XDG_DATA_HOME", (".local", "share")) / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def _atomic_write(path: Path, data: str) -> None:
    """Write *data* to *path* via a temp file in the same directory plus rename.

    The temp file is removed if anything fails before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd = None
    tmp_path: Optional[str] = None
    try:
        fd = tempfile.NamedTemporaryFile(
            mode="w",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
            encoding="utf-8",
        )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None
        os.replace(tmp_path, path)
    except BaseException:
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- User config ---


def settings_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_settings() -> ClientSettings:
    """Load the user configuration.

    Returns:
        The stored :class:`~todoapiclient.models.ClientSettings`, or the
        defaults when no file exists yet.

    Raises:
        ConfigError: If the file contains invalid JSON or fails validation.
    """
    path = settings_path()
    if not path.is_file():
        return ClientSettings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return ClientSettings.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc


def save_settings(settings: ClientSettings) -> None:
    """Persist the user configuration atomically."""
    data = settings.model_dump(mode="json")
    _atomic_write(settings_path(), json.dumps(data, indent=2) + "\n")


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Load ``./todoapi.json`` from the current directory.

    Returns:
        The parsed JSON object, or ``None`` if the file does not exist.

    Raises:
        ConfigError: If the file is not a valid JSON object.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid project config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid project config at {path}: expected a JSON object")
    return data


# --- Precedence resolution ---


def resolve_settings(
    cli_base_url: Optional[str] = None,
    cli_timeout: Optional[float] = None,
) -> ClientSettings:
    """Resolve the effective settings.

    Precedence (high to low):
        1. CLI flags (``cli_base_url``, ``cli_timeout``)
        2. Environment variables (``TODO_API_BASE_URL``, ``TODO_API_TIMEOUT``)
        3. Project config (``./todoapi.json``)
        4. User config (``~/.config/todoapi/config.json``)
        5. Defaults

    Raises:
        ConfigError: On unreadable config files or a non-numeric
            ``TODO_API_TIMEOUT``.
    """
    settings = load_settings()

    project = load_project_config()
    if project is not None:
        merged = settings.model_dump(mode="json")
        for key, value in project.items():
            if isinstance(value, dict) and isinstance(merged.get(key), dict):
                merged[key].update(value)
            else:
                merged[key] = value
        try:
            settings = ClientSettings.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid project config: {exc}") from exc

    env_base_url = os.environ.get(ENV_BASE_URL)
    if env_base_url:
        settings.base_url = env_base_url
    env_timeout = os.environ.get(ENV_TIMEOUT)
    if env_timeout:
        try:
            settings.request.timeout = float(env_timeout)
        except ValueError as exc:
            raise ConfigError(f"{ENV_TIMEOUT} must be a number, got {env_timeout!r}") from exc

    if cli_base_url is not None:
        settings.base_url = cli_base_url
    if cli_timeout is not None:
        settings.request.timeout = cli_timeout

    return settings
