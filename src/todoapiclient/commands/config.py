"""Config commands -- view and modify the user configuration.

Provides the ``todoapi config`` group for reading and updating the
persisted :class:`~todoapiclient.models.ClientSettings` (base endpoint,
request timeout, output format).
"""

from __future__ import annotations

import typer
from pydantic import ValidationError

from todoapiclient.output import error, format_response, info, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show() -> None:
    """Show the stored configuration.

    Example::

        todoapi config show
        todoapi --json config show
    """
    from todoapiclient.config import get_config_dir, load_settings

    settings = load_settings()
    info(f"Config directory: {get_config_dir()}")
    format_response(settings.model_dump(mode="json"))


@config_app.command("path")
def config_path() -> None:
    """Print the path of the configuration file."""
    from todoapiclient.config import settings_path
    from todoapiclient.output import get_output

    get_output().print_data(str(settings_path()))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(
        help="Config key (dot notation, e.g. 'request.timeout')."
    ),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a configuration value.

    The value is coerced to the type of the existing field and the whole
    config is validated before it is saved.

    Example::

        todoapi config set base_url http://localhost:3000
        todoapi config set request.timeout 5
        todoapi config set request.verify_ssl false
    """
    from todoapiclient.config import load_settings, save_settings
    from todoapiclient.models import ClientSettings

    data = load_settings().model_dump(mode="json")

    keys = key.split(".")
    target = data
    for k in keys[:-1]:
        if k not in target or not isinstance(target[k], dict):
            error(f"Invalid config key: {key}")
            raise typer.Exit(code=2)
        target = target[k]

    final_key = keys[-1]
    if final_key not in target or isinstance(target[final_key], dict):
        error(f"Unknown config key: {key}")
        raise typer.Exit(code=2)

    current = target[final_key]
    coerced: object
    if isinstance(current, bool):
        coerced = value.lower() in ("true", "1", "yes")
    elif isinstance(current, (int, float)):
        try:
            coerced = float(value)
        except ValueError:
            error(f"Expected a number for {key}, got: {value}")
            raise typer.Exit(code=2) from None
    else:
        coerced = value

    target[final_key] = coerced

    try:
        settings = ClientSettings.model_validate(data)
    except ValidationError as exc:
        error(f"Validation error: {exc}")
        raise typer.Exit(code=2) from None

    save_settings(settings)
    success(f"Set {key} = {coerced}")


@config_app.command("reset")
def config_reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation."),
) -> None:
    """Reset the configuration to defaults."""
    from todoapiclient.config import save_settings
    from todoapiclient.models import ClientSettings

    if not force:
        confirmed = typer.confirm("Reset all config to defaults?")
        if not confirmed:
            info("Cancelled.")
            raise typer.Exit()

    save_settings(ClientSettings())
    success("Configuration reset to defaults.")
