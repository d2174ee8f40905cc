"""Config command for viewing and managing traitgen runtime settings."""

import typer

from ..app import app, console
from ...config import get_config, reset_config, CONFIG_FILE


VALID_KEYS = {
    "generation.max_attempts_per_item",
    "generation.min_attempts",
    "render.workers",
    "render.task_timeout_seconds",
    "render.image_extension",
    "render.max_memory_gb",
    "render.resource_mode",
}

INT_FIELDS = {
    "max_attempts_per_item",
    "min_attempts",
    "workers",
}

FLOAT_FIELDS = {
    "task_timeout_seconds",
    "max_memory_gb",
}

RESOURCE_MODES = {"auto", "manual"}


@app.command("config")
def config_command(
    action: str = typer.Argument(
        ...,
        help="Action: show, set, reset",
    ),
    key: str | None = typer.Argument(
        None,
        help="Config key (e.g. render.workers, generation.min_attempts)",
    ),
    value: str | None = typer.Argument(
        None,
        help="Value to set",
    ),
):
    """View or modify traitgen runtime settings.

    Examples:
        traitgen config show
        traitgen config set render.workers 4
        traitgen config set render.task_timeout_seconds 600
        traitgen config set generation.max_attempts_per_item 500
        traitgen config reset
    """
    if action == "show":
        _show_config()
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage:[/red] traitgen config set <key> <value>")
            console.print()
            console.print("Available keys:")
            for k in sorted(VALID_KEYS):
                console.print(f"  {k}")
            raise typer.Exit(1)
        _set_config(key, value)
    elif action == "reset":
        _reset_config()
    else:
        console.print(f"[red]Unknown action:[/red] {action}")
        console.print("Valid actions: show, set, reset")
        raise typer.Exit(1)


def _show_config():
    """Display current resolved configuration."""
    config = get_config()

    console.print()
    console.print("[bold]traitgen Configuration[/bold]")
    console.print("─" * 40)

    console.print()
    console.print("[bold cyan]Generation[/bold cyan] (draw ceilings)")
    console.print(f"  max_attempts_per_item = {config.generation.max_attempts_per_item}")
    console.print(f"  min_attempts          = {config.generation.min_attempts}")

    console.print()
    console.print("[bold cyan]Render[/bold cyan] (compositing pool)")
    workers = config.render.workers or "[dim](auto)[/dim]"
    timeout = config.render.task_timeout_seconds or "[dim](wait for all)[/dim]"
    console.print(f"  workers               = {workers}")
    console.print(f"  task_timeout_seconds  = {timeout}")
    console.print(f"  image_extension       = {config.render.image_extension}")
    max_memory = config.render.max_memory_gb or "[dim](all)[/dim]"
    console.print(f"  max_memory_gb         = {max_memory}")
    console.print(f"  resource_mode         = {config.render.resource_mode}")

    console.print()
    if CONFIG_FILE.exists():
        console.print(f"Config file: {CONFIG_FILE}")
    else:
        console.print(f"Config file: [dim]not created yet[/dim] ({CONFIG_FILE})")
    console.print()


def _set_config(key: str, value: str):
    """Set a config value and save."""
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key:[/red] {key}")
        console.print()
        console.print("Available keys:")
        for k in sorted(VALID_KEYS):
            console.print(f"  {k}")
        raise typer.Exit(1)

    # Load current config (or defaults if no file)
    config = get_config()

    zone, field_name = key.split(".", 1)
    target = config.generation if zone == "generation" else config.render

    # Type coercion
    if field_name in INT_FIELDS:
        try:
            setattr(target, field_name, int(value))
        except ValueError:
            console.print(f"[red]Invalid integer value:[/red] {value}")
            raise typer.Exit(1)
    elif field_name in FLOAT_FIELDS:
        try:
            setattr(target, field_name, float(value))
        except ValueError:
            console.print(f"[red]Invalid number value:[/red] {value}")
            raise typer.Exit(1)
    elif field_name == "resource_mode":
        if value not in RESOURCE_MODES:
            console.print(f"[red]Invalid resource mode:[/red] {value}")
            console.print(f"Valid modes: {', '.join(sorted(RESOURCE_MODES))}")
            raise typer.Exit(1)
        target.resource_mode = value
    else:
        setattr(target, field_name, value.lstrip("."))

    config.save()
    reset_config()  # Clear cached singleton so next get_config() reloads

    console.print(f"[green]✓[/green] Set {key} = {value}")
    console.print(f"  Saved to {CONFIG_FILE}")


def _reset_config():
    """Reset config to defaults."""
    if CONFIG_FILE.exists():
        CONFIG_FILE.unlink()
        reset_config()
        console.print("[green]✓[/green] Config reset to defaults")
        console.print(f"  Removed {CONFIG_FILE}")
    else:
        console.print("Config already at defaults (no config file exists)")
