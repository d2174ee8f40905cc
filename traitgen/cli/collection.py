"""Shared collection loading for CLI commands.

Both `generate` and `inspect` need the same front half of the pipeline:
load the collection config, tidy the layer tree, reconcile the configured
layer order against the folders on disk, and discover each layer's options.
"""

import json
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.markup import escape

from ..assets import list_layer_folders, load_layers, remove_named_files
from ..core.errors import TraitgenError
from ..core.models import CollectionSpec, LayerSet
from ..generation import reconcile_layers
from .utils import ExitCode, Output, exit_code_for


def load_spec(config_path: Path, out: Output) -> CollectionSpec:
    """Load a collection config or exit with the matching code."""
    if not config_path.exists():
        out.error(
            f"Config file not found: {config_path}",
            exit_code=ExitCode.FILE_NOT_FOUND,
            suggestion="Pass the path to your collection config (default: config.json)",
        )
        raise typer.Exit(out.finish())

    try:
        spec = CollectionSpec.from_file(config_path)
    except ValidationError as e:
        out.error(f"Invalid collection config: {e.error_count()} error(s)")
        for err in e.errors()[:5]:
            location = ".".join(str(part) for part in err["loc"])
            out.text(f"  [red]✗[/red] {escape(location)}: {escape(err['msg'])}")
        raise typer.Exit(out.finish())
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        out.error(f"Could not parse {config_path}: {escape(str(e))}")
        raise typer.Exit(out.finish())
    except OSError as e:
        out.error(f"Could not read {config_path}: {e}", exit_code=ExitCode.FILE_NOT_FOUND)
        raise typer.Exit(out.finish())

    return spec


def discover_layers(spec: CollectionSpec, out: Output, extension: str) -> LayerSet:
    """Reconcile layer folders with the config and load every layer's options."""
    try:
        remove_named_files(spec.base_path)
        discovered = list_layer_folders(spec.base_path)
        ordered = reconcile_layers(discovered, spec.layer_paths(), spec.base_path)
        layers = load_layers(ordered, extension)
    except TraitgenError as e:
        out.error(escape(str(e)), exit_code=exit_code_for(e))
        raise typer.Exit(out.finish())
    except OSError as e:
        out.error(
            f"Could not prepare layers under {spec.base_path}: {escape(str(e))}",
            exit_code=ExitCode.FILE_NOT_FOUND,
        )
        raise typer.Exit(out.finish())

    for folder, layer in zip(spec.layer_folders, layers):
        if not layer:
            out.warning(
                f"Layer {folder} has no .{extension} files",
                suggestion="It will be skipped in every combination",
            )
    return layers
