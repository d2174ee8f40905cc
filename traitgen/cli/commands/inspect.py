"""Inspect command: show layers, feasibility and the quota plan without sampling."""

from pathlib import Path

import typer
from rich.markup import escape

from ...config import get_config
from ...core.errors import TraitgenError
from ..app import app, console, get_json_mode
from ..collection import discover_layers, load_spec
from ..utils import Output, exit_code_for


@app.command("inspect")
def inspect_command(
    config: Path = typer.Argument(
        Path("config.json"),
        help="Collection config file (JSON or YAML)",
    ),
):
    """
    Show what a collection config would generate, without generating it.

    Prints each layer's option count and total weight, the number of
    possible combinations (with skipped traits applied), and the quota
    plan for every forced combination.

    Examples:
        traitgen inspect
        traitgen --json inspect collection.yaml
    """
    from ...generation import (
        build_weight_table,
        check_preconditions,
        plan_quotas,
    )

    json_mode = get_json_mode()
    out = Output(console=console, json_mode=json_mode)
    settings = get_config()

    spec = load_spec(config, out)
    layers = discover_layers(spec, out, settings.render.image_extension)

    if not json_mode:
        out.header(f"COLLECTION: {spec.metadata.get('name', config.name)}")
        out.text(spec.summary())
        out.blank()

    layer_rows = []
    for folder, layer in zip(spec.layer_folders, layers):
        table = build_weight_table(layer)
        weight = str(table.total) if table.total else "uniform"
        layer_rows.append([folder, str(len(layer)), weight])
    out.table("Layers", ["Layer", "Options", "Total weight"], layer_rows)

    try:
        plans = plan_quotas(spec, layers)
        ceiling = check_preconditions(spec, layers, plans)
    except TraitgenError as e:
        out.error(escape(str(e)), exit_code=exit_code_for(e))
        raise typer.Exit(out.finish())

    out.blank()
    plan_rows = [
        [plan.name, str(plan.quota), str(plan.ceiling), str(plan.available)]
        for plan in plans
    ]
    out.table(
        "Quota Plan",
        ["Quota", "Requested", "Ceiling", "Available"],
        plan_rows,
        data_key="quota_plan",
    )

    out.blank()
    out.success(
        f"{spec.total_supply} of {ceiling} possible combinations requested",
        ceiling=ceiling,
        total_supply=spec.total_supply,
    )

    raise typer.Exit(out.finish())
