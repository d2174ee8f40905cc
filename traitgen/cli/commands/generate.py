"""Generate command: sample unique combinations and render the collection."""

import time
from pathlib import Path

import typer
from rich.markup import escape

from ...config import get_config
from ...core.errors import TraitgenError
from ...core.models import CollectionSpec, GenerationResult, LayerSet
from ..app import app, console, get_json_mode
from ..collection import discover_layers, load_spec
from ..utils import (
    Output,
    ExitCode,
    exit_code_for,
    format_elapsed,
    format_generation_stats_for_json,
    format_render_report_for_json,
)


@app.command("generate")
def generate_command(
    config: Path = typer.Argument(
        Path("config.json"),
        help="Collection config file (JSON or YAML)",
    ),
    seed: int | None = typer.Option(
        None, "--seed", help="Random seed for reproducibility"
    ),
    workers: int | None = typer.Option(
        None,
        "--workers",
        "-w",
        help="Render worker threads (0 = auto, default from config)",
    ),
    timeout: float | None = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for rendering before cancelling what is left",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Generate combinations without writing any files"
    ),
    keep_output: bool = typer.Option(
        False,
        "--keep-output",
        help="Do not clear existing files in the output folder",
    ),
    report: bool = typer.Option(
        False, "--report", "-r", help="Show quota and trait distribution stats"
    ),
):
    """
    Generate a collection of unique layered images with metadata.

    Reconciles the configured layers with the folders on disk, draws
    totalSupply unique trait combinations (honoring forced-combination
    quotas), then composites each one into <outputPath>/<n>.png with a
    matching <n>.json metadata file.

    EXIT CODES:
        0 = Success
        1 = Validation error (config, layer mismatch, quota overflow)
        3 = File not found
        4 = Generation error (infeasible supply, stalled)
        5 = Render error (some artifacts failed)

    Examples:
        traitgen generate
        traitgen generate collection.yaml --seed 42 --report
        traitgen generate --dry-run
        traitgen --json generate config.json --workers 4
    """
    from ...assets import clear_output, render_collection
    from ...generation import generate_collection

    json_mode = get_json_mode()
    out = Output(console=console, json_mode=json_mode)
    settings = get_config()
    start_time = time.time()
    out.blank()

    # Load config and layers
    spec = load_spec(config, out)
    out.success(
        f"Loaded config: [bold]{config}[/bold] "
        f"({len(spec.layer_folders)} layers, total supply {spec.total_supply})",
        config=str(config),
        layer_count=len(spec.layer_folders),
        total_supply=spec.total_supply,
    )

    layers = discover_layers(spec, out, settings.render.image_extension)
    option_total = sum(len(layer) for layer in layers)
    out.success(
        f"Discovered {option_total} trait options",
        option_count=option_total,
    )

    # Generation
    out.blank()
    generation_start = time.time()
    result = None
    generation_error = None

    show_progress = spec.total_supply >= 100 and not json_mode

    if show_progress:
        from rich.progress import (
            Progress,
            SpinnerColumn,
            TextColumn,
            BarColumn,
            TaskProgressColumn,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[cyan]Generating combinations...[/cyan]"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Generating", total=spec.total_supply)

            def on_progress(current: int, total: int):
                progress.update(task, completed=current)

            try:
                result = generate_collection(
                    spec,
                    layers,
                    seed=seed,
                    settings=settings.generation,
                    on_progress=on_progress,
                )
            except TraitgenError as e:
                generation_error = e
    else:
        try:
            result = generate_collection(
                spec, layers, seed=seed, settings=settings.generation
            )
        except TraitgenError as e:
            generation_error = e

    if generation_error:
        out.error(
            f"Generation failed: {escape(str(generation_error))}",
            exit_code=exit_code_for(generation_error),
            suggestion="Lower totalSupply, add trait options, or relax forced combinations",
        )
        raise typer.Exit(out.finish())

    generation_elapsed = time.time() - generation_start
    out.success(
        f"Generated {len(result.combinations)} unique combinations "
        f"({format_elapsed(generation_elapsed)}, seed={result.meta['seed']}, "
        f"{result.stats.total_attempts} draws)",
        generated_count=len(result.combinations),
        seed=result.meta["seed"],
        ceiling=result.meta["ceiling"],
        generation_time_seconds=generation_elapsed,
    )

    if json_mode or report:
        out.set_data("stats", format_generation_stats_for_json(result.stats))

    if report and not json_mode:
        _show_generation_report(out, result, spec, layers)

    if dry_run:
        out.blank()
        out.text("[dim]Dry run: no files written[/dim]")
        out.set_data("dry_run", True)
        raise typer.Exit(out.finish())

    # Render
    out.blank()
    output = Path(spec.output_path)
    if not keep_output:
        try:
            removed = clear_output(output)
        except OSError as e:
            out.error(
                f"Could not clear {output}: {escape(str(e))}",
                exit_code=ExitCode.FILE_NOT_FOUND,
            )
            raise typer.Exit(out.finish())
        if removed:
            out.text(f"[dim]Cleared {removed} existing file(s) from {output}[/dim]")

    combinations = result.ordered()
    if not json_mode:
        from rich.progress import (
            Progress,
            SpinnerColumn,
            TextColumn,
            BarColumn,
            TaskProgressColumn,
        )

        with Progress(
            SpinnerColumn(),
            TextColumn("[cyan]Rendering images...[/cyan]"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Rendering", total=len(combinations))

            def on_done(index: int, ok: bool):
                progress.advance(task)

            render_report = render_collection(
                combinations,
                spec,
                workers=workers,
                timeout=timeout,
                settings=settings.render,
                on_done=on_done,
            )
    else:
        render_report = render_collection(
            combinations,
            spec,
            workers=workers,
            timeout=timeout,
            settings=settings.render,
        )

    out.set_data("render", format_render_report_for_json(render_report))

    if render_report.ok:
        out.success(
            f"Rendered {len(render_report.succeeded)} artifacts to [bold]{output}[/bold] "
            f"({format_elapsed(render_report.elapsed_seconds)}, "
            f"{render_report.workers} workers)"
        )
    else:
        out.error(
            f"{len(render_report.failed)} of {len(combinations)} artifacts failed to render",
            exit_code=ExitCode.RENDER_ERROR,
        )
        if not json_mode:
            for failure in render_report.failed[:10]:
                out.text(f"  [red]✗[/red] {escape(failure.path)}: {escape(failure.error)}")
            if len(render_report.failed) > 10:
                out.text(f"  [dim]... and {len(render_report.failed) - 10} more[/dim]")

    elapsed = time.time() - start_time
    out.set_data("output_path", str(output))
    out.set_data("total_time_seconds", elapsed)

    out.divider()
    out.text(f"[dim]Total time: {format_elapsed(elapsed)}[/dim]")
    out.divider()

    raise typer.Exit(out.finish())


def _show_generation_report(
    out: Output, result: GenerationResult, spec: CollectionSpec, layers: LayerSet
) -> None:
    """Display per-quota and per-layer generation statistics."""
    out.header("GENERATION REPORT")

    quota_rows = [
        [
            quota.name,
            str(quota.requested),
            str(quota.accepted),
            str(quota.attempts),
            str(quota.ceiling),
        ]
        for quota in result.stats.quotas
    ]
    out.table(
        "Quotas",
        ["Quota", "Requested", "Accepted", "Draws", "Ceiling"],
        quota_rows,
    )

    count = len(result.combinations) or 1
    # combinations skip empty layers
    names = [folder for folder, layer in zip(spec.layer_folders, layers) if layer]
    for position, counts in sorted(result.stats.option_counts.items()):
        title = names[position] if position < len(names) else f"Layer {position}"
        top = sorted(counts.items(), key=lambda kv: -kv[1])[:10]
        rows = [
            [Path(option).name, str(n), f"{n / count:.1%}"] for option, n in top
        ]
        out.blank()
        out.table(title, ["Option", "Count", "Share"], rows)
