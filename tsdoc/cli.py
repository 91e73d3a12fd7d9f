from __future__ import annotations

"""tsdoc Command Line Interface."""

from pathlib import Path
from typing import List, Optional

import typer
from jsonschema import ValidationError
from rich import box
from rich.markup import escape
from rich.table import Table

from tsdoc.config import ConfigError, ExportConfig, load_config, make_config
from tsdoc.core.conditions import ConditionRenderer
from tsdoc.core.markup import convert
from tsdoc.core.nodes import TaskSequence
from tsdoc.exporter import discover_sources, export_paths, load_any, render_sequence
from tsdoc.io.state import RunState
from tsdoc.io.writer import ReportWriter
from tsdoc.utils.constants import STYLE
from tsdoc.utils.logging import console, get as get_logger, show_sequence_tree, stop as stop_progress
from tsdoc.utils.tree import RenderOptions, iter_nodes

app = typer.Typer(
    name="tsdoc",
    help="Export readable documentation of deployment task sequences.",
    add_completion=False,
)


def _load(file: Path) -> TaskSequence:
    """Load a task sequence file, exiting with code 1 on failure."""
    try:
        return load_any(file)
    except ValidationError as e:
        console.print(f"[bold red]Schema error in {escape(str(file))}: {escape(e.message)}[/]")
    except (OSError, ValueError) as e:
        console.print(f"[bold red]Error loading {escape(str(file))}: {escape(str(e))}[/]")
    raise typer.Exit(code=1)


def _config(config_file: Optional[Path], **overrides) -> ExportConfig:
    try:
        if config_file is not None:
            cfg = load_config(config_file)
            data = {k: v for k, v in cfg.to_dict().items() if k != "extra"}
            data.update(cfg.extra)
        else:
            data = {}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return make_config(**data)
    except ConfigError as e:
        console.print(f"[bold red]Configuration error: {escape(str(e))}[/]")
        raise typer.Exit(code=1)


@app.command()
def render(
    file: Path = typer.Argument(..., help="Task sequence XML or YAML file.", exists=True, file_okay=True, dir_okay=False, readable=True),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML export configuration."),
):
    """Print the rendered step records of one task sequence as a table."""
    cfg = _config(config_file, plain_text=True)
    sequence = _load(file)
    records = render_sequence(sequence, cfg)

    table = Table(title=escape(sequence.name), box=box.ROUNDED, show_lines=True)
    table.add_column("Group", style=STYLE["group"])
    table.add_column("Step", style=STYLE["step"])
    table.add_column("Description")
    table.add_column("Action", style=STYLE["dim"])
    table.add_column("Continue On Error")
    table.add_column("Status")
    table.add_column("Conditions", style=STYLE["condition"])

    for rec in records:
        status = rec.status if rec.status == "Enabled" else f"[{STYLE['error']}]{rec.status}[/]"
        table.add_row(
            escape(rec.group_name),
            escape(rec.step_name),
            escape(rec.description),
            escape(rec.action),
            rec.continue_on_error,
            status,
            escape(rec.condition.expandtabs(2)),
        )
    console.print(table)


@app.command()
def export(
    source: Path = typer.Argument(..., help="Task sequence file or directory of *.xml / *.yml files.", exists=True),
    output_dir: Path = typer.Argument(..., help="Directory to write reports into.", file_okay=False, dir_okay=True, resolve_path=True),
    formats: Optional[List[str]] = typer.Option(None, "--format", "-f", help="Report format: text, csv, jsonl (repeatable)."),
    plain: Optional[bool] = typer.Option(None, "--plain/--ansi", help="Drop or keep terminal emphasis codes in reports."),
    incremental: bool = typer.Option(False, "--incremental", help="Skip sources unchanged since the last export."),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML export configuration."),
    quiet: bool = typer.Option(False, "--quiet", help="Only log warnings and errors."),
):
    """Export reports for one task sequence or a whole directory."""
    if quiet:
        get_logger("warning")
    cfg = _config(config_file, formats=formats or None, plain_text=plain)

    paths = discover_sources(source)
    if not paths:
        console.print(f"[yellow]No task sequence files found in {escape(str(source))}.[/]")
        return

    output_dir.mkdir(parents=True, exist_ok=True)
    writer = ReportWriter(output_dir, formats=cfg.formats)
    state = None
    if incremental:
        state_path = Path(cfg.state_file) if cfg.state_file else output_dir / ".tsdoc-state.json"
        try:
            state = RunState(state_path)
        except ValueError as e:
            console.print(f"[bold red]{escape(str(e))}[/]")
            raise typer.Exit(code=1)

    try:
        summary = export_paths(paths, cfg, writer, state=state)
    finally:
        stop_progress()

    console.print(
        f"[bold]Exported:[/] {len(summary['exported'])} • "
        f"[bold]Skipped:[/] {len(summary['skipped'])} • "
        f"[bold]Failed:[/] {len(summary['failed'])} • "
        f"[bold]Output Dir:[/] {escape(str(output_dir))}"
    )
    if summary["failed"]:
        raise typer.Exit(code=1)


@app.command()
def inspect(
    file: Path = typer.Argument(..., help="Task sequence XML or YAML file.", exists=True, file_okay=True, dir_okay=False),
    conditions: bool = typer.Option(False, "--conditions", help="Show conditions under each node."),
    icons: bool = typer.Option(True, "--icons/--no-icons", help="Prefix nodes with icons."),
    max_children: Optional[int] = typer.Option(None, "--max-children", help="Collapse groups after N children."),
):
    """Print the step tree without rendering reports."""
    sequence = _load(file)
    show_sequence_tree(
        sequence,
        opts=RenderOptions(icons_on=icons, show_conditions=conditions, max_children=max_children),
    )
    total = sum(1 for _ in iter_nodes(sequence))
    console.print(f"[{STYLE['success']}]{total} nodes.[/]")


@app.command("conditions")
def conditions_cmd(
    file: Path = typer.Argument(..., help="Task sequence XML or YAML file.", exists=True, file_okay=True, dir_okay=False),
):
    """Print every rendered condition block in the sequence."""
    sequence = _load(file)
    renderer = ConditionRenderer()
    found = 0
    for depth, node in iter_nodes(sequence):
        if node.condition is None:
            continue
        found += 1
        indent = "  " * depth
        console.print(f"{indent}[bold]{escape(node.name)}[/]")
        for line in renderer.render(node.condition):
            text = convert(line, plain=True).replace("\t", "  ")
            console.print(f"{indent}  {escape(text)}")
    if not found:
        console.print("[yellow]No conditions in this task sequence.[/]")


if __name__ == "__main__":
    app()
