"""UndoGraph config command.

Shows and updates viewer settings stored in .undograph.json.

Execution Context:
    CLI command - invoked via `undograph config`

Dependencies:
    - click: CLI framework
    - rich: Terminal output
    - undograph_core: Viewer configuration

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from undograph_core.config import ViewerConfig
from undograph_core.config import default_config_path

console = Console()


# ---- Config Command -----------------------------------------------------------------------------------------


@click.command()
@click.option(
    "--compact/--spaced",
    "compact",
    default=None,
    help="Set the default render style.",
)
@click.option(
    "--labels/--no-labels",
    default=None,
    help="Enable/disable [seq] labels.",
)
@click.option(
    "--time/--no-time",
    "show_time",
    default=None,
    help="Enable/disable relative ages.",
)
@click.option(
    "--node-glyph",
    default=None,
    help="Marker drawn for every node.",
)
@click.option(
    "--current-glyph",
    default=None,
    help="Marker drawn for the current node (empty string resets).",
)
@click.option(
    "--path",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (defaults to UNDOGRAPH_CONFIG or ./.undograph.json).",
)
def config(
        compact: bool | None,
        labels: bool | None,
        show_time: bool | None,
        node_glyph: str | None,
        current_glyph: str | None,
        config_path: Path | None,
) -> None:
    """Show or update viewer settings.

    Without options the current settings are printed.

    Examples:
        undograph config
        undograph config --compact
        undograph config --no-labels --node-glyph o
    """
    try:
        path = config_path or default_config_path()
        settings = ViewerConfig.load(path) if path.exists() else ViewerConfig()

        updates = {
            "compact": compact,
            "show_seq": labels,
            "show_time": show_time,
            "node_glyph": node_glyph,
            "current_glyph": current_glyph,
        }
        updates = {name: value for name, value in updates.items() if value is not None}

        if updates:
            # Rebuild so field validation runs on the new values
            settings = ViewerConfig.from_dict({**settings.to_dict(), **updates})
            settings.save(path)
            console.print(f"[green]Saved configuration to {path}[/green]")

        table = Table(title="Viewer Settings")
        table.add_column("Setting", style="cyan")
        table.add_column("Value")
        table.add_row("style", settings.style.value)
        table.add_row("show_seq", str(settings.show_seq))
        table.add_row("show_time", str(settings.show_time))
        table.add_row("node_glyph", settings.node_glyph)
        table.add_row("current_glyph", settings.current_glyph or "(same as node)")
        for action, keys in settings.keymaps.items():
            table.add_row(f"keymap.{action}", " ".join(keys))
        console.print(table)

    except Exception as config_error:
        msg = f"Config failed: {config_error}"
        raise click.ClickException(msg) from config_error
