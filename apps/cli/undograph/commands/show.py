"""UndoGraph show command.

Draws the history graph stored in a snapshot file.

Execution Context:
    CLI command - invoked via `undograph show`

Dependencies:
    - click: CLI framework
    - rich: Terminal output
    - undograph_core: Ingest, layout, render

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from undograph_cli.commands.utils import styled_lines
from undograph_core.config import load_config
from undograph_core.ingest import ingest
from undograph_core.ingest import load_raw_history
from undograph_core.layout import layout
from undograph_core.render import render

console = Console()


# ---- Show Command -------------------------------------------------------------------------------------------


@click.command()
@click.argument(
    "history_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--style",
    "-s",
    type=click.Choice(["spaced", "compact"]),
    default=None,
    help="Render style (defaults to the configured one).",
)
@click.option(
    "--labels/--no-labels",
    default=None,
    help="Show or hide [seq] labels.",
)
@click.option(
    "--time/--no-time",
    "show_time",
    default=None,
    help="Show or hide relative ages.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of .undograph.json.",
)
def show(
        history_file: Path,
        style: str | None,
        labels: bool | None,
        show_time: bool | None,
        config_path: Path | None,
) -> None:
    """Draw the undo history graph.

    HISTORY_FILE is a JSON list of records, an object with a "records"
    list, or an editor undotree() dump.

    Examples:
        undograph show history.json
        undograph show history.json --style compact
        undograph show history.json --no-labels
    """
    try:
        config = load_config(config_path)
        tree = layout(ingest(load_raw_history(history_file)))
        result = render(
            tree,
            style or config.style,
            node_glyph=config.node_glyph,
            current_glyph=config.current_glyph or None,
            show_seq=config.show_seq if labels is None else labels,
            show_time=config.show_time if show_time is None else show_time,
        )

        for text in styled_lines(result):
            console.print(text)

    except Exception as show_error:
        msg = f"Show failed: {show_error}"
        raise click.ClickException(msg) from show_error
