"""UndoGraph replay command.

Feeds a sequence of viewer keys to the history controller over a
snapshot file and prints where the cursor ends up. Undoing to a node
moves the snapshot's current state, optionally saved back to the file.

Execution Context:
    CLI command - invoked via `undograph replay`

Dependencies:
    - click: CLI framework
    - rich: Terminal output
    - undograph_core: Controller and config

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from undograph_cli.commands.utils import JsonHistoryHost
from undograph_cli.commands.utils import parse_key_token
from undograph_cli.commands.utils import styled_lines
from undograph_core.config import load_config
from undograph_core.controller import HistoryController

console = Console()


# ---- Replay Command -----------------------------------------------------------------------------------------


@click.command()
@click.argument(
    "history_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.argument("keys", nargs=-1)
@click.option(
    "--style",
    "-s",
    type=click.Choice(["spaced", "compact"]),
    default=None,
    help="Render style (defaults to the configured one).",
)
@click.option(
    "--write",
    is_flag=True,
    help="Save the new current state back to HISTORY_FILE, keeping its format.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file to use instead of .undograph.json.",
)
def replay(
        history_file: Path,
        keys: tuple[str, ...],
        style: str | None,
        write: bool,
        config_path: Path | None,
) -> None:
    """Replay viewer keys against a history snapshot.

    Each KEY may carry a count prefix, as in an editor: "3j" moves three
    nodes down, "5G" jumps to seq 5, "<CR>" undoes to the node under
    the cursor.

    Examples:
        undograph replay history.json j j
        undograph replay history.json 2G "<CR>" --write
    """
    try:
        config = load_config(config_path)
        if style is not None:
            config.compact = style == "compact"

        host = JsonHistoryHost(history_file)
        controller = HistoryController(host, config)
        controller.refresh()

        for token in keys:
            key, count = parse_key_token(token)
            outcome = controller.handle_key(key, count)
            if outcome is None:
                console.print(f"[yellow]Unbound key: {key}[/yellow]")
                continue
            if outcome.help:
                help_table = Table(title="Key Bindings")
                help_table.add_column("Keys", style="cyan")
                help_table.add_column("Action")
                for bound_keys, description in outcome.help:
                    help_table.add_row(bound_keys, description)
                console.print(help_table)
            if outcome.closed:
                break

        for text in styled_lines(controller.result, cursor_line=controller.cursor.line):
            console.print(text)

        seq = controller.seq_under_cursor()
        position = f"seq {seq}" if seq is not None else "between nodes"
        console.print(f"Cursor: line {controller.cursor.line + 1}, {position}")

        if host.applied:
            console.print(f"[green]Current state: seq {controller.tree.current_seq}[/green]")
            if write:
                host.save()
                console.print(f"[green]Saved to {history_file}[/green]")

    except Exception as replay_error:
        msg = f"Replay failed: {replay_error}"
        raise click.ClickException(msg) from replay_error
