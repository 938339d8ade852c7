"""UndoGraph inspect command.

Lists every node of a snapshot with its layout annotations.

Execution Context:
    CLI command - invoked via `undograph inspect`

Dependencies:
    - click: CLI framework
    - rich: Terminal output
    - undograph_core: Ingest and layout

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from undograph_core.ingest import ingest
from undograph_core.ingest import load_raw_history
from undograph_core.layout import layout

console = Console()


# ---- Inspect Command ----------------------------------------------------------------------------------------


@click.command()
@click.argument(
    "history_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
def inspect(
        history_file: Path,
) -> None:
    """Show rank, column, and links of every state.

    Rows are listed newest first, matching the order of the graph.

    Examples:
        undograph inspect history.json
    """
    try:
        tree = layout(ingest(load_raw_history(history_file)))

        table = Table(title=f"History: {history_file.name}")
        table.add_column("Rank", justify="right")
        table.add_column("Seq", style="cyan", justify="right")
        table.add_column("Parent", justify="right")
        table.add_column("Depth", justify="right")
        table.add_column("Children")
        table.add_column("Current", justify="center")

        for rank in range(tree.total, 0, -1):
            node = tree.nodes[tree.rank_to_seq[rank]]
            table.add_row(
                str(rank),
                str(node.seq),
                "-" if node.parent is None else str(node.parent),
                str(node.depth),
                ", ".join(str(child) for child in node.children) or "-",
                "[yellow]*[/yellow]" if node.is_current else "",
            )

        console.print(table)
        console.print(
            f"[dim]{tree.total} state(s), current seq {tree.current_seq}, "
            f"newest seq {tree.last_seq}[/dim]"
        )

    except Exception as inspect_error:
        msg = f"Inspect failed: {inspect_error}"
        raise click.ClickException(msg) from inspect_error
