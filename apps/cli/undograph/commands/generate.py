"""UndoGraph generate command.

Writes a random branching history snapshot, handy for trying out the
viewer or building test fixtures.

Execution Context:
    CLI command - invoked via `undograph generate`

Dependencies:
    - click: CLI framework
    - rich: Terminal output
    - undograph_core: History simulator

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import json
from pathlib import Path

import click
from rich.console import Console

from undograph_cli.commands.utils import save_raw_history
from undograph_core.simulate import simulate_history

console = Console()


# ---- Generate Command ---------------------------------------------------------------------------------------


@click.command()
@click.option(
    "--nodes",
    "-n",
    default=10,
    type=click.IntRange(min=0),
    help="Number of changes to simulate.",
)
@click.option(
    "--undo-chance",
    default=0.1,
    type=click.FloatRange(0.0, 1.0),
    help="Probability of undoing to a random state before each change.",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for reproducible output.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="File to write (prints JSON to stdout when omitted).",
)
def generate(
        nodes: int,
        undo_chance: float,
        seed: int | None,
        output: Path | None,
) -> None:
    """Generate a random undo history snapshot.

    Examples:
        undograph generate -n 20
        undograph generate -n 100 --undo-chance 0.5 -o history.json
    """
    try:
        records = simulate_history(nodes, undo_chance=undo_chance, seed=seed)

        if output is None:
            click.echo(json.dumps(records, indent=2))
            return

        save_raw_history(output, records)
        console.print(f"[green]Wrote {len(records)} record(s) to {output}[/green]")

    except Exception as generate_error:
        msg = f"Generate failed: {generate_error}"
        raise click.ClickException(msg) from generate_error
