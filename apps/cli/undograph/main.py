"""UndoGraph CLI entry point.

Orchestrator for the UndoGraph command-line interface. Registers all
command modules and provides the main entry point.

Execution Context:
    CLI application - run via `python main.py` or `undograph` command

Dependencies:
    - click: CLI framework
    - undograph_core: Core library

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import logging
import sys

import click

from undograph_cli import __version__
from undograph_cli.commands.config import config
from undograph_cli.commands.generate import generate
from undograph_cli.commands.inspect import inspect
from undograph_cli.commands.replay import replay
from undograph_cli.commands.show import show


# ---- CLI Group ----------------------------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="undograph")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable debug logging.",
)
def cli(
        verbose: bool,
) -> None:
    """UndoGraph - Text-mode graphs of branching undo histories.

    Draws an editor's undo tree the way a commit graph is drawn, newest
    state on top, and lets you step through and jump between states.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


# ---- Register Commands --------------------------------------------------------------------------------------


cli.add_command(show)
cli.add_command(inspect)
cli.add_command(replay)
cli.add_command(generate)
cli.add_command(config)


# ---- Main Function ------------------------------------------------------------------------------------------


def main() -> int:
    """Main entry point for UndoGraph CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        cli()
        return 0
    except Exception as cli_error:
        click.echo(f"Error: {cli_error}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
