"""History viewer controller for UndoGraph.

Glues a host's history to the engine: pulls a snapshot, runs the
ingest/layout/render pipeline, keeps a cursor over the rendered lines,
and executes viewer commands. Commands form a closed enum handled by a
single dispatcher; key bindings from the config resolve to commands.

Execution Context:
    Library module - driven by an interactive host or the CLI replay command

Dependencies:
    - undograph_core: ingest, layout, render, navigation, config

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from typing import Any
from typing import Protocol

from undograph_core.config import ViewerConfig
from undograph_core.ingest import ingest
from undograph_core.layout import layout
from undograph_core.models import RenderResult
from undograph_core.models import Tree
from undograph_core.navigation import Cursor
from undograph_core.navigation import cursor_for_rank
from undograph_core.navigation import cursor_for_seq
from undograph_core.navigation import rank_at_line
from undograph_core.navigation import seq_at_line
from undograph_core.render import render

logger = logging.getLogger(__name__)


# ---- Host Protocol ------------------------------------------------------------------------------------------


class HistoryHost(Protocol):
    """What a controller needs from the program owning the history."""

    def raw_history(self) -> Iterable[Any]:
        """Snapshot of the history forest as raw records."""
        ...

    def apply_state(self, seq: int) -> None:
        """Move the live document to the state with ``seq``."""
        ...


# ---- Commands -----------------------------------------------------------------------------------------------


class Command(str, Enum):
    """Viewer commands; values double as keymap action names."""

    NEXT_NODE = "next_node"
    PREV_NODE = "prev_node"
    JUMP_TO_G = "jump_to_G"
    JUMP_TO_GG = "jump_to_gg"
    UNDO_TO = "undo_to"
    REFRESH = "refresh"
    HELP = "help"
    QUIT = "quit"


COMMAND_DESCRIPTIONS = {
    Command.NEXT_NODE: "Jump to next node (count supported)",
    Command.PREV_NODE: "Jump to previous node (count supported)",
    Command.JUMP_TO_G: "Jump to the node with the sequence number given as count",
    Command.JUMP_TO_GG: "Jump to the node given as count, or the newest node",
    Command.UNDO_TO: "Undo to the node under cursor",
    Command.REFRESH: "Reload the history from the host",
    Command.HELP: "Show key bindings",
    Command.QUIT: "Close the viewer",
}


@dataclass
class CommandOutcome:
    """What a dispatched command did.

    Attributes:
        command: Command that ran.
        cursor: Cursor after the command.
        moved: Whether the cursor changed.
        applied_seq: Seq handed to the host's apply_state, if any.
        help: (keys, description) pairs for the HELP command.
        closed: Whether the controller is closed after the command.
    """

    command: Command
    cursor: Cursor
    moved: bool = False
    applied_seq: int | None = None
    help: list[tuple[str, str]] = field(default_factory=list)
    closed: bool = False


# ---- Controller ---------------------------------------------------------------------------------------------


class HistoryController:
    """Cursor and command state over one host's rendered history."""

    def __init__(
            self,
            host: HistoryHost,
            config: ViewerConfig | None = None,
    ) -> None:
        self.host = host
        self.config = config or ViewerConfig()
        self.tree: Tree | None = None
        self.result: RenderResult | None = None
        self.cursor = Cursor(line=0, column=0)
        self.closed = False
        self._key_commands = self._build_key_table()

    # ---- Pipeline ----

    def refresh(self) -> RenderResult:
        """Rebuild the graph from a fresh host snapshot.

        The cursor is placed on the current node's marker.

        Returns:
            New render result.

        Raises:
            UndoGraphError: If the host snapshot is invalid.
        """
        tree = layout(ingest(self.host.raw_history()))
        self.result = render(
            tree,
            self.config.style,
            node_glyph=self.config.node_glyph,
            current_glyph=self.config.current_glyph or None,
            show_seq=self.config.show_seq,
            show_time=self.config.show_time,
        )
        self.tree = tree
        self.cursor = cursor_for_seq(tree, tree.current_seq, self.config.style)
        logger.debug("Refreshed graph: %d nodes, current=%d", tree.total, tree.current_seq)
        return self.result

    @property
    def lines(self) -> list[str]:
        return self.result.lines if self.result else []

    def _require_tree(self) -> Tree:
        if self.tree is None:
            self.refresh()
        return self.tree

    # ---- Cursor Queries ----

    def rank_under_cursor(self) -> float:
        """Rank on the cursor line; fractional between two nodes."""
        tree = self._require_tree()
        return rank_at_line(self.cursor.line, tree.total, self.config.style)

    def seq_under_cursor(self) -> int | None:
        """Seq on the cursor line, or None between two nodes."""
        tree = self._require_tree()
        return seq_at_line(tree, self.cursor.line, self.config.style)

    def move_to_rank(
            self,
            rank: int,
    ) -> bool:
        """Place the cursor on a rank; returns whether it moved."""
        target = cursor_for_rank(self._require_tree(), rank, self.config.style)
        return self._move(target)

    def move_to_seq(
            self,
            seq: int,
    ) -> bool:
        """Place the cursor on a seq; unknown seqs leave it in place."""
        target = cursor_for_seq(self._require_tree(), seq, self.config.style)
        return self._move(target)

    def _move(
            self,
            target: Cursor | None,
    ) -> bool:
        if target is None or target == self.cursor:
            return False
        self.cursor = target
        return True

    # ---- Dispatch ----

    def dispatch(
            self,
            command: Command | str,
            count: int = 0,
    ) -> CommandOutcome:
        """Execute one viewer command.

        Args:
            command: Command member or its action name.
            count: Numeric prefix typed before the key (0 when absent).

        Returns:
            CommandOutcome describing the effect.

        Raises:
            ValueError: If the command is unknown.
        """
        command = Command(command)
        step = max(count, 1)
        outcome = CommandOutcome(command=command, cursor=self.cursor)
        logger.debug("Dispatching %s (count=%d)", command.value, count)

        if command is Command.NEXT_NODE:
            outcome.moved = self.move_to_rank(math.ceil(self.rank_under_cursor()) - step)
        elif command is Command.PREV_NODE:
            outcome.moved = self.move_to_rank(math.floor(self.rank_under_cursor()) + step)
        elif command is Command.JUMP_TO_G:
            outcome.moved = self.move_to_seq(count)
        elif command is Command.JUMP_TO_GG:
            tree = self._require_tree()
            outcome.moved = self.move_to_seq(count if count else tree.last_seq)
        elif command is Command.UNDO_TO:
            seq = self.seq_under_cursor()
            if seq is not None:
                self.host.apply_state(seq)
                self.refresh()
                outcome.applied_seq = seq
        elif command is Command.REFRESH:
            self.refresh()
        elif command is Command.HELP:
            outcome.help = self.help_entries()
        elif command is Command.QUIT:
            self.closed = True

        outcome.cursor = self.cursor
        outcome.closed = self.closed
        return outcome

    # ---- Key Bindings ----

    def _build_key_table(self) -> dict[str, Command]:
        table: dict[str, Command] = {}
        for action, keys in self.config.keymaps.items():
            for key in keys:
                table[key] = Command(action)
        return table

    def command_for_key(
            self,
            key: str,
    ) -> Command | None:
        return self._key_commands.get(key)

    def handle_key(
            self,
            key: str,
            count: int = 0,
    ) -> CommandOutcome | None:
        """Resolve a key through the keymaps and dispatch it.

        Args:
            key: Key notation, e.g. ``j`` or ``<CR>``.
            count: Numeric prefix.

        Returns:
            CommandOutcome, or None if the key is not bound.
        """
        command = self.command_for_key(key)
        if command is None:
            logger.debug("Ignoring unbound key %r", key)
            return None
        return self.dispatch(command, count)

    def help_entries(self) -> list[tuple[str, str]]:
        """(keys, description) pairs for every bound command."""
        entries = []
        for action, keys in self.config.keymaps.items():
            if keys:
                entries.append(("/".join(keys), COMMAND_DESCRIPTIONS[Command(action)]))
        return entries
