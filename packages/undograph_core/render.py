"""Graph renderer for UndoGraph.

Turns a laid-out Tree into text lines built from node markers and
box-drawing connectors, newest state on top.

Each column is drawn as a cell that records which of its four sides
carry a line; the glyph is looked up from that combination once the
whole row is assembled. Column ``d`` sits at character ``2 * (d - 1)``
and the character between two columns is a horizontal link when a
join spans it.

Execution Context:
    Library module - final stage of the ingest/layout/render pipeline

Dependencies:
    - undograph_core.layout: Lays out trees passed in unannotated
    - undograph_core.navigation: Shared line arithmetic

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from undograph_core.errors import InvalidStyle
from undograph_core.layout import layout
from undograph_core.models import Closure
from undograph_core.models import ClosureKind
from undograph_core.models import GraphStyle
from undograph_core.models import HighlightSpan
from undograph_core.models import Node
from undograph_core.models import RenderResult
from undograph_core.models import Tree
from undograph_core.navigation import column_for_depth
from undograph_core.navigation import line_for_rank

logger = logging.getLogger(__name__)


# ---- Glyph Tables -------------------------------------------------------------------------------------------


NODE_GLYPH = "●"
GAP_LINK = "─"

# (up, down, left, right) -> glyph. A four-way crossing keeps the vertical.
LINK_GLYPHS = {
    (True, True, True, True): "│",
    (True, True, False, True): "├",
    (True, True, True, False): "┤",
    (True, False, True, True): "┴",
    (False, True, True, True): "┬",
    (True, True, False, False): "│",
    (False, False, True, True): "─",
    (True, False, True, False): "╯",
    (True, False, False, True): "╰",
    (False, True, True, False): "╮",
    (False, True, False, True): "╭",
    (True, False, False, False): "│",
    (False, True, False, False): "│",
    (False, False, True, False): "─",
    (False, False, False, True): "─",
    (False, False, False, False): " ",
}


# ---- Row Assembly -------------------------------------------------------------------------------------------


@dataclass
class _Cell:
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    marker: str | None = None

    def glyph(self) -> str:
        if self.marker is not None:
            return self.marker
        return LINK_GLYPHS[(self.up, self.down, self.left, self.right)]


class _Row:
    """One output line under construction."""

    def __init__(self) -> None:
        self.cells: dict[int, _Cell] = {}
        self.gaps: set[int] = set()

    def cell(
            self,
            column: int,
    ) -> _Cell:
        return self.cells.setdefault(column, _Cell())

    def vertical(
            self,
            column: int,
    ) -> None:
        cell = self.cell(column)
        cell.up = True
        cell.down = True

    def link(
            self,
            column: int,
            target: int,
    ) -> None:
        """Draw a horizontal join between two columns."""
        low, high = sorted((column, target))
        self.cell(low).right = True
        self.cell(high).left = True
        for between in range(low + 1, high):
            cell = self.cell(between)
            cell.left = True
            cell.right = True
        self.gaps.update(range(low, high))

    def close(
            self,
            closure: Closure,
    ) -> None:
        """End a column here and turn it toward its target."""
        cell = self.cell(closure.column)
        cell.up = True
        cell.down = False
        self.link(closure.column, closure.target)

    def draw(self) -> str:
        if not self.cells:
            return ""
        width = max(self.cells)
        chars = []
        for column in range(1, width + 1):
            cell = self.cells.get(column)
            chars.append(cell.glyph() if cell else " ")
            if column < width:
                chars.append(GAP_LINK if column in self.gaps else " ")
        return "".join(chars).rstrip()


def _node_row(
        node: Node,
        marker: str,
) -> _Row:
    row = _Row()
    for column in node.through:
        row.vertical(column)
    row.cell(node.depth).marker = marker
    if node.merge_target is not None:
        row.link(node.depth, node.merge_target)
    return row


def _connector_row(
        node: Node,
) -> _Row:
    """Connector drawn directly above ``node`` in spaced output."""
    row = _Row()
    closing = {closure.column for closure in node.closures}
    for column in node.lanes_above:
        if column not in closing:
            row.vertical(column)
    for closure in node.closures:
        row.close(closure)
    return row


def _assemble_rows(
        ordered: list[Node],
        markers: list[str],
        style: GraphStyle,
) -> list[_Row]:
    node_rows = [_node_row(node, marker) for node, marker in zip(ordered, markers)]

    if style is GraphStyle.SPACED:
        rows: list[_Row] = []
        for index, node in enumerate(ordered):
            if index:
                rows.append(_connector_row(node))
            rows.append(node_rows[index])
        return rows

    # Compact: parent closures land on the parent's own row, sibling
    # closures on the row above the leaf that triggers them
    for index, node in enumerate(ordered):
        for closure in node.closures:
            if closure.kind is ClosureKind.PARENT:
                node_rows[index].close(closure)
            else:
                node_rows[index - 1].close(closure)
    return node_rows


# ---- Labels -------------------------------------------------------------------------------------------------


def format_age(
        seconds: float,
) -> str:
    """Short relative age such as ``5m ago``.

    Args:
        seconds: Elapsed seconds (negative values count as zero).

    Returns:
        Age in the largest whole unit of s, m, h, or d.
    """
    seconds = max(0, int(seconds))
    if seconds < 60:
        return f"{seconds}s ago"
    if seconds < 3600:
        return f"{seconds // 60}m ago"
    if seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def _append_labels(
        lines: list[str],
        ordered: list[Node],
        style: GraphStyle,
        show_seq: bool,
        show_time: bool,
        now: float | None,
) -> list[str]:
    total = len(ordered)
    node_lines = [line_for_rank(node.rank, total, style) for node in ordered]
    width = max(len(lines[index]) for index in node_lines)
    reference = time.time() if now is None else now

    labelled = list(lines)
    for index, node in zip(node_lines, ordered):
        parts = []
        if show_seq:
            parts.append(f"[{node.seq}]")
        if show_time and node.time is not None:
            parts.append(format_age(reference - node.time))
        if parts:
            labelled[index] = f"{lines[index].ljust(width)} {' '.join(parts)}"
    return labelled


# ---- Render -------------------------------------------------------------------------------------------------


def render(
        tree: Tree,
        style: GraphStyle | str = GraphStyle.SPACED,
        node_glyph: str = NODE_GLYPH,
        current_glyph: str | None = None,
        show_seq: bool = False,
        show_time: bool = False,
        now: float | None = None,
) -> RenderResult:
    """Render a tree as text lines.

    Lines run from the highest rank down to the root. Trees that have
    not been laid out yet are laid out first.

    Args:
        tree: Tree produced by ingest (and usually layout).
        style: 'spaced' or 'compact'.
        node_glyph: Marker drawn for every node.
        current_glyph: Marker for the current node (defaults to node_glyph).
        show_seq: Append ``[seq]`` labels to node rows.
        show_time: Append relative ages to node rows that carry a time.
        now: Reference time for ages (defaults to the wall clock).

    Returns:
        RenderResult with lines, lookup tables, and the current node's
        highlight span.

    Raises:
        InvalidStyle: If style is not recognized or a marker is not a
            single character.
    """
    style = GraphStyle.parse(style)
    current_marker = current_glyph or node_glyph
    for marker in (node_glyph, current_marker):
        # Every cell is one character wide
        if len(marker) != 1:
            msg = f"Node markers must be a single character, got {marker!r}"
            raise InvalidStyle(msg)

    if not tree.is_laid_out:
        layout(tree)

    ordered = [tree.nodes[tree.rank_to_seq[rank]] for rank in range(tree.total, 0, -1)]
    markers = [current_marker if node.is_current else node_glyph for node in ordered]

    lines = [row.draw() for row in _assemble_rows(ordered, markers, style)]
    if show_seq or show_time:
        lines = _append_labels(lines, ordered, style, show_seq, show_time, now)

    current = tree.current
    start = column_for_depth(current.depth)
    highlight = HighlightSpan(
        line_index=line_for_rank(current.rank, tree.total, style),
        column_start=start,
        column_end=start + len(current_marker),
    )

    logger.debug("Rendered %d lines in %s style", len(lines), style.value)
    return RenderResult.build(lines, tree, highlight, style)
