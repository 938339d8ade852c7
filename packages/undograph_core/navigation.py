"""Row and cursor arithmetic for rendered graphs.

Both render styles put the newest state on the first line and the root
on the last one. Spaced output interleaves a connector row between
every pair of node rows, so a line index there can fall between two
ranks. Every line/rank conversion lives here so the renderer, the
controller, and the tests share one formula per style.

Execution Context:
    Library module - imported by render and controller

Dependencies:
    - undograph_core.models: GraphStyle, Tree

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

from dataclasses import dataclass

from undograph_core.models import GraphStyle
from undograph_core.models import Tree


# ---- Data Classes -------------------------------------------------------------------------------------------


@dataclass(frozen=True)
class Cursor:
    """Cursor position inside rendered output.

    Attributes:
        line: 0-based line index.
        column: 0-based character index.
    """

    line: int
    column: int


# ---- Line Arithmetic ----------------------------------------------------------------------------------------


def line_count(
        total: int,
        style: GraphStyle | str,
) -> int:
    """Number of rendered lines for a tree of ``total`` nodes.

    Args:
        total: Retained node count (at least 1).
        style: Render style.

    Returns:
        ``total`` for compact output, ``2 * total - 1`` for spaced output.
    """
    if GraphStyle.parse(style) is GraphStyle.COMPACT:
        return total
    return 2 * total - 1


def line_for_rank(
        rank: int,
        total: int,
        style: GraphStyle | str,
) -> int:
    """0-based line index of the node row holding ``rank``."""
    if GraphStyle.parse(style) is GraphStyle.COMPACT:
        return total - rank
    return 2 * (total - rank)


def rank_at_line(
        line: int,
        total: int,
        style: GraphStyle | str,
) -> float:
    """Rank shown on a line.

    On a spaced connector row the result is the midpoint of the ranks
    above and below it, e.g. 2.5.

    Args:
        line: 0-based line index.
        total: Retained node count.
        style: Render style.

    Returns:
        Rank as a float; integral on node rows.
    """
    if GraphStyle.parse(style) is GraphStyle.COMPACT:
        return float(total - line)
    return total - line / 2


def column_for_depth(depth: int) -> int:
    return 2 * (depth - 1)


# ---- Tree Lookups -------------------------------------------------------------------------------------------


def seq_at_line(
        tree: Tree,
        line: int,
        style: GraphStyle | str,
) -> int | None:
    """Seq of the node drawn on ``line``, or None between nodes."""
    rank = rank_at_line(line, tree.total, style)
    if not rank.is_integer():
        return None
    return tree.rank_to_seq.get(int(rank))


def cursor_for_rank(
        tree: Tree,
        rank: int,
        style: GraphStyle | str,
) -> Cursor | None:
    """Cursor position on the marker of the node with ``rank``.

    Ranks at or below zero clamp to the first character of the last
    line (the root row). Ranks above the tree size do not move.

    Args:
        tree: Laid-out tree.
        rank: Target rank.
        style: Render style.

    Returns:
        Target cursor, or None when the rank is past the newest node.
    """
    if rank <= 0:
        return Cursor(line=line_count(tree.total, style) - 1, column=0)
    if rank > tree.total:
        return None
    node = tree.nodes[tree.rank_to_seq[rank]]
    return Cursor(
        line=line_for_rank(rank, tree.total, style),
        column=column_for_depth(node.depth),
    )


def cursor_for_seq(
        tree: Tree,
        seq: int,
        style: GraphStyle | str,
) -> Cursor | None:
    """Cursor position for a seq, or None if it is not retained."""
    rank = tree.seq_to_rank.get(seq)
    if rank is None:
        return None
    return cursor_for_rank(tree, rank, style)
