"""Layout engine for UndoGraph.

Assigns every node of an ingested Tree a render rank and a column
(depth), and records where each branch column opens, passes through,
and is retired. The renderer only reads these annotations.

Rows are drawn newest first, so the column sweep runs from the highest
seq down to the root. At every fork the trunk is the child whose
subtree holds the most recent state; it keeps the parent's column and
every other branch joins into it.

Execution Context:
    Library module - second stage of the ingest/layout/render pipeline

Dependencies:
    - undograph_core.models: Tree, Node, Closure

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import logging

from undograph_core.models import Closure
from undograph_core.models import ClosureKind
from undograph_core.models import Tree

logger = logging.getLogger(__name__)


# ---- Helpers ------------------------------------------------------------------------------------------------


def trunk_children(
        tree: Tree,
) -> dict[int, int]:
    """Map every inner node to its trunk child.

    The trunk is the child whose subtree contains the highest seq, so
    the branch carrying the newest state never leaves its column.

    Args:
        tree: Ingested tree.

    Returns:
        Dictionary of parent seq -> trunk child seq (leaves are absent).
    """
    newest: dict[int, int] = {}
    trunks: dict[int, int] = {}

    # Children always carry a higher seq than their parent
    for seq in tree.seqs_descending():
        newest[seq] = seq
        for child in tree.nodes[seq].children:
            if seq not in trunks or newest[child] > newest[trunks[seq]]:
                trunks[seq] = child
            newest[seq] = max(newest[seq], newest[child])
    return trunks


def _lowest_free(
        waiting: dict[int, int],
) -> int:
    column = 1
    while column in waiting:
        column += 1
    return column


# ---- Column Sweep -------------------------------------------------------------------------------------------


def _assign_columns(
        tree: Tree,
        trunks: dict[int, int],
) -> int:
    """Sweep rows top-down and annotate depth and column events.

    ``waiting`` maps every open column to the parent seq its branch is
    heading for. A non-trunk branch whose left neighbour heads for the
    same parent is deferred: it stays open and is retired above the next
    sibling leaf instead of merging on its own row.

    Args:
        tree: Ingested tree.
        trunks: Output of trunk_children.

    Returns:
        Widest column used.
    """
    waiting: dict[int, int] = {}
    deferred: set[int] = set()
    widest = 0

    for seq in tree.seqs_descending():
        node = tree.nodes[seq]
        parent = node.parent
        node.lanes_above = tuple(sorted(waiting))

        joining = sorted(col for col, target in waiting.items() if target == seq)
        closures: list[Closure] = []
        column: int | None = None

        if joining:
            column = tree.nodes[trunks[seq]].depth
            closures = [
                Closure(col, column, ClosureKind.PARENT)
                for col in joining
                if col != column
            ]
        elif parent is not None:
            for col in sorted(deferred):
                if waiting.get(col) == parent:
                    trunk_column = tree.nodes[trunks[parent]].depth
                    closures.append(Closure(col, trunk_column, ClosureKind.SIBLING))

        for closure in closures:
            del waiting[closure.column]
            deferred.discard(closure.column)

        if column is None:
            column = _lowest_free(waiting)

        node.closures = tuple(closures)
        node.through = tuple(col for col in sorted(waiting) if col != column)
        node.depth = column
        widest = max(widest, column)

        if parent is None:
            waiting.pop(column, None)
            continue

        waiting[column] = parent
        trunk = trunks[parent]
        if trunk > seq:
            # Trunk already drawn above: this branch has to join it
            siblings = {
                col for col, target in waiting.items()
                if target == parent and col != column
            }
            if column - 1 in siblings:
                deferred.add(column)
            else:
                node.merge_target = tree.nodes[trunk].depth
                del waiting[column]

    return widest


# ---- Layout -------------------------------------------------------------------------------------------------


def layout(
        tree: Tree,
) -> Tree:
    """Annotate every node with rank, depth, and column events.

    Ranks follow ascending seq: the root is rank 1 and the newest state
    holds the highest rank. Gaps in seq do not leave gaps in rank. The
    tree is modified in place and returned; calling this again on the
    same tree produces identical annotations.

    Args:
        tree: Tree produced by ingest.

    Returns:
        The same tree, annotated.
    """
    for node in tree.nodes.values():
        node.clear_layout()

    tree.rank_to_seq = {rank: seq for rank, seq in enumerate(sorted(tree.nodes), start=1)}
    tree.seq_to_rank = {seq: rank for rank, seq in tree.rank_to_seq.items()}
    for seq, rank in tree.seq_to_rank.items():
        tree.nodes[seq].rank = rank

    widest = _assign_columns(tree, trunk_children(tree))
    logger.debug("Laid out %d nodes across %d columns", tree.total, widest)
    return tree
