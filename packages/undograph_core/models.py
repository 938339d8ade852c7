"""Data models for the UndoGraph engine.

Defines the raw history record handed over by a host, the arena-style
tree model built by ingest and annotated by layout, and the result
containers returned by the renderer.

Execution Context:
    Library module - imported by other undograph_core modules

Dependencies:
    - dataclasses: Data class decorators
    - typing: Type annotations

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from types import MappingProxyType
from typing import Any

from undograph_core.errors import InvalidStyle


# ---- Enumerations -------------------------------------------------------------------------------------------


class GraphStyle(str, Enum):
    """Render style flag."""

    SPACED = "spaced"
    COMPACT = "compact"

    @classmethod
    def parse(
            cls,
            value: GraphStyle | str,
    ) -> GraphStyle:
        """Resolve a style flag from an enum member or its name.

        Args:
            value: GraphStyle member or case-insensitive style name.

        Returns:
            Matching GraphStyle member.

        Raises:
            InvalidStyle: If the value names no known style.
        """
        if isinstance(value, GraphStyle):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        msg = f"Unknown graph style: {value!r} (expected 'spaced' or 'compact')"
        raise InvalidStyle(msg)


class ClosureKind(str, Enum):
    """Where a branch column is retired.

    PARENT closures end in the connector row directly above the parent
    node. SIBLING closures end above the next leaf of the same parent,
    which lets a run of sibling leaves reuse one column.
    """

    PARENT = "parent"
    SIBLING = "sibling"


# ---- Data Model Classes -------------------------------------------------------------------------------------


@dataclass
class HistoryRecord:
    """One entry of a host's raw undo forest.

    Attributes:
        seq: Sequence number assigned by the host at creation time.
        parent_seq: Seq this state was derived from (None for the root or
            for a top-level entry of the forest).
        is_current: Whether the host buffer currently reflects this state.
        time: Creation time in seconds since the epoch, if known.
    """

    seq: int
    parent_seq: int | None = None
    is_current: bool = False
    time: float | None = None

    def to_dict(
            self,
    ) -> dict[str, Any]:
        """Convert record to dictionary for JSON serialization.

        Returns:
            Dictionary representation.
        """
        result: dict[str, Any] = {
            "seq": self.seq,
            "parent_seq": self.parent_seq,
            "is_current": self.is_current,
        }
        if self.time is not None:
            result["time"] = self.time
        return result

    @classmethod
    def from_dict(
            cls,
            data: Mapping[str, Any],
    ) -> HistoryRecord:
        """Create record from dictionary.

        Accepts ``parent`` as an alias of ``parent_seq``.

        Args:
            data: Dictionary with record fields.

        Returns:
            HistoryRecord instance.
        """
        parent = data.get("parent_seq", data.get("parent"))
        return cls(
            seq=data.get("seq"),
            parent_seq=parent,
            is_current=data.get("is_current", False),
            time=data.get("time"),
        )


@dataclass(frozen=True)
class Closure:
    """A branch column that ends in a connector row.

    Attributes:
        column: Column being retired.
        target: Column the branch joins.
        kind: Whether it closes above its parent or above a sibling leaf.
    """

    column: int
    target: int
    kind: ClosureKind


@dataclass
class Node:
    """One historical state inside a Tree.

    Parent and children are stored as seq values; the owning Tree's
    ``nodes`` mapping is the arena they index into.

    Attributes:
        seq: Unique sequence number (0 is the pristine root).
        parent: Parent seq, None only for the root.
        children: Child seqs in ascending order.
        is_current: True for the state the host currently shows.
        time: Creation time in epoch seconds, if known.
        rank: 1-based render rank, set by layout.
        depth: 1-based render column, set by layout.
        lanes_above: Columns alive in the connector row above this node.
        through: Columns passing straight through this node's row.
        closures: Columns retired in the connector row above this node.
        merge_target: Column this node's branch joins on its own row.
    """

    seq: int
    parent: int | None = None
    children: list[int] = field(default_factory=list)
    is_current: bool = False
    time: float | None = None
    rank: int | None = None
    depth: int | None = None
    lanes_above: tuple[int, ...] = ()
    through: tuple[int, ...] = ()
    closures: tuple[Closure, ...] = ()
    merge_target: int | None = None

    def clear_layout(self) -> None:
        """Drop every annotation written by layout."""
        self.rank = None
        self.depth = None
        self.lanes_above = ()
        self.through = ()
        self.closures = ()
        self.merge_target = None

    def to_dict(
            self,
    ) -> dict[str, Any]:
        """Convert node to dictionary for JSON serialization.

        Returns:
            Dictionary representation including layout annotations.
        """
        return {
            "seq": self.seq,
            "parent": self.parent,
            "children": list(self.children),
            "is_current": self.is_current,
            "time": self.time,
            "rank": self.rank,
            "depth": self.depth,
        }


@dataclass
class Tree:
    """Whole history model, keyed on seq.

    Attributes:
        nodes: Arena of nodes keyed by seq.
        current_seq: Seq of the node the host currently shows.
        rank_to_seq: Rank lookup filled in by layout.
        seq_to_rank: Inverse of rank_to_seq, filled in by layout.
    """

    nodes: dict[int, Node]
    current_seq: int = 0
    rank_to_seq: dict[int, int] = field(default_factory=dict)
    seq_to_rank: dict[int, int] = field(default_factory=dict)

    ROOT_SEQ = 0

    @property
    def root(self) -> Node:
        return self.nodes[self.ROOT_SEQ]

    @property
    def current(self) -> Node:
        return self.nodes[self.current_seq]

    @property
    def total(self) -> int:
        return len(self.nodes)

    @property
    def last_seq(self) -> int:
        return max(self.nodes)

    @property
    def is_laid_out(self) -> bool:
        return len(self.rank_to_seq) == self.total

    def node(
            self,
            seq: int,
    ) -> Node:
        """Get a node by seq.

        Args:
            seq: Sequence number to look up.

        Returns:
            The matching Node.

        Raises:
            KeyError: If no retained node has that seq.
        """
        return self.nodes[seq]

    def seqs_descending(self) -> list[int]:
        """Seqs from newest to oldest."""
        return sorted(self.nodes, reverse=True)


@dataclass(frozen=True)
class HighlightSpan:
    """Character range of the current node marker in rendered output.

    Attributes:
        line_index: 0-based index into the rendered lines.
        column_start: First character index of the marker.
        column_end: Character index just past the marker.
    """

    line_index: int
    column_start: int
    column_end: int


@dataclass(frozen=True)
class RenderResult:
    """Output of a render call.

    Attributes:
        lines: Rendered rows, top (newest) first.
        rank_to_seq: Read-only rank -> seq lookup.
        seq_to_rank: Read-only seq -> rank lookup.
        highlight: Marker span of the current node.
        style: Style the lines were rendered in.
    """

    lines: list[str]
    rank_to_seq: Mapping[int, int]
    seq_to_rank: Mapping[int, int]
    highlight: HighlightSpan
    style: GraphStyle

    @classmethod
    def build(
            cls,
            lines: list[str],
            tree: Tree,
            highlight: HighlightSpan,
            style: GraphStyle,
    ) -> RenderResult:
        """Freeze a tree's lookup tables next to its rendered lines."""
        return cls(
            lines=lines,
            rank_to_seq=MappingProxyType(dict(tree.rank_to_seq)),
            seq_to_rank=MappingProxyType(dict(tree.seq_to_rank)),
            highlight=highlight,
            style=style,
        )
