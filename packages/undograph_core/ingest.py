"""History ingest for UndoGraph.

Validates a host's raw undo forest and builds the arena Tree the layout
engine works on. Records may arrive in any order and ``seq`` values may
have gaps where the host evicted old states.

Execution Context:
    Library module - first stage of the ingest/layout/render pipeline

Dependencies:
    - undograph_core.models: Tree and record types
    - undograph_core.undotree: Editor dump adapter

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from undograph_core.errors import EmptyHistory
from undograph_core.errors import MalformedHistory
from undograph_core.models import HistoryRecord
from undograph_core.models import Node
from undograph_core.models import Tree
from undograph_core.undotree import flatten_undotree
from undograph_core.undotree import is_undotree_dump

logger = logging.getLogger(__name__)

RawRecord = Mapping[str, Any] | HistoryRecord


# ---- Record Validation --------------------------------------------------------------------------------------


def _is_seq(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _coerce_record(
        raw: RawRecord,
        index: int,
) -> HistoryRecord:
    """Turn one raw record into a HistoryRecord, checking field types.

    Args:
        raw: Mapping or HistoryRecord supplied by the host.
        index: Position of the record, for error messages.

    Returns:
        HistoryRecord with validated fields.

    Raises:
        MalformedHistory: If the record is unusable.
    """
    if isinstance(raw, HistoryRecord):
        record = raw
    elif isinstance(raw, Mapping):
        record = HistoryRecord.from_dict(raw)
    else:
        msg = f"Record #{index} is not a mapping: {raw!r}"
        raise MalformedHistory(msg)

    if not _is_seq(record.seq):
        msg = f"Record #{index} has an invalid seq: {record.seq!r}"
        raise MalformedHistory(msg)
    if record.parent_seq is not None and not _is_seq(record.parent_seq):
        msg = f"Record seq={record.seq} has an invalid parent_seq: {record.parent_seq!r}"
        raise MalformedHistory(msg)
    if not isinstance(record.is_current, bool):
        msg = f"Record seq={record.seq} has a non-boolean is_current: {record.is_current!r}"
        raise MalformedHistory(msg)
    return record


def _check_acyclic(
        nodes: dict[int, Node],
) -> None:
    """Walk every parent chain and fail on the first loop."""
    visiting = 1
    done = 2
    state: dict[int, int] = {}

    for start in nodes:
        path: list[int] = []
        seq: int | None = start
        while seq is not None and state.get(seq) != done:
            if state.get(seq) == visiting:
                msg = f"Cycle detected in parent references through seq {seq}"
                raise MalformedHistory(msg)
            state[seq] = visiting
            path.append(seq)
            seq = nodes[seq].parent
        for seen in path:
            state[seen] = done


# ---- Ingest -------------------------------------------------------------------------------------------------


def ingest(
        raw: Iterable[RawRecord] | None,
) -> Tree:
    """Build a validated Tree from a raw history snapshot.

    A non-root record without a parent is a top-level entry of the
    host's forest and hangs directly off the pristine root. The root is
    synthesized when the snapshot omits it, so an empty snapshot yields
    a single-node tree. When no record is flagged current the root is
    current. The snapshot itself is never modified.

    Args:
        raw: Iterable of record mappings or HistoryRecord objects.

    Returns:
        New Tree with children sorted ascending by seq.

    Raises:
        MalformedHistory: On duplicate seq, dangling parent, cycle, a
            parent younger than its child, a root with a parent, or more
            than one current record.
        EmptyHistory: If no root exists after synthesis.
    """
    records = [_coerce_record(item, index) for index, item in enumerate(raw or [])]

    nodes: dict[int, Node] = {}
    current: list[int] = []
    for record in records:
        if record.seq in nodes:
            msg = f"Duplicate seq {record.seq} in history"
            raise MalformedHistory(msg)
        nodes[record.seq] = Node(
            seq=record.seq,
            parent=record.parent_seq,
            time=record.time,
        )
        if record.is_current:
            current.append(record.seq)

    if len(current) > 1:
        msg = f"More than one record is marked current: {sorted(current)}"
        raise MalformedHistory(msg)

    root_seq = Tree.ROOT_SEQ
    if root_seq in nodes:
        if nodes[root_seq].parent is not None:
            msg = f"Root record declares parent {nodes[root_seq].parent}"
            raise MalformedHistory(msg)
    else:
        nodes[root_seq] = Node(seq=root_seq)
    if root_seq not in nodes:
        msg = "History has no root state"
        raise EmptyHistory(msg)

    for seq, node in nodes.items():
        if seq == root_seq:
            continue
        if node.parent is None:
            node.parent = root_seq
        elif node.parent not in nodes:
            msg = f"Record seq={seq} references missing parent seq={node.parent}"
            raise MalformedHistory(msg)

    _check_acyclic(nodes)

    for seq in sorted(nodes):
        node = nodes[seq]
        if node.parent is None:
            continue
        if node.parent >= seq:
            msg = f"Record seq={seq} is older than its parent seq={node.parent}"
            raise MalformedHistory(msg)
        nodes[node.parent].children.append(seq)

    current_seq = current[0] if current else root_seq
    nodes[current_seq].is_current = True

    logger.debug(
        "Ingested %d records into %d nodes (current=%d)",
        len(records), len(nodes), current_seq,
    )
    return Tree(nodes=nodes, current_seq=current_seq)


# ---- Snapshot Files -----------------------------------------------------------------------------------------


def load_raw_history(
        history_path: Path | str,
) -> list[Any]:
    """Read a raw history snapshot from a JSON file.

    Accepted shapes are a list of records, an object with a
    ``records`` list, or an editor ``undotree()`` dump.

    Args:
        history_path: Path to the JSON snapshot.

    Returns:
        List of raw records ready for ingest.

    Raises:
        RuntimeError: If the file cannot be read or decoded.
        MalformedHistory: If the JSON has none of the accepted shapes.
    """
    history_path = Path(history_path)
    try:
        data = json.loads(history_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as load_error:
        msg = f"Failed to load history from {history_path}: {load_error}"
        raise RuntimeError(msg) from load_error

    if isinstance(data, list):
        return data
    if is_undotree_dump(data):
        return flatten_undotree(data)
    if isinstance(data, dict) and isinstance(data.get("records"), list):
        return data["records"]

    msg = f"Unrecognized history snapshot format in {history_path}"
    raise MalformedHistory(msg)
