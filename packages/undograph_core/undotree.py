"""Adapter for Vim/Neovim ``undotree()`` dumps.

The editor reports its history as nested lists: ``entries`` is the
branch that leads to the newest state and every entry may carry an
``alt`` list holding the branch that forked off at the same point.
This module flattens that shape into the flat records ingest expects.

Execution Context:
    Library module - used by ingest.load_raw_history and the CLI

Dependencies:
    - None

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from undograph_core.errors import MalformedHistory

logger = logging.getLogger(__name__)


# ---- Conversion ---------------------------------------------------------------------------------------------


def is_undotree_dump(
        data: Any,
) -> bool:
    """Check whether decoded JSON looks like an ``undotree()`` result."""
    return isinstance(data, Mapping) and isinstance(data.get("entries"), list)


def flatten_undotree(
        data: Mapping[str, Any],
) -> list[dict[str, Any]]:
    """Flatten a nested ``undotree()`` dictionary into raw records.

    Within one list each entry is the child of the entry before it. The
    first entry of a list hangs off whatever the owning entry hung off,
    which for the top level is the pristine root. ``seq_cur`` selects
    the current state; when it is 0 no record is flagged and ingest
    falls back to the root.

    Args:
        data: Decoded ``undotree()`` result.

    Returns:
        List of record dictionaries in discovery order.

    Raises:
        MalformedHistory: If an entry is not a mapping or lacks a seq.
    """
    seq_cur = data.get("seq_cur")
    records: list[dict[str, Any]] = []

    # Explicit stack: alt nesting grows with every fork in the history
    pending: list[tuple[list[Any], int | None]] = [(data.get("entries") or [], None)]
    while pending:
        branch, parent = pending.pop()
        previous = parent
        for entry in branch:
            if not isinstance(entry, Mapping) or "seq" not in entry:
                msg = f"Invalid undotree entry: {entry!r}"
                raise MalformedHistory(msg)
            seq = entry["seq"]
            records.append({
                "seq": seq,
                "parent_seq": previous,
                "is_current": seq == seq_cur,
                "time": entry.get("time"),
            })
            alt = entry.get("alt")
            if alt:
                pending.append((alt, previous))
            previous = seq

    logger.debug("Flattened undotree dump into %d records (seq_cur=%s)", len(records), seq_cur)
    return records
