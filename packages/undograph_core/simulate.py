"""Random branching history generator.

Simulates a user making a series of changes and occasionally undoing to
an earlier state before changing again, which forks the history. Used
to build fixtures and demo snapshots.

Execution Context:
    Library module - used by tests and the CLI generate command

Dependencies:
    - random: Seeded generator for reproducible histories

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import logging
import random
import time
from typing import Any

from undograph_core.models import HistoryRecord

logger = logging.getLogger(__name__)


def simulate_history(
        num_nodes: int = 10,
        undo_chance: float = 0.1,
        seed: int | None = None,
        start_time: float | None = None,
        step_seconds: float = 1.0,
) -> list[dict[str, Any]]:
    """Generate a raw history snapshot with random branches.

    Args:
        num_nodes: Number of changes to create.
        undo_chance: Probability of undoing to a random earlier state
            before each change.
        seed: Seed for reproducible output.
        start_time: Epoch time of the pristine state (defaults to now).
        step_seconds: Time between consecutive changes.

    Returns:
        Record dictionaries for seq 1..num_nodes; the last change is current.

    Raises:
        ValueError: If num_nodes is negative or undo_chance is outside [0, 1].
    """
    if num_nodes < 0:
        msg = f"num_nodes must be non-negative, got {num_nodes}"
        raise ValueError(msg)
    if not 0.0 <= undo_chance <= 1.0:
        msg = f"undo_chance must be between 0.0 and 1.0, got {undo_chance}"
        raise ValueError(msg)

    rng = random.Random(seed)
    base = time.time() if start_time is None else start_time
    records: list[HistoryRecord] = []
    current = 0
    forks = 0

    for seq in range(1, num_nodes + 1):
        if seq > 1 and rng.random() < undo_chance:
            current = rng.randrange(0, seq)
            forks += 1
        records.append(HistoryRecord(seq=seq, parent_seq=current, time=base + seq * step_seconds))
        current = seq

    if records:
        records[-1].is_current = True

    logger.debug("Simulated %d changes with %d undo jumps", num_nodes, forks)
    return [record.to_dict() for record in records]
