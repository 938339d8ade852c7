"""Shared test configuration and fixtures for undograph_core tests.

Provides:
- ``records_from_children``: builds raw history records from a compact
  parent -> children description of a tree.
- The nine branching histories used by the character-exact render
  tests, plus a few small trees reused across modules.
"""
from __future__ import annotations

from typing import Any

import pytest

from undograph_core.ingest import ingest
from undograph_core.layout import layout
from undograph_core.models import Tree


# ---- Builders -----------------------------------------------------------------------------------------------


def records_from_children(
        children: dict[int, list[int]],
        current: int | None = None,
) -> list[dict[str, Any]]:
    """Raw records for a tree given as parent -> children.

    The root (seq 0) is left out so ingest has to synthesize it.
    """
    records = []
    for parent, kids in children.items():
        for kid in kids:
            records.append({
                "seq": kid,
                "parent_seq": parent,
                "is_current": kid == current,
            })
    # Hosts hand records over in arbitrary order
    records.sort(key=lambda record: (record["seq"] * 7) % 11)
    return records


def build_tree(
        children: dict[int, list[int]],
        current: int | None = None,
) -> Tree:
    return layout(ingest(records_from_children(children, current)))


# ---- Branching Histories ------------------------------------------------------------------------------------


HISTORIES: dict[str, dict[int, list[int]]] = {
    "test1": {0: [1, 3, 5], 1: [2, 7], 3: [4], 5: [6]},
    "test2": {0: [1], 1: [2, 5], 2: [3, 8], 3: [4, 10], 5: [6], 6: [7], 8: [9]},
    "test3": {0: [1], 1: [2, 4], 2: [3], 3: [7, 8], 4: [5, 9], 5: [6], 7: [10], 10: [11]},
    "test4": {0: [1], 1: [2, 4], 2: [3, 9], 3: [8, 10], 4: [5], 5: [6], 6: [7]},
    "test5": {0: [1, 2, 3], 1: [4, 6], 4: [5], 3: [7]},
    "test6": {0: [1], 1: [2], 2: [3, 4, 5], 3: [8], 8: [9], 4: [6], 6: [7]},
    "test7": {0: [1], 1: [2, 4], 2: [3, 6, 7], 4: [5]},
    "test8": {0: [1, 2, 3, 4], 4: [5]},
    "test9": {0: [13, 18], 13: [14, 19], 14: [15]},
}


@pytest.fixture
def linear_tree() -> Tree:
    """0 -> 1 -> 2 with the newest state current."""
    return build_tree({0: [1], 1: [2]}, current=2)


@pytest.fixture
def fork_tree() -> Tree:
    """0 -> 1 -> {2, 3} with seq 3 current."""
    return build_tree({0: [1], 1: [2, 3]}, current=3)


@pytest.fixture
def gap_tree() -> Tree:
    """History with evicted seqs: only {0, 13, 14, 15, 18, 19} retained."""
    return build_tree(HISTORIES["test9"], current=19)


@pytest.fixture(params=sorted(HISTORIES))
def any_tree(request: pytest.FixtureRequest) -> Tree:
    """Each of the branching histories in turn."""
    return build_tree(HISTORIES[request.param])


@pytest.fixture
def tree_factory():
    """Build a laid-out tree from a parent -> children mapping."""
    return build_tree


@pytest.fixture
def named_tree():
    """Build one of the branching histories by name."""
    def _build(name: str, current: int | None = None) -> Tree:
        return build_tree(HISTORIES[name], current)
    return _build


@pytest.fixture
def raw_records():
    """Raw record builder for ingest-level tests."""
    return records_from_children
