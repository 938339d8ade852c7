"""Error taxonomy for the UndoGraph engine.

Every failure the engine can report on bad input derives from
UndoGraphError so callers can catch the whole family at once.

Execution Context:
    Library module - imported by ingest, render, and CLI commands

Dependencies:
    - None

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations


# ---- Exception Classes --------------------------------------------------------------------------------------


class UndoGraphError(Exception):
    """Base class for all engine errors."""


class MalformedHistory(UndoGraphError, ValueError):
    """Raw history does not describe a tree.

    Raised for dangling parent references, cycles, duplicate seq
    values, and records that cannot be read at all.
    """


class EmptyHistory(UndoGraphError):
    """No root node could be produced from the raw history."""


class InvalidStyle(UndoGraphError, ValueError):
    """Unrecognized render style flag or unusable node marker."""
