"""UndoGraph CLI Application.

Command-line interface for drawing and navigating branching undo
histories stored as JSON snapshots.

Execution Context:
    CLI application - invoked from terminal

Dependencies:
    - click: CLI framework
    - rich: Terminal formatting
    - undograph_core: Core library

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

__version__ = "0.1.0"
