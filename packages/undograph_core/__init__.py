"""UndoGraph Core Library.

Draws a branching undo history as a text-mode graph: ingests a host's
raw history snapshot, lays every state out on a rank and a column, and
renders spaced or compact box-drawing lines plus the lookups a viewer
needs to place its cursor.

Execution Context:
    Library package - imported by CLI and other applications

Dependencies:
    - python-dotenv: Environment overrides for viewer config

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

from undograph_core.config import ViewerConfig
from undograph_core.config import load_config
from undograph_core.controller import Command
from undograph_core.controller import HistoryController
from undograph_core.controller import HistoryHost
from undograph_core.errors import EmptyHistory
from undograph_core.errors import InvalidStyle
from undograph_core.errors import MalformedHistory
from undograph_core.errors import UndoGraphError
from undograph_core.ingest import ingest
from undograph_core.ingest import load_raw_history
from undograph_core.layout import layout
from undograph_core.models import GraphStyle
from undograph_core.models import HighlightSpan
from undograph_core.models import HistoryRecord
from undograph_core.models import Node
from undograph_core.models import RenderResult
from undograph_core.models import Tree
from undograph_core.navigation import line_count
from undograph_core.render import render

__version__ = "0.1.0"

__all__ = [
    "Command",
    "EmptyHistory",
    "GraphStyle",
    "HighlightSpan",
    "HistoryController",
    "HistoryHost",
    "HistoryRecord",
    "InvalidStyle",
    "MalformedHistory",
    "Node",
    "RenderResult",
    "Tree",
    "UndoGraphError",
    "ViewerConfig",
    "__version__",
    "ingest",
    "layout",
    "line_count",
    "load_config",
    "load_raw_history",
    "render",
]
