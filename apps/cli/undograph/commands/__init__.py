"""UndoGraph CLI command modules.

Contains all Click command implementations for the UndoGraph CLI.

Execution Context:
    Imported by main.py

Dependencies:
    - click: CLI framework

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations
