"""Utility functions for UndoGraph CLI commands.

Execution Context:
    CLI command utilities - imported by command modules

Dependencies:
    - rich: Styled graph lines
    - undograph_core: Snapshot loading and rendering

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import json
import re
from collections.abc import Iterator
from pathlib import Path

from rich.text import Text

from undograph_core.ingest import load_raw_history
from undograph_core.models import HistoryRecord
from undograph_core.models import RenderResult
from undograph_core.undotree import is_undotree_dump

SEQ_LABEL_PATTERN = r"\[\d+\]"
KEY_TOKEN_PATTERN = re.compile(r"^(\d*)(\D.*)$")


# ---- Snapshot Host ------------------------------------------------------------------------------------------


class JsonHistoryHost:
    """History host backed by a JSON snapshot file.

    Satisfies the controller's host protocol: ``apply_state`` only moves
    the current marker in memory until ``save`` writes it back.
    """

    def __init__(
            self,
            history_path: Path,
    ) -> None:
        self.history_path = history_path
        self.records = [HistoryRecord.from_dict(raw) for raw in load_raw_history(history_path)]
        self.applied: list[int] = []

    def raw_history(self) -> list[dict]:
        return [record.to_dict() for record in self.records]

    def apply_state(
            self,
            seq: int,
    ) -> None:
        """Mark ``seq`` as the current state.

        Raises:
            ValueError: If no record (or the root) has that seq.
        """
        if seq != 0 and all(record.seq != seq for record in self.records):
            msg = f"No state with seq {seq} in {self.history_path}"
            raise ValueError(msg)
        for record in self.records:
            record.is_current = record.seq == seq
        self.applied.append(seq)

    @property
    def current_seq(self) -> int:
        return next((record.seq for record in self.records if record.is_current), 0)

    def save(self) -> None:
        """Write the new current state back to disk in the file's own format.

        An ``undotree()`` dump only has its ``seq_cur`` updated and a
        ``{"records": [...]}`` object keeps its other keys; a plain list
        is rewritten as a list.
        """
        document = json.loads(self.history_path.read_text(encoding="utf-8"))
        if is_undotree_dump(document):
            document["seq_cur"] = self.current_seq
        elif isinstance(document, dict):
            document["records"] = self.raw_history()
        else:
            save_raw_history(self.history_path, self.records)
            return
        self.history_path.write_text(json.dumps(document, indent=2), encoding="utf-8")


def save_raw_history(
        history_path: Path,
        records: list[HistoryRecord] | list[dict],
) -> None:
    """Write records as a JSON list.

    Args:
        history_path: Destination file.
        records: HistoryRecord objects or plain dictionaries.
    """
    data = [record.to_dict() if isinstance(record, HistoryRecord) else record for record in records]
    history_path.write_text(json.dumps(data, indent=2), encoding="utf-8")


# ---- Presentation -------------------------------------------------------------------------------------------


def styled_lines(
        result: RenderResult,
        cursor_line: int | None = None,
) -> Iterator[Text]:
    """Rich text for each rendered line.

    The current node's marker is highlighted, seq labels are coloured,
    and an optional cursor line is shown in reverse video.

    Args:
        result: Render result to display.
        cursor_line: Line index to mark as the cursor (optional).

    Yields:
        One Text per rendered line.
    """
    span = result.highlight
    for index, line in enumerate(result.lines):
        text = Text(line)
        text.highlight_regex(SEQ_LABEL_PATTERN, "cyan")
        if index == span.line_index:
            text.stylize("bold yellow", span.column_start, span.column_end)
        if index == cursor_line:
            text.stylize("reverse")
        yield text


def parse_key_token(
        token: str,
) -> tuple[str, int]:
    """Split a replay token such as ``3j`` into key and count.

    Args:
        token: Key notation, optionally prefixed by a count.

    Returns:
        (key, count) with count 0 when no prefix was given.

    Raises:
        ValueError: If the token is empty or is only a count.
    """
    match = KEY_TOKEN_PATTERN.match(token)
    if not match:
        msg = f"Invalid key token: {token!r}"
        raise ValueError(msg)
    digits, key = match.groups()
    return key, int(digits) if digits else 0
