"""Viewer configuration for UndoGraph.

Holds the settings a history viewer needs: render style, labels,
markers, and the key bindings the controller resolves into commands.
Settings are stored as JSON and may be overridden through environment
variables, optionally loaded from a ``.env`` file.

Execution Context:
    Library module - imported by the controller and CLI commands

Dependencies:
    - python-dotenv: Load environment variables from .env file

Metadata:
    Version: 0.1.0
    Author: UndoGraph Team
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from undograph_core.models import GraphStyle
from undograph_core.render import NODE_GLYPH

logger = logging.getLogger(__name__)


# ---- Configuration Constants --------------------------------------------------------------------------------


CONFIG_FILENAME = ".undograph.json"
CONFIG_ENV_VAR = "UNDOGRAPH_CONFIG"

DEFAULT_KEYMAPS: dict[str, list[str]] = {
    "quit": ["q", "<C-c>"],
    "next_node": ["j"],
    "prev_node": ["k"],
    "jump_to_G": ["G"],
    "jump_to_gg": ["gg"],
    "undo_to": ["<CR>"],
    "refresh": ["r"],
    "help": ["?"],
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


# ---- Environment Loading ------------------------------------------------------------------------------------


def _load_env_file(
        env_path: Path | None = None,
) -> None:
    """Load environment variables from .env file.

    Searches for .env file in:
    1. Specified path (if provided)
    2. Current working directory
    3. Parent directories (up to 3 levels)

    Args:
        env_path: Explicit path to .env file (optional).
    """
    if env_path:
        if env_path.exists():
            load_dotenv(env_path, override=True)
        return

    current = Path.cwd()
    for candidate in [current, *list(current.parents)[:3]]:
        env_file = candidate / ".env"
        if env_file.exists():
            load_dotenv(env_file, override=True)
            return


def _env_flag(
        name: str,
) -> bool | None:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    msg = f"{name} must be a boolean flag, got {value!r}"
    raise ValueError(msg)


def _check_glyph(
        name: str,
        value: str,
        allow_empty: bool = False,
) -> None:
    """Fail unless ``value`` is a single character (or empty, if allowed)."""
    if allow_empty and value == "":
        return
    if not isinstance(value, str) or len(value) != 1:
        msg = f"{name} must be a single character, got {value!r}"
        raise ValueError(msg)


# ---- Config Class -------------------------------------------------------------------------------------------


@dataclass
class ViewerConfig:
    """History viewer settings stored in .undograph.json.

    Attributes:
        compact: Render one row per node instead of spaced output.
        show_seq: Append ``[seq]`` labels to node rows.
        show_time: Append relative ages to node rows.
        node_glyph: Marker drawn for every node.
        current_glyph: Marker for the current node (empty uses node_glyph).
        keymaps: Action name -> keys bound to it.
    """

    compact: bool = False
    show_seq: bool = True
    show_time: bool = False
    node_glyph: str = NODE_GLYPH
    current_glyph: str = ""
    keymaps: dict[str, list[str]] = field(
        default_factory=lambda: {action: list(keys) for action, keys in DEFAULT_KEYMAPS.items()}
    )

    def __post_init__(self) -> None:
        unknown = sorted(set(self.keymaps) - set(DEFAULT_KEYMAPS))
        if unknown:
            msg = f"Unknown keymap actions: {', '.join(unknown)}"
            raise ValueError(msg)
        _check_glyph("node_glyph", self.node_glyph)
        _check_glyph("current_glyph", self.current_glyph, allow_empty=True)

    @property
    def style(self) -> GraphStyle:
        return GraphStyle.COMPACT if self.compact else GraphStyle.SPACED

    def to_dict(
            self,
    ) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization.

        Returns:
            Dictionary representation.
        """
        return {
            "compact": self.compact,
            "show_seq": self.show_seq,
            "show_time": self.show_time,
            "node_glyph": self.node_glyph,
            "current_glyph": self.current_glyph,
            "keymaps": {action: list(keys) for action, keys in self.keymaps.items()},
        }

    @classmethod
    def from_dict(
            cls,
            data: dict[str, Any],
    ) -> ViewerConfig:
        """Create config from dictionary.

        Keymaps given in the dictionary replace the defaults action by
        action; a single key may be given as a plain string.

        Args:
            data: Dictionary with config fields.

        Returns:
            ViewerConfig instance.
        """
        keymaps = {action: list(keys) for action, keys in DEFAULT_KEYMAPS.items()}
        for action, keys in (data.get("keymaps") or {}).items():
            keymaps[action] = [keys] if isinstance(keys, str) else list(keys)
        return cls(
            compact=bool(data.get("compact", False)),
            show_seq=bool(data.get("show_seq", True)),
            show_time=bool(data.get("show_time", False)),
            node_glyph=data.get("node_glyph") or NODE_GLYPH,
            current_glyph=data.get("current_glyph", ""),
            keymaps=keymaps,
        )

    def save(
            self,
            config_path: Path,
    ) -> None:
        """Save config to file.

        Args:
            config_path: Path to the JSON config file.
        """
        config_path.write_text(json.dumps(self.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")

    @classmethod
    def load(
            cls,
            config_path: Path,
    ) -> ViewerConfig:
        """Load config from file.

        Args:
            config_path: Path to the JSON config file.

        Returns:
            ViewerConfig instance.

        Raises:
            RuntimeError: If config file cannot be loaded.
        """
        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            return cls.from_dict(data)
        except Exception as file_error:
            msg = f"Failed to load config from {config_path}: {file_error}"
            raise RuntimeError(msg) from file_error


# ---- Resolution ---------------------------------------------------------------------------------------------


def default_config_path() -> Path:
    """Config path from UNDOGRAPH_CONFIG, else .undograph.json in cwd."""
    configured = os.environ.get(CONFIG_ENV_VAR)
    if configured:
        return Path(configured)
    return Path.cwd() / CONFIG_FILENAME


def load_config(
        config_path: Path | None = None,
        env_path: Path | None = None,
) -> ViewerConfig:
    """Resolve the effective viewer configuration.

    Loads a .env file first, then the JSON config (when present), then
    applies UNDOGRAPH_COMPACT, UNDOGRAPH_SHOW_SEQ, UNDOGRAPH_SHOW_TIME
    and UNDOGRAPH_NODE_GLYPH overrides.

    Args:
        config_path: Explicit config file (optional).
        env_path: Explicit .env file (optional).

    Returns:
        ViewerConfig instance.

    Raises:
        RuntimeError: If an existing config file cannot be loaded.
        ValueError: If an environment flag is not a boolean.
    """
    _load_env_file(env_path)

    path = config_path or default_config_path()
    if path.exists():
        config = ViewerConfig.load(path)
        logger.debug("Loaded viewer config from %s", path)
    else:
        config = ViewerConfig()

    for attribute, env_name in (
            ("compact", "UNDOGRAPH_COMPACT"),
            ("show_seq", "UNDOGRAPH_SHOW_SEQ"),
            ("show_time", "UNDOGRAPH_SHOW_TIME"),
    ):
        flag = _env_flag(env_name)
        if flag is not None:
            setattr(config, attribute, flag)

    glyph = os.environ.get("UNDOGRAPH_NODE_GLYPH")
    if glyph:
        _check_glyph("UNDOGRAPH_NODE_GLYPH", glyph)
        config.node_glyph = glyph

    return config
