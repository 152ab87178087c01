"""Board settings: defaults, layering, and change detection.

Settings are plain mappings keyed by hyphenated names. They are always
passed explicitly; nothing in markban reads settings from module state.
"""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from markban.constants import FRONTMATTER_KEY

Settings = Mapping[str, Any]

DEFAULT_SETTINGS: dict[str, Any] = {
    FRONTMATTER_KEY: "board",
    "append-archive-date": False,
    "archive-date-format": "MMM D, YYYY h:mm a",
    "archive-date-separator": " - ",
    "date-display-format": "MMM D, YYYY",
    "date-format": "YYYY-MM-DD",
    "date-trigger": "@",
    "done-character": "x",
    "inline-metadata-position": "body",
    "move-dates": False,
    "move-members": True,
    "move-priority": True,
    "move-tags": False,
    "move-task-metadata": False,
    "time-format": "HH:mm",
    "time-trigger": "@@",
}

# Settings whose change alters what hydration produces.
EXTRACTION_KEYS = (
    "date-trigger",
    "time-trigger",
    "date-format",
    "time-format",
    "move-dates",
    "move-tags",
    "move-priority",
    "move-members",
    "move-task-metadata",
    "inline-metadata-position",
    "done-character",
)


def resolve_settings(*layers: Mapping[str, Any] | None) -> Settings:
    """Overlay settings layers on the defaults and return a read-only snapshot.

    Later layers win. None layers are skipped, as are None values, so a
    board-local setting of null falls back to the global value.
    """
    merged = dict(DEFAULT_SETTINGS)
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is not None:
                merged[key] = value
    return MappingProxyType(merged)


def should_refresh_board(old: Mapping[str, Any] | None, new: Mapping[str, Any] | None) -> bool:
    """Return True if switching from old to new settings requires a reparse."""
    if not old:
        return bool(new)
    if not new:
        return True
    return any(old.get(key) != new.get(key) for key in EXTRACTION_KEYS)
