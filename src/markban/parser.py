"""Text-level helpers: front-matter, the settings block, and card text shaping."""

import json
import re

import yaml

from markban.constants import NEWLINE_INDENT, SETTINGS_CLOSE, SETTINGS_OPEN
from markban.errors import BoardParseError

_FRONT_MATTER = re.compile(r"^---[ \t]*\n(?:(.*?)\n)?---[ \t]*(?:\n|$)", re.DOTALL)
_SETTINGS_BLOCK = re.compile(
    re.escape(SETTINGS_OPEN) + r"[ \t]*\n```[^\n]*\n(.*?)\n```[ \t]*\n" + re.escape(SETTINGS_CLOSE),
    re.DOTALL,
)
_BLOCK_ID = re.compile(r"(?:^|\s)\^([A-Za-z0-9-]+)$")
_BR = re.compile(r"<br\s*/?>", re.IGNORECASE)
_INDENTED_NEWLINE = re.compile(r"\r?\n(?: {4}|\t)")
_NEWLINE = re.compile(r"\r?\n")
_LANE_TITLE = re.compile(r"^(.*?)\s*\((\d+)\)$")


def split_front_matter(text: str) -> tuple[dict, int]:
    """Parse YAML front-matter at the start of text.

    Returns (meta, end) where end is the offset just past the closing ---.
    Missing, unclosed or invalid front-matter gives ({}, 0).
    """
    if not text.startswith("---"):
        return {}, 0

    match = _FRONT_MATTER.match(text)
    if not match:
        return {}, 0

    try:
        meta = yaml.safe_load(match.group(1) or "") or {}
    except yaml.YAMLError:
        return {}, 0

    if not isinstance(meta, dict):
        return {}, 0

    return meta, match.end()


def serialize_front_matter(meta: dict) -> str:
    """Serialize meta as a front-matter block followed by a blank line."""
    body = yaml.dump(meta, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return f"---\n\n{body}\n---\n\n"


def mask_span(text: str, start: int, end: int) -> str:
    """Blank text[start:end] with spaces, keeping newlines and all offsets."""
    masked = re.sub(r"[^\n]", " ", text[start:end])
    return text[:start] + masked + text[end:]


def find_settings_block(text: str) -> re.Match | None:
    """Find the last persisted settings block in text."""
    found = None
    for match in _SETTINGS_BLOCK.finditer(text):
        found = match
    return found


def parse_settings_block(text: str) -> dict:
    """Read board-local settings from the trailing settings block.

    Absence means no local settings. A block that is not a JSON object
    raises BoardParseError.
    """
    match = find_settings_block(text)
    if match is None:
        return {}

    raw = match.group(1).strip()
    if not raw:
        return {}

    try:
        settings = json.loads(raw)
    except json.JSONDecodeError as e:
        raise BoardParseError(f"Invalid board settings: {e}") from e

    if not isinstance(settings, dict):
        raise BoardParseError("Invalid board settings: expected a JSON object")

    return settings


def serialize_settings_block(settings: dict) -> str:
    """Serialize board-local settings as the trailing settings block."""
    payload = json.dumps(settings, separators=(",", ":"), ensure_ascii=False)
    return "\n".join(["", "", SETTINGS_OPEN, "```", payload, "```", SETTINGS_CLOSE])


def replace_brs(text: str) -> str:
    """Turn <br> tags into newlines."""
    return _BR.sub("\n", text)


def dedent_new_lines(text: str) -> str:
    """Trim text and remove one level of continuation indent from each line."""
    return _INDENTED_NEWLINE.sub("\n", text.strip())


def indent_new_lines(text: str) -> str:
    """Trim text and indent continuation lines so it stays one list item."""
    return _NEWLINE.sub("\n" + NEWLINE_INDENT, text.strip())


def get_block_id(text: str) -> str | None:
    """Return the trailing ^block-id of text, if any."""
    match = _BLOCK_ID.search(text)
    return match.group(1) if match else None


def remove_block_id(text: str) -> str:
    """Strip a trailing ^block-id from text."""
    return _BLOCK_ID.sub("", text)


def add_block_id(text: str, block_id: str | None) -> str:
    """Reattach a block id to text unless it is already there."""
    if not block_id:
        return text
    if not text:
        return f"^{block_id}"
    suffix = f" ^{block_id}"
    if text.endswith(suffix):
        return text
    return text + suffix


def parse_lane_title(text: str) -> tuple[str, int]:
    """Split a lane heading into (title, max_items).

    "Doing (3)" -> ("Doing", 3), "Doing" -> ("Doing", 0)
    """
    text = _NEWLINE.sub(" ", text).strip()
    match = _LANE_TITLE.match(text)
    if match is None:
        return text, 0
    return match.group(1), int(match.group(2))


def lane_title_with_max_items(title: str, max_items: int = 0) -> str:
    """Inverse of parse_lane_title."""
    if max_items:
        return f"{title} ({max_items})"
    return title
