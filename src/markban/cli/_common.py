"""Shared helpers for CLI command handlers."""

import json
import sys
from pathlib import Path

import yaml

from markban.constants import FRONTMATTER_KEY
from markban.errors import BoardNotSavableError
from markban.model.board import find_lane
from markban.model.loader import board_settings, md_to_board
from markban.model.writer import board_to_md
from markban.models import Board, Item
from markban.settings import Settings


def load_global_settings(path: str | None, json_mode: bool) -> dict:
    """Read global settings from a YAML (or JSON) file. Exit 1 if unreadable."""
    if not path:
        return {}
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        error(f"Cannot read settings file {path}: {e}", json_mode)
    if not isinstance(data, dict):
        error(f"Settings file {path} must contain a mapping", json_mode)
    return data


def read_board(path: str, global_settings: dict) -> Board:
    """Read and parse the board at path. Raises OSError if unreadable."""
    text = Path(path).read_text(encoding="utf-8")
    return md_to_board(text, str(path), global_settings)


def load_board_or_die(args) -> tuple[Board, Settings]:
    """Load the board named by args.path with its resolved settings.

    Exit 1 if the file is missing, is not a board, or has parse errors.
    """
    global_settings = load_global_settings(getattr(args, "settings", None), args.json)
    try:
        board = read_board(args.path, global_settings)
    except OSError as e:
        error(f"Cannot read {args.path}: {e.strerror or e}", args.json)

    if FRONTMATTER_KEY not in board.data.frontmatter:
        error(f"{args.path} is not a board (no '{FRONTMATTER_KEY}' front-matter key).", args.json)
    if board.data.errors:
        error(f"{args.path} has parse errors: {board.data.errors[0].description}", args.json)

    return board, board_settings(board, global_settings)


def find_lane_or_die(board: Board, key: str, json_mode: bool) -> int:
    """Lookup lane by index, id or title. Exit 1 listing available lanes if not found."""
    index = find_lane(board, key)
    if index is not None:
        return index
    available = [f"  {i}  {lane.data.title}" for i, lane in enumerate(board.children, 1)]
    msg = f"Lane '{key}' not found. Available:\n" + "\n".join(available)
    error(msg, json_mode)


def find_item_or_die(board: Board, lane_index: int, position: int, json_mode: bool) -> int:
    """Convert a 1-based card position to an index. Exit 1 if out of range."""
    lane = board.children[lane_index]
    if 1 <= position <= len(lane.children):
        return position - 1
    error(f"Lane '{lane.data.title}' has no card {position} ({len(lane.children)} cards).", json_mode)


def board_text_or_die(board: Board, json_mode: bool) -> str:
    """Serialize board. Exit 1 if it must not be saved."""
    try:
        return board_to_md(board)
    except BoardNotSavableError as e:
        error(str(e), json_mode)


def save(board: Board, path: str, json_mode: bool) -> str:
    """Write board to path and return the text written."""
    text = board_text_or_die(board, json_mode)
    Path(path).write_text(text, encoding="utf-8")
    return text


def item_to_dict(item: Item) -> dict:
    """JSON-ready view of a card."""
    data = item.data
    meta = data.metadata
    result = {
        "id": item.id,
        "title": data.title,
        "title_raw": data.title_raw,
        "checked": data.checked,
        "check_char": data.check_char,
        "tags": list(meta.tags),
    }
    if data.block_id:
        result["block_id"] = data.block_id
    if meta.date_str:
        result["date"] = meta.date_str
    if meta.start_date_str:
        result["start_date"] = meta.start_date_str
    if meta.time_str:
        result["time"] = meta.time_str
    if meta.priority:
        result["priority"] = meta.priority
    if meta.assigned_members:
        result["members"] = list(meta.assigned_members)
    if meta.inline_metadata:
        result["fields"] = {f.key: f.value for f in meta.inline_metadata}
    return result


def output_json(data: dict | list) -> None:
    """Write JSON to stdout."""
    print(json.dumps(data, indent=2))


def output_result(data: dict, text: str, json_mode: bool) -> None:
    """Output mutation result as JSON or plain text."""
    if json_mode:
        output_json(data)
    else:
        print(text)


def error(message: str, json_mode: bool) -> None:
    """Print error to stderr and exit 1."""
    if json_mode:
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)
    sys.exit(1)
