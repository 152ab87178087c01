"""Handlers for whole-board commands: init, show, format, check, archive."""

import sys
from dataclasses import replace
from pathlib import Path

from rich.console import Console
from rich.text import Text

from markban.cli._common import (
    board_text_or_die,
    error,
    find_lane_or_die,
    item_to_dict,
    load_board_or_die,
    load_global_settings,
    output_json,
    output_result,
    read_board,
    save,
)
from markban.constants import FRONTMATTER_KEY
from markban.ids import generate_instance_id
from markban.model.board import archive_completed
from markban.model.loader import new_board
from markban.models import Item, Lane, LaneData
from markban.palette import PRIORITY_COLORS, color_for_tag, lane_color
from markban.settings import Settings
from markban.tokens import TAG_PATTERN

DEFAULT_LANES = (("To Do", False), ("Doing", False), ("Done", True))


def init_board(args) -> int:
    """Create a board document with a default set of lanes."""
    path = Path(args.path)

    if path.exists():
        try:
            board = read_board(str(path), {})
        except OSError as e:
            error(f"Cannot read {path}: {e.strerror or e}", args.json)
        if FRONTMATTER_KEY not in board.data.frontmatter:
            error(f"{path} exists and is not a board.", args.json)
        lanes = [lane.data.title for lane in board.children]
        if args.json:
            output_json({"path": str(path), "lanes": lanes, "created": False})
        else:
            print(f"Board already initialized at {path}")
        return 0

    board = new_board(str(path))
    lanes = tuple(
        Lane(id=generate_instance_id(), data=LaneData(title=title, should_mark_items_complete=complete))
        for title, complete in DEFAULT_LANES
    )
    board = replace(board, children=lanes)
    save(board, str(path), args.json)

    titles = [lane.data.title for lane in lanes]
    if args.json:
        output_json({"path": str(path), "lanes": titles, "created": True})
    else:
        print(f"Initialized board at {path}")
        print(f"Lanes: {', '.join(titles)}")

    return 0


def _item_text(number: int, item: Item, settings: Settings) -> Text:
    """One card as a styled line: tags colored, moved tokens shown as badges."""
    data = item.data
    meta = data.metadata
    title = data.title.split("\n", 1)[0]

    line = Text(f"  {number}. [{data.check_char}] ", style="dim" if data.checked else "")
    body = Text(title, style="strike" if data.checked else "")
    for match in TAG_PATTERN.finditer(title):
        body.stylize(color_for_tag(match.group(1)), match.start(), match.end())
    line.append_text(body)
    if "\n" in data.title:
        line.append(" …", style="dim")

    if meta.priority and settings.get("move-priority"):
        line.append(f"  !{meta.priority}", style=PRIORITY_COLORS[meta.priority])
    if settings.get("move-dates"):
        if meta.start_date_str:
            line.append(f"  {meta.start_date_str} →", style="cyan")
        if meta.date_str:
            line.append(f"  {meta.date_str}", style="cyan")
        if meta.time_str:
            line.append(f" {meta.time_str}", style="cyan")
    if settings.get("move-tags"):
        for tag in meta.tags:
            line.append(f"  {tag}", style=color_for_tag(tag))
    if settings.get("move-members"):
        for member in meta.assigned_members:
            line.append(f"  @@{member}", style="magenta")
    return line


def _lane_text(lane: Lane) -> Text:
    count = len(lane.children)
    limit = f"/{lane.data.max_items}" if lane.data.max_items else ""
    style = "bold"
    color = lane_color(lane.data.background_color)
    if color:
        style += f" on {color}"
    text = Text(lane.data.title or "(untitled)", style=style)
    text.append(f" ({count}{limit})", style="red" if lane.data.max_items and count > lane.data.max_items else "dim")
    return text


def _lane_dict(lane: Lane) -> dict:
    return {
        "id": lane.id,
        "title": lane.data.title,
        "max_items": lane.data.max_items,
        "complete": lane.data.should_mark_items_complete,
        "color": lane.data.background_color,
        "items": [item_to_dict(item) for item in lane.children],
    }


def board_show(args) -> int:
    """Show lanes and cards."""
    board, settings = load_board_or_die(args)

    lanes = list(board.children)
    if getattr(args, "lane", None):
        lanes = [board.children[find_lane_or_die(board, args.lane, args.json)]]

    if args.json:
        output_json(
            {
                "path": board.id,
                "lanes": [_lane_dict(lane) for lane in lanes],
                "archive": [item_to_dict(item) for item in board.data.archive],
            }
        )
        return 0

    console = Console(highlight=False, soft_wrap=True)
    for lane in lanes:
        console.print(_lane_text(lane))
        for number, item in enumerate(lane.children, 1):
            console.print(_item_text(number, item, settings))
    if board.data.archive and not getattr(args, "lane", None):
        console.print(Text(f"Archive ({len(board.data.archive)})", style="dim"))

    return 0


def board_format(args) -> int:
    """Print the board in canonical form, or rewrite the file with --write."""
    board, _ = load_board_or_die(args)

    if not getattr(args, "write", False):
        text = board_text_or_die(board, args.json)
        sys.stdout.write(text)
        return 0

    before = Path(args.path).read_text(encoding="utf-8")
    after = board_text_or_die(board, args.json)
    changed = before != after
    if changed:
        save(board, args.path, args.json)

    output_result(
        {"path": args.path, "changed": changed},
        f"Formatted {args.path}" if changed else f"{args.path} already formatted",
        args.json,
    )
    return 0


def board_check(args) -> int:
    """Report whether a document parses as a board. Exit 1 if not."""
    global_settings = load_global_settings(getattr(args, "settings", None), args.json)
    try:
        board = read_board(args.path, global_settings)
    except OSError as e:
        error(f"Cannot read {args.path}: {e.strerror or e}", args.json)

    is_board = FRONTMATTER_KEY in board.data.frontmatter
    errors = [e.description for e in board.data.errors]
    cards = sum(len(lane.children) for lane in board.children)

    if args.json:
        output_json(
            {
                "path": args.path,
                "board": is_board,
                "errors": errors,
                "lanes": len(board.children),
                "cards": cards,
                "archived": len(board.data.archive),
            }
        )
    elif not is_board:
        print(f"{args.path}: not a board (no '{FRONTMATTER_KEY}' front-matter key)")
    elif errors:
        print(f"{args.path}: {len(errors)} error(s), board is read-only")
        for description in errors:
            print(f"  {description}")
    else:
        print(f"{args.path}: ok, {len(board.children)} lanes, {cards} cards, {len(board.data.archive)} archived")

    return 0 if is_board and not errors else 1


def board_archive(args) -> int:
    """Move every checked card to the archive."""
    board, settings = load_board_or_die(args)

    updated = archive_completed(board, settings)
    count = len(updated.data.archive) - len(board.data.archive)
    if count:
        save(updated, args.path, args.json)

    output_result(
        {"path": args.path, "archived": count},
        f"Archived {count} card{'' if count == 1 else 's'}",
        args.json,
    )
    return 0
