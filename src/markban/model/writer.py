"""Serialize a Board tree back to markdown."""

from markban.constants import (
    ARCHIVE_STRING,
    ARCHIVE_TITLE,
    COMPLETE_STRING,
    FRONTMATTER_KEY,
    LANE_COLOR_PREFIX,
    LANE_ID_PREFIX,
)
from markban.errors import BoardNotSavableError
from markban.models import Board, Item, Lane
from markban.parser import (
    add_block_id,
    indent_new_lines,
    lane_title_with_max_items,
    serialize_front_matter,
    serialize_settings_block,
)


def item_to_md(item: Item) -> str:
    """One card as a single list item line (continuations indented)."""
    text = add_block_id(indent_new_lines(item.data.title_raw), item.data.block_id)
    return f"- [{item.data.check_char}] {text}"


def lane_to_md(lane: Lane) -> str:
    lines = [f"## {lane_title_with_max_items(lane.data.title, lane.data.max_items)}"]
    lines.append(f"<!-- {LANE_ID_PREFIX} {lane.id} -->")
    if lane.data.background_color:
        lines.append(f"<!-- {LANE_COLOR_PREFIX} {lane.data.background_color} -->")
    lines.append("")

    if lane.data.should_mark_items_complete:
        lines.append(COMPLETE_STRING)

    lines.extend(item_to_md(item) for item in lane.children)
    lines.extend(["", "", ""])
    return "\n".join(lines)


def archive_to_md(archive: tuple[Item, ...]) -> str:
    if not archive:
        return ""
    lines = [ARCHIVE_STRING, "", f"## {ARCHIVE_TITLE}", ""]
    lines.extend(item_to_md(item) for item in archive)
    return "\n".join(lines)


def board_to_md(board: Board) -> str:
    """Serialize board to the canonical document text.

    Raises BoardNotSavableError for a read-only board (errors recorded) or
    for a document that is not a board, since writing either would lose
    content.
    """
    if board.data.errors:
        raise BoardNotSavableError(f"Board {board.id!r} has parse errors and is read-only")
    if FRONTMATTER_KEY not in board.data.frontmatter:
        raise BoardNotSavableError(f"Front-matter has no {FRONTMATTER_KEY} key")

    lanes = "".join(lane_to_md(lane) for lane in board.children)
    return (
        serialize_front_matter(board.data.frontmatter)
        + lanes
        + archive_to_md(board.data.archive)
        + serialize_settings_block(board.data.settings)
    )
