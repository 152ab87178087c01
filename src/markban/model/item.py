"""Single-card edits and full-board reparse."""

import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from markban.errors import BoardParseError
from markban.hydrate import list_item_to_item_data
from markban.ids import generate_instance_id
from markban.mdast import parse_markdown
from markban.models import Board, Item, ItemData, Lane
from markban.parser import add_block_id, indent_new_lines

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


def _fragment(content: str, check_char: str, block_id: str | None = None) -> str:
    return f"- [{check_char}] {add_block_id(indent_new_lines(content), block_id)}"


def _hydrate_fragment(fragment: str, settings: Mapping[str, Any]) -> ItemData:
    """Hydrate a one-item markdown fragment.

    The position is cleared: it refers to the fragment, not the document.
    """
    nodes = parse_markdown(fragment)
    if len(nodes) != 1 or nodes[0].type != "list" or len(nodes[0].children) != 1:
        raise BoardParseError(f"Card text does not form a single list item: {fragment!r}")
    data = list_item_to_item_data(fragment, nodes[0].children[0], settings)
    return replace(data, position=None)


def update_item_content(item: Item, content: str, settings: Mapping[str, Any]) -> Item | None:
    """Replace an item's text and re-derive its metadata.

    The item keeps its id, checkbox and block id. Returns None if the new
    text cannot be hydrated; the caller keeps the old item.
    """
    fragment = _fragment(content, item.data.check_char, item.data.block_id)
    try:
        data = _hydrate_fragment(fragment, settings)
    except Exception:
        logger.exception("Failed to update item %s", item.id)
        return None
    return replace(item, data=data)


def new_item(
    content: str,
    settings: Mapping[str, Any],
    check_char: str = " ",
    lane_name: str | None = None,
    document_name: str | None = None,
    force_edit: bool = False,
    block_id: str | None = None,
) -> Item | None:
    """Create a card from free text.

    When given, the lane name and document name are appended as tags on a
    separate paragraph: "Buy milk" in lane "To Do" of "Home.md" becomes
    "Buy milk\\n\\n#to-do #home".
    """
    tags = [_name_to_tag(name) for name in (lane_name, document_name) if name]
    text = content.strip()
    if tags:
        text = f"{text}\n\n{' '.join(tags)}"

    try:
        data = _hydrate_fragment(_fragment(text, check_char, block_id), settings)
    except Exception:
        logger.exception("Failed to create item from %r", content)
        return None
    return Item(id=generate_instance_id(), data=replace(data, force_edit=force_edit))


def _name_to_tag(name: str) -> str:
    return "#" + _WHITESPACE.sub("-", name.strip().lower())


def reparse_board(board: Board, settings: Mapping[str, Any]) -> Board:
    """Re-hydrate every card from its title_raw under settings.

    Lanes and the archive keep their structure and ids. Items whose data
    comes out unchanged are reused as-is, and so are lanes none of whose
    items changed.
    """
    lanes = tuple(_reparse_lane(lane, settings) for lane in board.children)
    archive = _reparse_items(board.data.archive, settings)

    if all(new is old for new, old in zip(lanes, board.children)) and archive is board.data.archive:
        return board
    return replace(board, children=lanes, data=replace(board.data, archive=archive))


def _reparse_lane(lane: Lane, settings: Mapping[str, Any]) -> Lane:
    children = _reparse_items(lane.children, settings)
    if children is lane.children:
        return lane
    return replace(lane, children=children)


def _reparse_items(items: tuple[Item, ...], settings: Mapping[str, Any]) -> tuple[Item, ...]:
    result = tuple(_reparse_item(item, settings) for item in items)
    if all(new is old for new, old in zip(result, items)):
        return items
    return result


def _reparse_item(item: Item, settings: Mapping[str, Any]) -> Item:
    updated = update_item_content(item, item.data.title_raw, settings)
    if updated is None:
        return item
    # The source text is unchanged, so the old position is still valid.
    data = replace(updated.data, position=item.data.position, force_edit=item.data.force_edit)
    if data == item.data:
        return item
    return replace(item, data=data)
