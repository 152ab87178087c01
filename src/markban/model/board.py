"""Board-level operations: adding and replacing cards, archiving, tag rename, search."""

import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from typing import Any

from markban.dates import format_date
from markban.model.item import update_item_content
from markban.models import Board, Item, Lane

logger = logging.getLogger(__name__)


def find_lane(board: Board, key: str) -> int | None:
    """Find a lane by 1-based index, id, or case-insensitive title."""
    if key.isdigit():
        index = int(key) - 1
        return index if 0 <= index < len(board.children) else None
    for index, lane in enumerate(board.children):
        if lane.id == key or lane.data.title.lower() == key.lower():
            return index
    return None


def _replace_lane(board: Board, lane_index: int, lane: Lane) -> Board:
    children = list(board.children)
    children[lane_index] = lane
    return replace(board, children=tuple(children))


def insert_item(board: Board, lane_index: int, item: Item, position: int | None = None) -> Board:
    """Add item to a lane, at the end unless position is given."""
    lane = board.children[lane_index]
    items = list(lane.children)
    if position is None:
        items.append(item)
    else:
        items.insert(position, item)
    return _replace_lane(board, lane_index, replace(lane, children=tuple(items)))


def replace_item(board: Board, lane_index: int, item_index: int, item: Item) -> Board:
    lane = board.children[lane_index]
    items = list(lane.children)
    items[item_index] = item
    return _replace_lane(board, lane_index, replace(lane, children=tuple(items)))


def archive_completed(board: Board, settings: Mapping[str, Any], now: datetime | None = None) -> Board:
    """Move every checked card from the lanes to the end of the archive.

    With append-archive-date set, the archived card text is prefixed with
    the current time in archive-date-format followed by
    archive-date-separator.
    """
    archived: list[Item] = []
    lanes = []
    for lane in board.children:
        done = [item for item in lane.children if item.data.checked]
        if not done:
            lanes.append(lane)
            continue
        archived.extend(done)
        lanes.append(replace(lane, children=tuple(item for item in lane.children if not item.data.checked)))

    if not archived:
        return board

    if settings.get("append-archive-date"):
        stamp = format_date(now or datetime.now(), settings.get("archive-date-format") or "MMM D, YYYY h:mm a")
        separator = settings.get("archive-date-separator") or ""
        archived = [_prefix_item(item, f"{stamp}{separator}", settings) for item in archived]

    logger.info("Archived %d completed card(s)", len(archived))
    return replace(
        board,
        children=tuple(lanes),
        data=replace(board.data, archive=board.data.archive + tuple(archived)),
    )


def _prefix_item(item: Item, prefix: str, settings: Mapping[str, Any]) -> Item:
    return update_item_content(item, prefix + item.data.title_raw, settings) or item


def _normalize_tag(tag: str) -> str:
    return tag if tag.startswith("#") else f"#{tag}"


def replace_tag_in_content(content: str, old_tag: str, new_tag: str) -> str:
    """Replace whole occurrences of old_tag (any case) with new_tag.

    "#work" matches "#Work" and "#work," but not "#workshop".
    """
    pattern = re.compile(rf"(?<!\S){re.escape(_normalize_tag(old_tag))}(?![\w/-])", re.IGNORECASE)
    new_tag = _normalize_tag(new_tag)
    return pattern.sub(lambda _: new_tag, content)


def rename_tag(
    board: Board,
    old_tag: str,
    new_tag: str,
    settings: Mapping[str, Any],
    lane_index: int | None = None,
) -> Board:
    """Rename a tag in every lane, or only in the lane at lane_index.

    Only cards whose text changes are re-hydrated. An out-of-range
    lane_index leaves the board unchanged.
    """
    if lane_index is not None and not 0 <= lane_index < len(board.children):
        logger.warning("Invalid lane index %d", lane_index)
        return board

    lanes = []
    changed = 0
    for index, lane in enumerate(board.children):
        if lane_index is not None and index != lane_index:
            lanes.append(lane)
            continue
        items = []
        before = changed
        for item in lane.children:
            content = replace_tag_in_content(item.data.title_raw, old_tag, new_tag)
            if content == item.data.title_raw:
                items.append(item)
                continue
            updated = update_item_content(item, content, settings)
            if updated is None:
                items.append(item)
                continue
            items.append(updated)
            changed += 1
        lanes.append(replace(lane, children=tuple(items)) if changed > before else lane)

    if not changed:
        return board
    logger.info("Renamed %s to %s in %d card(s)", old_tag, new_tag, changed)
    return replace(board, children=tuple(lanes))


def search_value(item: Item, settings: Mapping[str, Any]) -> str:
    """The lower-cased text a search query is matched against."""
    parts = [item.data.title_search]
    metadata = item.data.metadata
    if metadata.date is not None:
        parts.append(format_date(metadata.date, settings.get("date-display-format") or "MMM D, YYYY"))
    if metadata.time_str:
        parts.append(metadata.time_str)
    return " ".join(part for part in parts if part).lower()
