"""Build a Board tree from a markdown document."""

import logging
import re
import traceback
from collections.abc import Mapping
from typing import Any

from markban.constants import (
    ARCHIVE_TITLE,
    BASIC_FRONTMATTER,
    COMPLETE_TITLE,
    FRONTMATTER_KEY,
    LANE_COLOR_PREFIX,
    LANE_ID_PREFIX,
    SETTINGS_OPEN,
)
from markban.errors import BoardParseError
from markban.hydrate import list_item_to_item_data
from markban.ids import generate_instance_id
from markban.mdast import MdNode, parse_markdown
from markban.models import Board, BoardData, ErrorReport, Item, Lane, LaneData
from markban.parser import mask_span, parse_lane_title, parse_settings_block, split_front_matter
from markban.settings import Settings, resolve_settings

logger = logging.getLogger(__name__)

_LANE_ID = re.compile(r"<!--\s*" + re.escape(LANE_ID_PREFIX) + r"\s*(.*?)\s*-->")
_LANE_COLOR = re.compile(r"<!--\s*" + re.escape(LANE_COLOR_PREFIX) + r"\s*(.*?)\s*-->")


def board_settings(board: Board, global_settings: Mapping[str, Any] | None = None) -> Settings:
    """Resolve the settings a board is hydrated with."""
    return resolve_settings(global_settings, board.data.settings)


def new_board(path: str = "", settings: Mapping[str, Any] | None = None) -> Board:
    """An empty board as written to a fresh document."""
    return md_to_board(BASIC_FRONTMATTER, path, settings)


def md_to_board(md: str, path: str = "", settings: Mapping[str, Any] | None = None) -> Board:
    """Parse a markdown document into a Board.

    A document whose front-matter lacks the board key is not a board: the
    result has no lanes and no errors. Structural failures never propagate;
    they are recorded in data.errors and the board comes back with no lanes
    and no archive, which makes it read-only.
    """
    md = md.replace("\r\n", "\n")
    frontmatter, body_start = split_front_matter(md)

    if FRONTMATTER_KEY not in frontmatter:
        logger.debug("%s has no %s front-matter key", path or "document", FRONTMATTER_KEY)
        return Board(id=path, data=BoardData(frontmatter=frontmatter))

    local: dict = {}
    try:
        local = parse_settings_block(md)
        resolved = resolve_settings(settings, local)
        nodes = parse_markdown(mask_span(md, 0, body_start))
        lanes, archive = _extract_lanes(md, nodes, resolved)
    except Exception as e:
        logger.exception("Failed to parse board %s", path or "document")
        report = ErrorReport(description=str(e) or type(e).__name__, stack=traceback.format_exc())
        return Board(id=path, data=BoardData(settings=local, frontmatter=frontmatter, errors=(report,)))

    return Board(
        id=path,
        children=tuple(lanes),
        data=BoardData(settings=local, frontmatter=frontmatter, archive=tuple(archive)),
    )


def _extract_lanes(md: str, nodes: list[MdNode], settings: Settings) -> tuple[list[Lane], list[Item]]:
    """Group heading + list pairs into lanes and collect the archive."""
    lanes: list[Lane] = []
    archive: list[Item] = []
    claimed: set[int] = set()

    for index, node in enumerate(nodes):
        if node.type != "heading":
            continue

        items_list, mark_complete = _find_list(nodes, index)
        if items_list is not None:
            claimed.add(id(items_list))

        if _is_archive(nodes, index):
            if items_list is not None:
                archive.extend(_to_items(md, items_list, settings))
            continue

        title, max_items = parse_lane_title(md[node.content_start : node.content_end])
        lane_id, color = _lane_markers(nodes, index)
        children = _to_items(md, items_list, settings, mark_complete) if items_list is not None else []
        lanes.append(
            Lane(
                id=lane_id or generate_instance_id(),
                data=LaneData(
                    title=title,
                    max_items=max_items,
                    should_mark_items_complete=mark_complete,
                    background_color=color,
                ),
                children=tuple(children),
            )
        )

    for node in nodes:
        if node.type == "list" and id(node) not in claimed:
            raise BoardParseError(f"List items outside of a lane at line {node.position.start.line}")

    return lanes, archive


def _to_items(md: str, items_list: MdNode, settings: Settings, mark_complete: bool = False) -> list[Item]:
    return [
        Item(id=generate_instance_id(), data=list_item_to_item_data(md, child, settings, mark_complete))
        for child in items_list.children
    ]


def _is_archive(nodes: list[MdNode], index: int) -> bool:
    """An Archive heading directly after a thematic break."""
    node = nodes[index]
    return node.value.strip() == ARCHIVE_TITLE and index > 0 and nodes[index - 1].type == "thematic_break"


def _lane_markers(nodes: list[MdNode], index: int) -> tuple[str | None, str | None]:
    """Read the lane id and color comments from the two nodes after a heading.

    The first match of each wins.
    """
    lane_id = None
    color = None
    for sibling in nodes[index + 1 : index + 3]:
        if sibling.type in ("heading", "list"):
            break
        if sibling.type == "html":
            if lane_id is None:
                match = _LANE_ID.search(sibling.value)
                if match and match.group(1):
                    lane_id = match.group(1)
            if color is None:
                match = _LANE_COLOR.search(sibling.value)
                if match and match.group(1):
                    color = match.group(1)
        if lane_id and color:
            break
        if sibling.type not in ("paragraph", "html"):
            break
    return lane_id, color


def _find_list(nodes: list[MdNode], index: int) -> tuple[MdNode | None, bool]:
    """Find the list belonging to the heading at index.

    Returns (list, mark_complete). The search stops at the next heading and
    at the settings block.
    """
    mark_complete = False
    for node in nodes[index + 1 :]:
        if node.type == "heading":
            break
        if node.type == "paragraph":
            if node.value.startswith(SETTINGS_OPEN):
                break
            if node.value.strip() == COMPLETE_TITLE:
                mark_complete = True
        if node.type == "list":
            return node, mark_complete
    return None, mark_complete
