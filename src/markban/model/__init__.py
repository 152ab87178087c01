"""Board tree operations: load, save, edit."""

from markban.model.board import (
    archive_completed,
    find_lane,
    insert_item,
    rename_tag,
    replace_item,
    replace_tag_in_content,
    search_value,
)
from markban.model.item import new_item, reparse_board, update_item_content
from markban.model.loader import board_settings, md_to_board, new_board
from markban.model.writer import board_to_md, item_to_md

__all__ = [
    "archive_completed",
    "board_settings",
    "board_to_md",
    "find_lane",
    "insert_item",
    "item_to_md",
    "md_to_board",
    "new_board",
    "new_item",
    "rename_tag",
    "replace_item",
    "replace_tag_in_content",
    "reparse_board",
    "search_value",
    "update_item_content",
]
