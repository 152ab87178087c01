"""Turn list-item nodes into card data."""

import logging
import re
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from markban.deletion import DeletionEditor, mark_for_deletion, widen_span
from markban.mdast import MdNode
from markban.models import ItemData, ItemMetadata
from markban.parser import dedent_new_lines, get_block_id, remove_block_id, replace_brs
from markban.tokens import (
    extract_date_time,
    extract_inline_fields,
    extract_members,
    extract_priority,
    extract_tags,
    extract_time,
)

logger = logging.getLogger(__name__)

_EMPTY_CHECKBOX = re.compile(r"\[([^\[\]\n])\]")
_LEADING_CHECKBOX = re.compile(r"^\s*\[[^\[\]\n]\]\s*")


def extract_item_metadata(title_raw: str, settings: Mapping[str, Any]) -> tuple[ItemMetadata, str]:
    """Extract metadata from card text and build the display title.

    Extractors run in a fixed order over a scan copy of the text in which
    every token already claimed is blanked out, so later extractors never
    see it again. Spans whose move setting is on are also marked in the
    title editor; all of them are removed in one pass at the end.
    """
    scan = title_raw
    title = DeletionEditor(title_raw)

    def consume(span: tuple[int, int], move: bool) -> None:
        nonlocal scan
        scan = mark_for_deletion(scan, *span)
        if move:
            title.mark(*widen_span(title_raw, *span))

    move_dates = bool(settings.get("move-dates"))
    found: dict[str, Any] = {}

    for token in extract_date_time(scan, settings):
        prefix = "start_date" if token.is_start else "date"
        if prefix in found:
            continue
        found[prefix] = token.value
        found[f"{prefix}_str"] = token.text
        consume(token.span, move_dates)
        if token.time is not None and "time" not in found:
            found["time"] = token.time.time()
            found["time_str"] = token.time_text
            consume(token.time_span, move_dates)
        logger.debug("extracted %s %s", prefix, token.text)

    if "time" not in found:
        clock = extract_time(scan, settings)
        if clock is not None:
            found["time"] = clock.value.time()
            found["time_str"] = clock.text
            consume(clock.span, move_dates)

    priority, span = extract_priority(scan)
    if priority is not None:
        found["priority"] = priority
        consume(span, bool(settings.get("move-priority")))

    tags = []
    for tag in extract_tags(scan):
        if tag.duplicate:
            consume(tag.span, True)
        else:
            tags.append(tag.tag)
            consume(tag.span, bool(settings.get("move-tags")))

    members: list[str] = []
    for member in extract_members(scan):
        if member.name not in members:
            members.append(member.name)
        consume(member.span, bool(settings.get("move-members")))

    fields = extract_inline_fields(scan)
    move_task_fields = bool(settings.get("move-task-metadata"))
    move_fields = settings.get("inline-metadata-position", "body") != "body"
    for field in fields:
        if move_task_fields if field.is_task else move_fields:
            title.mark(*widen_span(title_raw, field.start, field.end))

    metadata = ItemMetadata(
        tags=tuple(tags),
        assigned_members=tuple(members),
        inline_metadata=tuple(fields),
        **found,
    )
    return metadata, title.execute().strip()


def search_text(node: MdNode) -> str:
    """Flatten a list item for searching: text, code, image alt and link targets."""
    if node.source is None:
        return ""
    parts = []
    for child in node.source.walk():
        if child.type in ("text", "code_inline", "fence", "code_block"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif child.type == "paragraph" and parts:
            parts.append(" ")
        elif child.type == "link" and child.attrs.get("href"):
            parts.append(f" {child.attrs['href']} ")
    return _LEADING_CHECKBOX.sub("", "".join(parts), count=1).strip()


def list_item_to_item_data(
    md: str,
    node: MdNode,
    settings: Mapping[str, Any],
    mark_complete: bool = False,
) -> ItemData:
    """Hydrate one list item of md into ItemData.

    title_raw is the item source without the bullet, checkbox and trailing
    block id, with continuation indent removed. metadata is always filled;
    the move settings only affect title.
    """
    content = md[node.content_start : node.content_end]
    check_char = node.check_char
    if check_char is None:
        empty = _EMPTY_CHECKBOX.fullmatch(content)
        if empty:
            check_char = empty.group(1)
            content = ""
        else:
            check_char = " "

    text = dedent_new_lines(replace_brs(content))
    block_id = get_block_id(text)
    title_raw = remove_block_id(text)

    metadata, title = extract_item_metadata(title_raw, settings)
    if block_id:
        metadata = replace(metadata, block_id=block_id)

    done = settings.get("done-character") or "x"
    if mark_complete:
        check_char = done

    return ItemData(
        title_raw=title_raw,
        title=title,
        title_search=search_text(node),
        checked=check_char == done,
        check_char=check_char,
        block_id=block_id,
        metadata=metadata,
        position=node.position,
    )
