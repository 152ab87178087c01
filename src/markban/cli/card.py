"""Handlers for 'markban card' commands."""

from pathlib import Path

from markban.cli._common import (
    error,
    find_item_or_die,
    find_lane_or_die,
    item_to_dict,
    load_board_or_die,
    output_result,
    save,
)
from markban.ids import generate_block_id
from markban.model.board import insert_item, replace_item
from markban.model.item import new_item, update_item_content


def card_add(args) -> int:
    """Create a new card."""
    board, settings = load_board_or_die(args)

    if not board.children:
        error("Board has no lanes.", args.json)
    lane_index = find_lane_or_die(board, args.lane, args.json) if args.lane else 0
    lane = board.children[lane_index]

    done = args.done or lane.data.should_mark_items_complete
    check_char = (settings.get("done-character") or "x") if done else " "
    item = new_item(
        args.text,
        settings,
        check_char=check_char,
        lane_name=lane.data.title if args.tag_lane else None,
        document_name=Path(args.path).stem if args.tag_document else None,
        block_id=generate_block_id() if getattr(args, "anchor", False) else None,
    )
    if item is None:
        error("Could not create a card from that text.", args.json)

    position = args.position - 1 if args.position is not None else None
    board = insert_item(board, lane_index, item, position=position)
    save(board, args.path, args.json)

    data = item_to_dict(item)
    data["lane"] = {"id": lane.id, "title": lane.data.title}
    output_result(data, f"Created card in {lane.data.title}: {item.data.title}", args.json)

    return 0


def card_edit(args) -> int:
    """Replace the text of a card, keeping its checkbox and block id."""
    board, settings = load_board_or_die(args)
    lane_index = find_lane_or_die(board, args.lane, args.json)
    item_index = find_item_or_die(board, lane_index, args.position, args.json)
    item = board.children[lane_index].children[item_index]

    updated = update_item_content(item, args.text, settings)
    if updated is None:
        error(f"Could not update card {args.position}; it is unchanged.", args.json)

    board = replace_item(board, lane_index, item_index, updated)
    save(board, args.path, args.json)

    output_result(item_to_dict(updated), f"Updated card {args.position}: {updated.data.title}", args.json)

    return 0
