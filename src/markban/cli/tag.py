"""Handlers for 'markban tag' commands."""

from markban.cli._common import find_lane_or_die, load_board_or_die, output_result, save
from markban.model.board import rename_tag


def tag_rename(args) -> int:
    """Rename a tag on every card, or on the cards of one lane."""
    board, settings = load_board_or_die(args)
    lane_index = find_lane_or_die(board, args.lane, args.json) if args.lane else None

    updated = rename_tag(board, args.old, args.new, settings, lane_index=lane_index)
    changed = sum(
        1
        for new_lane, old_lane in zip(updated.children, board.children)
        for new, old in zip(new_lane.children, old_lane.children)
        if new is not old
    )
    if changed:
        save(updated, args.path, args.json)

    output_result(
        {"old": args.old, "new": args.new, "changed": changed},
        f"Renamed {args.old} to {args.new} on {changed} card{'' if changed == 1 else 's'}",
        args.json,
    )

    return 0
