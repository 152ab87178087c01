"""CLI argument parser and dispatch for markban."""

import argparse

from markban.cli.board import board_archive, board_check, board_format, board_show, init_board
from markban.cli.card import card_add, card_edit
from markban.cli.tag import tag_rename


def build_parser() -> argparse.ArgumentParser:
    """Build the full CLI argument parser."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--json", action="store_true", help="Machine-readable JSON output")
    common.add_argument("--settings", help="YAML file of global board settings")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")

    parser = argparse.ArgumentParser(
        prog="markban",
        description="Kanban boards kept in markdown files",
        parents=[common],
    )

    nouns = parser.add_subparsers(dest="noun")

    # --- board commands ---
    init_p = nouns.add_parser("init", help="Create a board file", parents=[common])
    init_p.add_argument("path", help="Board file")
    init_p.set_defaults(func=init_board)

    show_p = nouns.add_parser("show", help="Show lanes and cards", parents=[common])
    show_p.add_argument("path", help="Board file")
    show_p.add_argument("--lane", help="Only this lane (index, id or title)")
    show_p.set_defaults(func=board_show)

    format_p = nouns.add_parser("format", help="Print the board in canonical form", parents=[common])
    format_p.add_argument("path", help="Board file")
    format_p.add_argument("-w", "--write", action="store_true", help="Rewrite the file in place")
    format_p.set_defaults(func=board_format)

    check_p = nouns.add_parser("check", help="Check that a file parses as a board", parents=[common])
    check_p.add_argument("path", help="Board file")
    check_p.set_defaults(func=board_check)

    archive_p = nouns.add_parser("archive", help="Archive completed cards", parents=[common])
    archive_p.add_argument("path", help="Board file")
    archive_p.set_defaults(func=board_archive)

    # --- card ---
    card_p = nouns.add_parser("card", help="Card operations", parents=[common])
    card_verbs = card_p.add_subparsers(dest="verb")

    card_add_p = card_verbs.add_parser("add", help="Create a card", parents=[common])
    card_add_p.add_argument("path", help="Board file")
    card_add_p.add_argument("text", help="Card text")
    card_add_p.add_argument("--lane", help="Target lane (index, id or title; default: first)")
    card_add_p.add_argument("--position", type=int, help="Position in lane (1-indexed)")
    card_add_p.add_argument("--done", action="store_true", help="Create the card checked")
    card_add_p.add_argument("--tag-lane", action="store_true", help="Tag the card with the lane name")
    card_add_p.add_argument("--tag-document", action="store_true", help="Tag the card with the file name")
    card_add_p.add_argument("--anchor", action="store_true", help="Give the card a ^block-id")
    card_add_p.set_defaults(func=card_add)

    card_edit_p = card_verbs.add_parser("edit", help="Replace a card's text", parents=[common])
    card_edit_p.add_argument("path", help="Board file")
    card_edit_p.add_argument("lane", help="Lane (index, id or title)")
    card_edit_p.add_argument("position", type=int, help="Card position in lane (1-indexed)")
    card_edit_p.add_argument("text", help="New card text")
    card_edit_p.set_defaults(func=card_edit)

    # --- tag ---
    tag_p = nouns.add_parser("tag", help="Tag operations", parents=[common])
    tag_verbs = tag_p.add_subparsers(dest="verb")

    tag_rename_p = tag_verbs.add_parser("rename", help="Rename a tag on every card", parents=[common])
    tag_rename_p.add_argument("path", help="Board file")
    tag_rename_p.add_argument("old", help="Tag to rename, e.g. #work")
    tag_rename_p.add_argument("new", help="New tag name")
    tag_rename_p.add_argument("--lane", help="Only cards in this lane")
    tag_rename_p.set_defaults(func=tag_rename)

    return parser
