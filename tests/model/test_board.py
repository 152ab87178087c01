"""Tests for board-level card operations."""

from datetime import datetime

import pytest

from markban.model.board import (
    archive_completed,
    find_lane,
    insert_item,
    rename_tag,
    replace_item,
    replace_tag_in_content,
    search_value,
)
from markban.model.loader import md_to_board
from markban.model.writer import board_to_md
from markban.settings import resolve_settings

TAGGED_MD = (
    "---\nkanban-plugin: board\n---\n\n"
    "## A\n\n- [ ] fix #work\n- [ ] go to #workshop\n\n"
    "## B\n\n- [ ] plan #Work now\n"
)


@pytest.fixture
def board(board_md):
    return md_to_board(board_md)


def test_find_lane(board):
    assert find_lane(board, "1") == 0
    assert find_lane(board, "2") == 1
    assert find_lane(board, "done") == 1
    assert find_lane(board, "TO DO") == 0
    assert find_lane(board, "0") is None
    assert find_lane(board, "9") is None
    assert find_lane(board, "nope") is None


def test_insert_item(board, make_item):
    item = make_item("- [ ] new")
    at_end = insert_item(board, 0, item)
    assert at_end.children[0].children[-1] is item
    at_start = insert_item(board, 0, item, 0)
    assert at_start.children[0].children[0] is item
    assert at_start.children[1] is board.children[1]
    assert len(board.children[0].children) == 2


def test_replace_item(board, make_item):
    item = make_item("- [ ] replaced")
    result = replace_item(board, 0, 1, item)
    assert result.children[0].children[1] is item
    assert result.children[0].children[0] is board.children[0].children[0]


def test_archive_completed(board, settings):
    result = archive_completed(board, settings)
    assert result.children[1].children == ()
    assert result.children[0] is board.children[0]
    assert [item.data.title_raw for item in result.data.archive] == ["old card", "write tests"]


def test_archive_completed_nothing_checked(settings):
    board = md_to_board(TAGGED_MD)
    assert archive_completed(board, settings) is board


def test_archive_completed_with_date(board_md):
    board = md_to_board(board_md)
    settings = resolve_settings({"append-archive-date": True})
    result = archive_completed(board, settings, now=datetime(2024, 3, 1, 14, 5))
    archived = result.data.archive[-1]
    assert archived.data.title_raw == "Mar 1, 2024 2:05 pm - write tests"
    assert archived.data.checked


def test_archived_board_round_trips(board, settings):
    text = board_to_md(archive_completed(board, settings))
    reloaded = md_to_board(text)
    assert [item.data.title_raw for item in reloaded.data.archive] == ["old card", "write tests"]
    assert reloaded.children[1].children == ()


def test_replace_tag_in_content():
    assert replace_tag_in_content("#work, #Work #workshop", "work", "job") == "#job, #job #workshop"
    assert replace_tag_in_content("a#work", "#work", "#job") == "a#work"
    assert replace_tag_in_content("#work/sub", "#work", "#job") == "#work/sub"


def test_rename_tag(settings):
    board = md_to_board(TAGGED_MD)
    result = rename_tag(board, "#work", "#job", settings)
    a, b = result.children
    assert a.children[0].data.title_raw == "fix #job"
    assert a.children[0].data.metadata.tags == ("#job",)
    assert a.children[0].id == board.children[0].children[0].id
    assert a.children[1] is board.children[0].children[1]
    assert b.children[0].data.title_raw == "plan #job now"


def test_rename_tag_in_one_lane(settings):
    board = md_to_board(TAGGED_MD)
    result = rename_tag(board, "#work", "#job", settings, lane_index=1)
    assert result.children[0] is board.children[0]
    assert result.children[1].children[0].data.title_raw == "plan #job now"


def test_rename_tag_invalid_lane(settings):
    board = md_to_board(TAGGED_MD)
    assert rename_tag(board, "#work", "#job", settings, lane_index=5) is board


def test_rename_tag_no_match(settings):
    board = md_to_board(TAGGED_MD)
    assert rename_tag(board, "#missing", "#job", settings) is board


def test_search_value(settings, make_item):
    item = make_item("- [ ] Ship Report @{2024-03-01} @@{10:30}")
    value = search_value(item, settings)
    assert "ship report" in value
    assert "mar 1, 2024" in value
    assert "10:30" in value
