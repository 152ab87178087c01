"""Tests for turning list items into card data."""

from datetime import datetime, time

import pytest

from markban.hydrate import extract_item_metadata


@pytest.mark.parametrize(
    "line",
    [
        "just some *plain* text",
        "see [the docs](https://example.com) and `code`",
        "50% done, ask me@example.com",
        "issue #42 is open",
        "keep @{not a date} as text",
    ],
)
def test_unrecognized_text_is_kept(line, hydrate):
    data = hydrate(f"- [ ] {line}")
    assert data.title_raw == line
    assert data.title == line


def test_tag_dedup(hydrate):
    data = hydrate("- [ ] buy milk #errand #Errand #errand")
    assert data.metadata.tags == ("#errand",)
    assert data.title == "buy milk #errand"
    assert data.title_raw == "buy milk #errand #Errand #errand"


def test_tag_dedup_with_move_tags(hydrate):
    data = hydrate("- [ ] buy milk #errand #Errand #errand", {"move-tags": True})
    assert data.metadata.tags == ("#errand",)
    assert data.title == "buy milk"


def test_tags_keep_original_casing_and_order(hydrate):
    data = hydrate("- [ ] #Zeta then #alpha")
    assert data.metadata.tags == ("#Zeta", "#alpha")


def test_date_extraction(hydrate):
    data = hydrate("- [ ] ship report @{2024-03-01}")
    assert data.metadata.date_str == "2024-03-01"
    assert data.metadata.date == datetime(2024, 3, 1)
    assert data.title == "ship report @{2024-03-01}"


def test_date_extraction_with_move_dates(hydrate):
    data = hydrate("- [ ] ship report @{2024-03-01}", {"move-dates": True})
    assert data.metadata.date_str == "2024-03-01"
    assert data.title == "ship report"
    assert data.title_raw == "ship report @{2024-03-01}"


def test_date_and_time(hydrate):
    data = hydrate("- [ ] call @{2024-03-01} @@{10:30} bob", {"move-dates": True})
    assert data.metadata.time == time(10, 30)
    assert data.metadata.time_str == "10:30"
    assert data.title == "call bob"


def test_standalone_time(hydrate):
    data = hydrate("- [ ] standup @@{09:15}")
    assert data.metadata.time == time(9, 15)
    assert data.metadata.date is None


def test_start_and_due_dates(hydrate):
    data = hydrate("- [ ] build @start{2024-03-01} @{2024-03-10}")
    assert data.metadata.start_date == datetime(2024, 3, 1)
    assert data.metadata.start_date_str == "2024-03-01"
    assert data.metadata.date == datetime(2024, 3, 10)


def test_first_date_wins(hydrate):
    data = hydrate("- [ ] a @{2024-03-01} b @{2024-04-01}", {"move-dates": True})
    assert data.metadata.date_str == "2024-03-01"
    assert data.title == "a b @{2024-04-01}"


def test_invalid_date_stays_in_title(hydrate):
    data = hydrate("- [ ] ship @{2024-02-30}", {"move-dates": True})
    assert data.metadata.date is None
    assert data.title == "ship @{2024-02-30}"


def test_priority_first_match(hydrate):
    data = hydrate("- [ ] a !high b !low")
    assert data.metadata.priority == "high"
    assert data.title == "a b !low"


def test_priority_kept_in_title_without_move(hydrate):
    data = hydrate("- [ ] a !high b", {"move-priority": False})
    assert data.metadata.priority == "high"
    assert data.title == "a !high b"


def test_members_collected_and_removed(hydrate):
    data = hydrate("- [ ] call @@alice and @@bob @@alice")
    assert data.metadata.assigned_members == ("alice", "bob")
    assert data.title == "call and"


def test_members_not_mistaken_for_time(hydrate):
    data = hydrate("- [ ] @@{10:00} with @@carol")
    assert data.metadata.time == time(10, 0)
    assert data.metadata.assigned_members == ("carol",)


def test_task_fields_follow_move_task_metadata(hydrate):
    line = "- [ ] pay rent due:: 2024-03-01"
    kept = hydrate(line)
    moved = hydrate(line, {"move-task-metadata": True})
    assert kept.title == "pay rent due:: 2024-03-01"
    assert moved.title == "pay rent"
    assert moved.metadata.inline_metadata[0].key == "due"
    assert moved.metadata.inline_metadata[0].is_task


def test_general_fields_follow_inline_metadata_position(hydrate):
    line = "- [ ] pay rent [owner:: bob]"
    assert hydrate(line).title == "pay rent [owner:: bob]"
    assert hydrate(line, {"inline-metadata-position": "footer"}).title == "pay rent"
    assert hydrate(line).metadata.inline_metadata[0].value == "bob"


def test_every_move_setting_at_once(hydrate):
    line = "- [ ] report !high #work @@ann @{2024-03-01} due:: 2024-03-02"
    settings = {"move-dates": True, "move-tags": True, "move-task-metadata": True}
    data = hydrate(line, settings)
    assert data.title == "report"
    assert data.title_raw == line[6:]
    meta = data.metadata
    assert (meta.priority, meta.tags, meta.assigned_members, meta.date_str) == (
        "high",
        ("#work",),
        ("ann",),
        "2024-03-01",
    )


def test_metadata_independent_of_move_settings(hydrate):
    line = "- [ ] report !high #work @@ann @{2024-03-01}"
    everything = {"move-dates": True, "move-tags": True, "move-priority": True, "move-members": True}
    nothing = {"move-dates": False, "move-tags": False, "move-priority": False, "move-members": False}
    assert hydrate(line, everything).metadata == hydrate(line, nothing).metadata


def test_checkbox_states(hydrate):
    assert hydrate("- [x] done").checked
    assert hydrate("- [x] done").check_char == "x"
    half = hydrate("- [/] half way")
    assert half.check_char == "/"
    assert not half.checked
    assert not hydrate("- [ ] open").checked


def test_custom_done_character(hydrate):
    data = hydrate("- [v] shipped", {"done-character": "v"})
    assert data.checked
    assert not hydrate("- [x] shipped", {"done-character": "v"}).checked


def test_no_checkbox(hydrate):
    data = hydrate("- plain item")
    assert data.check_char == " "
    assert data.title_raw == "plain item"


def test_empty_checkbox(hydrate):
    data = hydrate("- [ ] ")
    assert data.title_raw == ""
    assert data.title == ""
    assert data.check_char == " "


def test_block_id(hydrate):
    data = hydrate("- [ ] card text ^abc123")
    assert data.block_id == "abc123"
    assert data.metadata.block_id == "abc123"
    assert data.title_raw == "card text"


def test_multiline_dedent_and_br(hydrate):
    data = hydrate("- [ ] first<br>second\n    third\n")
    assert data.title_raw == "first\nsecond\nthird"


def test_mark_complete():
    from markban.mdast import parse_markdown
    from markban.hydrate import list_item_to_item_data
    from markban.settings import resolve_settings

    md = "- [ ] finished\n"
    node = parse_markdown(md)[0].children[0]
    data = list_item_to_item_data(md, node, resolve_settings(), mark_complete=True)
    assert data.checked
    assert data.check_char == "x"


def test_title_search(hydrate):
    data = hydrate("- [ ] read [the docs](https://example.com) #ref `cli`")
    assert "the docs" in data.title_search
    assert "https://example.com" in data.title_search
    assert "#ref" in data.title_search
    assert "cli" in data.title_search
    assert "[ ]" not in data.title_search


def test_position_from_source(hydrate):
    data = hydrate("- [ ] a\n- [ ] b\n")
    assert data.position.start.line == 1
    assert data.position.start.offset == 0


def test_extract_item_metadata_direct(settings):
    metadata, title = extract_item_metadata("x !low", settings)
    assert metadata.priority == "low"
    assert title == "x"
