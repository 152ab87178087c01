"""Tests for the token micro-extractors."""

from datetime import datetime

from markban.settings import resolve_settings
from markban.tokens import (
    extract_date_time,
    extract_inline_fields,
    extract_members,
    extract_priority,
    extract_tags,
    extract_time,
)


def test_date_curly(settings):
    [token] = extract_date_time("ship @{2024-03-01}", settings)
    assert token.value == datetime(2024, 3, 1)
    assert token.text == "2024-03-01"
    assert token.span == (5, 18)
    assert not token.is_start
    assert token.time is None


def test_date_wikilink(settings):
    [token] = extract_date_time("ship @[[2024-03-01]]", settings)
    assert token.text == "2024-03-01"
    assert token.span == (5, 20)


def test_date_start(settings):
    [token] = extract_date_time("begin @start{2024-03-01}", settings)
    assert token.is_start
    assert token.value == datetime(2024, 3, 1)


def test_date_with_time(settings):
    [token] = extract_date_time("call @{2024-03-01} @@{10:30}", settings)
    assert token.time.hour == 10
    assert token.time.minute == 30
    assert token.time_text == "10:30"
    assert token.time_span == (19, 28)


def test_date_with_invalid_time_keeps_date(settings):
    [token] = extract_date_time("call @{2024-03-01} @@{later}", settings)
    assert token.value == datetime(2024, 3, 1)
    assert token.time is None
    assert token.time_span is None


def test_date_invalid_is_ignored(settings):
    assert extract_date_time("ship @{2024-3-1}", settings) == []
    assert extract_date_time("ship @{next week}", settings) == []


def test_date_needs_word_boundary(settings):
    assert extract_date_time("me@{2024-03-01}", settings) == []


def test_date_custom_trigger_and_format():
    settings = resolve_settings({"date-trigger": "due", "date-format": "DD/MM/YYYY"})
    [token] = extract_date_time("pay due{01/03/2024}", settings)
    assert token.value == datetime(2024, 3, 1)
    assert extract_date_time("pay @{2024-03-01}", settings) == []


def test_time_standalone(settings):
    token = extract_time("standup @@{09:15}", settings)
    assert token.text == "09:15"
    assert token.span == (8, 17)
    assert (token.value.hour, token.value.minute) == (9, 15)


def test_time_first_valid_wins(settings):
    token = extract_time("@@{nope} @@{8:00} @@{9:00}", settings)
    assert token.text == "8:00"


def test_time_missing(settings):
    assert extract_time("no time here", settings) is None


def test_priority_first_match():
    priority, span = extract_priority("a !high b !low")
    assert priority == "high"
    assert span == (2, 7)


def test_priority_case_insensitive():
    assert extract_priority("!MEDIUM task")[0] == "medium"


def test_priority_needs_whitespace_bounds():
    assert extract_priority("wow!high") == (None, None)
    assert extract_priority("!highest") == (None, None)


def test_tags_in_order_with_duplicates():
    tokens = extract_tags("buy milk #errand #Errand #errand")
    assert [t.tag for t in tokens] == ["#errand", "#Errand", "#errand"]
    assert [t.duplicate for t in tokens] == [False, True, True]


def test_tags_charset():
    tokens = extract_tags("#area/home-office, #under_score!")
    assert [t.tag for t in tokens] == ["#area/home-office", "#under_score"]
    assert tokens[0].span == (0, 17)


def test_tags_skip_numbers_and_anchors():
    assert extract_tags("issue #42 and a#b") == []


def test_members():
    members = extract_members("call @@alice and @@bob.smith")
    assert [m.name for m in members] == ["alice", "bob.smith"]
    assert members[0].span == (5, 12)


def test_inline_fields_bare():
    fields = extract_inline_fields("task owner:: bob due:: 2024-03-01")
    assert [(f.key, f.value) for f in fields] == [("owner", "bob"), ("due", "2024-03-01")]
    assert not fields[0].is_task
    assert fields[1].is_task


def test_inline_fields_span_covers_value():
    text = "task owner:: bob"
    [field] = extract_inline_fields(text)
    assert text[field.start : field.end] == "owner:: bob"


def test_inline_fields_bracketed():
    text = "task [owner:: bob] and (due:: 2024-03-01) end"
    fields = extract_inline_fields(text)
    assert [(f.key, f.value) for f in fields] == [("owner", "bob"), ("due", "2024-03-01")]
    assert text[fields[0].start : fields[0].end] == "[owner:: bob]"


def test_inline_fields_stop_at_line_end():
    fields = extract_inline_fields("owner:: bob\nmore text")
    assert fields[0].value == "bob"


def test_task_fields_only_on_first_line():
    fields = extract_inline_fields("title\ndue:: 2024-03-01\nowner:: bob")
    assert [f.key for f in fields] == ["owner"]
