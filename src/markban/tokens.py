"""Micro-extractors for the metadata tokens embedded in card text.

Every extractor takes the text to scan and returns what it found together
with the span each token occupies. None of them modify the text; the
hydrator decides which spans to hide from later extractors and which to
remove from the display title.
"""

import logging
import re
from collections.abc import Mapping
from datetime import datetime
from functools import lru_cache
from typing import Any, NamedTuple

from markban.dates import parse_date, parse_time
from markban.deletion import PLACEHOLDER, execute_deletion
from markban.models import InlineField, Priority

logger = logging.getLogger(__name__)

Span = tuple[int, int]

PRIORITY_PATTERN = re.compile(r"(?<!\S)!(low|medium|high)(?!\S)", re.IGNORECASE)
TAG_PATTERN = re.compile(r"(?<!\S)#([\w/-]+)")
MEMBER_PATTERN = re.compile(r"(?<!\S)@@([\w./-]+)")

_FIELD_KEY = r"[^\s:\[\]()\x00]+"
FIELD_PATTERN = re.compile(rf"(?<!\S)({_FIELD_KEY})::")
BRACKETED_FIELD_PATTERN = re.compile(rf"\[({_FIELD_KEY})::([^\]\n]*)\]|\(({_FIELD_KEY})::([^)\n]*)\)")

# Fields owned by task plugins. They are moved by move-task-metadata
# rather than inline-metadata-position.
TASK_FIELDS = frozenset({"todo", "done", "cancelled", "created", "scheduled", "start", "due", "completion"})


class DateToken(NamedTuple):
    value: datetime
    text: str
    span: Span
    is_start: bool = False
    time: datetime | None = None
    time_text: str | None = None
    time_span: Span | None = None


class TimeToken(NamedTuple):
    value: datetime
    text: str
    span: Span


class TagToken(NamedTuple):
    tag: str
    span: Span
    duplicate: bool = False


class MemberToken(NamedTuple):
    name: str
    span: Span


@lru_cache(maxsize=16)
def _date_pattern(date_trigger: str, time_trigger: str) -> re.Pattern:
    date = re.escape(date_trigger)
    time = re.escape(time_trigger)
    return re.compile(
        rf"(?<!\S)(?P<date>{date}(?P<start>start)?"
        rf"(?:\{{(?P<curly>[^}}\n]+?)\}}|\[\[(?P<link>[^\]\n]+?)\]\]))"
        rf"(?:[ \t]+(?P<time>{time}\{{(?P<clock>[^}}\n]+?)\}}))?"
    )


@lru_cache(maxsize=16)
def _time_pattern(time_trigger: str) -> re.Pattern:
    return re.compile(rf"(?<!\S){re.escape(time_trigger)}\{{(?P<clock>[^}}\n]+?)\}}")


def _triggers(settings: Mapping[str, Any]) -> tuple[str, str]:
    return settings.get("date-trigger") or "@", settings.get("time-trigger") or "@@"


def _time_formats(settings: Mapping[str, Any]) -> tuple[str, ...]:
    fmt = settings.get("time-format")
    return (fmt,) if fmt else ()


def extract_date_time(text: str, settings: Mapping[str, Any]) -> list[DateToken]:
    """Find date tokens (@{...}, @[[...]], @start{...}) and any time attached.

    Dates must parse strictly with date-format; anything else is ordinary
    text and is not returned. An unparsable attached time leaves the date
    valid and the time token in the text.
    """
    date_trigger, time_trigger = _triggers(settings)
    date_format = settings.get("date-format") or "YYYY-MM-DD"
    found = []

    for match in _date_pattern(date_trigger, time_trigger).finditer(text):
        date_text = (match.group("curly") or match.group("link")).strip()
        value = parse_date(date_text, date_format)
        if value is None:
            logger.debug("ignoring unparsable date %r", date_text)
            continue

        clock, clock_text, clock_span = None, None, None
        if match.group("time"):
            candidate = match.group("clock").strip()
            clock = parse_time(candidate, _time_formats(settings))
            if clock is not None:
                clock_text = candidate
                clock_span = match.span("time")

        found.append(
            DateToken(
                value=value,
                text=date_text,
                span=match.span("date"),
                is_start=bool(match.group("start")),
                time=clock,
                time_text=clock_text,
                time_span=clock_span,
            )
        )

    return found


def extract_time(text: str, settings: Mapping[str, Any]) -> TimeToken | None:
    """Find the first valid standalone time token."""
    _, time_trigger = _triggers(settings)
    for match in _time_pattern(time_trigger).finditer(text):
        clock_text = match.group("clock").strip()
        value = parse_time(clock_text, _time_formats(settings))
        if value is not None:
            return TimeToken(value, clock_text, match.span())
    return None


def extract_priority(text: str) -> tuple[Priority | None, Span | None]:
    """Find the first !low, !medium or !high marker."""
    match = PRIORITY_PATTERN.search(text)
    if match is None:
        return None, None
    return match.group(1).lower(), match.span()


def extract_tags(text: str) -> list[TagToken]:
    """Find #tags in order. Repeats of an earlier tag (any case) are duplicates.

    A tag runs over letters, digits, _, - and /; whatever follows is left
    in the text. Purely numeric names such as #42 are not tags.
    """
    tokens = []
    seen: set[str] = set()
    for match in TAG_PATTERN.finditer(text):
        name = match.group(1)
        if name.isdigit():
            continue
        key = name.lower()
        tokens.append(TagToken(f"#{name}", match.span(), duplicate=key in seen))
        seen.add(key)
    return tokens


def extract_members(text: str) -> list[MemberToken]:
    """Find every @@member occurrence."""
    return [MemberToken(m.group(1), m.span()) for m in MEMBER_PATTERN.finditer(text)]


def extract_inline_fields(text: str) -> list[InlineField]:
    """Find key::value fields.

    Bracketed fields ([key:: value] or (key:: value)) end at their bracket.
    Bare fields run to the next bare field on the same line or the end of
    the line. Placeholder characters left by earlier extractors are not part
    of any value. Task fields only count on the first line.
    """
    first_line_end = text.find("\n")
    fields = []

    remaining = text
    for match in BRACKETED_FIELD_PATTERN.finditer(text):
        key = match.group(1) or match.group(3)
        value = match.group(2) if match.group(1) else match.group(4)
        start, end = match.span()
        fields.append(_field(key, value, start, end))
        remaining = remaining[:start] + PLACEHOLDER * (end - start) + remaining[end:]

    matches = list(FIELD_PATTERN.finditer(remaining))
    for i, match in enumerate(matches):
        line_end = remaining.find("\n", match.end())
        end = len(remaining) if line_end == -1 else line_end
        if i + 1 < len(matches) and matches[i + 1].start() < end:
            end = matches[i + 1].start()
        while end > match.end() and remaining[end - 1] in f" \t{PLACEHOLDER}":
            end -= 1
        fields.append(_field(match.group(1), remaining[match.end() : end], match.start(), end))

    fields.sort(key=lambda f: f.start)
    return [f for f in fields if not f.is_task or first_line_end == -1 or f.end <= first_line_end]


def _field(key: str, value: str, start: int, end: int) -> InlineField:
    value = execute_deletion(value).strip()
    return InlineField(key=key, value=value, start=start, end=end, is_task=key in TASK_FIELDS)
