"""Data models for markban boards.

All models are frozen; operations build new trees with dataclasses.replace
and reuse untouched subtrees.
"""

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Literal

Priority = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class Point:
    """A location in the source document. line and column are 1-based."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True)
class Position:
    """Start and end of a node in the source document."""

    start: Point
    end: Point


@dataclass(frozen=True)
class InlineField:
    """A key::value field found in card text."""

    key: str
    value: str
    start: int = 0
    end: int = 0
    is_task: bool = False


@dataclass(frozen=True)
class ItemMetadata:
    """Metadata extracted from a card's text."""

    date: dt.datetime | None = None
    date_str: str | None = None
    start_date: dt.datetime | None = None
    start_date_str: str | None = None
    time: dt.time | None = None
    time_str: str | None = None
    tags: tuple[str, ...] = ()
    priority: Priority | None = None
    assigned_members: tuple[str, ...] = ()
    inline_metadata: tuple[InlineField, ...] = ()
    block_id: str | None = None


@dataclass(frozen=True)
class ItemData:
    """The hydrated content of a card.

    title_raw is what gets written back to disk; title is display only.
    """

    title_raw: str
    title: str
    title_search: str = ""
    checked: bool = False
    check_char: str = " "
    block_id: str | None = None
    metadata: ItemMetadata = field(default_factory=ItemMetadata)
    position: Position | None = None
    force_edit: bool = False


@dataclass(frozen=True)
class Item:
    """A card on the board."""

    id: str
    data: ItemData


@dataclass(frozen=True)
class LaneData:
    """Lane attributes parsed from the heading and its marker comments."""

    title: str
    max_items: int = 0
    should_mark_items_complete: bool = False
    background_color: str | None = None
    sorted: str | None = None


@dataclass(frozen=True)
class Lane:
    """A column of cards."""

    id: str
    data: LaneData
    children: tuple[Item, ...] = ()


@dataclass(frozen=True)
class ErrorReport:
    """A structural parse failure recorded on the board."""

    description: str
    stack: str = ""


@dataclass(frozen=True)
class BoardData:
    """Board-wide data. settings holds only the board-local settings."""

    settings: dict[str, Any] = field(default_factory=dict)
    frontmatter: dict[str, Any] = field(default_factory=dict)
    archive: tuple[Item, ...] = ()
    errors: tuple[ErrorReport, ...] = ()
    is_searching: bool = False


@dataclass(frozen=True)
class Board:
    """A whole board. id is the document path."""

    id: str
    children: tuple[Lane, ...] = ()
    data: BoardData = field(default_factory=BoardData)

    @property
    def is_read_only(self) -> bool:
        """True while parse errors are recorded; saving is suppressed."""
        return bool(self.data.errors)
