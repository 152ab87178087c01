"""Shared fixtures and helpers for markban tests."""

import pytest

from markban.hydrate import list_item_to_item_data
from markban.mdast import parse_markdown
from markban.models import Item
from markban.settings import resolve_settings

BOARD_MD = (
    "---\n"
    "\n"
    "kanban-plugin: board\n"
    "\n"
    "---\n"
    "\n"
    "## To Do\n"
    "<!-- kanban-lane-id: todo -->\n"
    "\n"
    "- [ ] ship report @{2024-03-01}\n"
    "- [ ] buy milk #errand\n"
    "\n"
    "\n"
    "## Done\n"
    "<!-- kanban-lane-id: done -->\n"
    "\n"
    "**Complete**\n"
    "- [x] write tests\n"
    "\n"
    "\n"
    "***\n"
    "\n"
    "## Archive\n"
    "\n"
    "- [x] old card\n"
    "\n"
    "%% kanban:settings\n"
    "```\n"
    '{"kanban-plugin":"board"}\n'
    "```\n"
    "%%"
)


def _hydrate(line: str, settings: dict | None = None):
    nodes = parse_markdown(line)
    return list_item_to_item_data(line, nodes[0].children[0], resolve_settings(settings))


@pytest.fixture
def board_md():
    """Canonical board document: two lanes, three cards, one archived card."""
    return BOARD_MD


@pytest.fixture
def hydrate():
    """Hydrate the first list item of a markdown snippet."""
    return _hydrate


@pytest.fixture
def make_item():
    """Build an Item from a one-item markdown snippet."""

    def make(line: str, settings: dict | None = None, item_id: str = "item1") -> Item:
        return Item(id=item_id, data=_hydrate(line, settings))

    return make


@pytest.fixture
def settings():
    """Default settings snapshot."""
    return resolve_settings()
