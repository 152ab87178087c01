"""Shared fixtures for CLI tests."""

import pytest


@pytest.fixture
def board_file(tmp_path, board_md):
    """A board document with two lanes, three cards and one archived card."""
    path = tmp_path / "board.md"
    path.write_text(board_md, encoding="utf-8")
    return path


@pytest.fixture
def broken_file(tmp_path):
    """A board document with a list outside any lane."""
    path = tmp_path / "broken.md"
    path.write_text("---\nkanban-plugin: board\n---\n\n- [ ] orphan\n\n## A\n", encoding="utf-8")
    return path


@pytest.fixture
def notes_file(tmp_path):
    """A markdown document that is not a board."""
    path = tmp_path / "notes.md"
    path.write_text("# Notes\n\n- [ ] remember\n", encoding="utf-8")
    return path
