"""Tests for terminal colors."""

from markban.palette import TAG_COLORS, color_for_tag, lane_color


def test_color_for_tag_deterministic():
    assert color_for_tag("#work") == color_for_tag("#work")
    assert color_for_tag("#work") in TAG_COLORS


def test_color_for_tag_ignores_case_and_hash():
    assert color_for_tag("#Work") == color_for_tag("work")


def test_lane_color():
    assert lane_color("red") == "red"
    assert lane_color("#336699") == "#336699"
    assert lane_color("rgba(10, 20, 30, 0.5)") is None
    assert lane_color(None) is None
    assert lane_color("") is None
