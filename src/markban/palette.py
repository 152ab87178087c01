"""Colors for tags, priorities and lanes in terminal output."""

import hashlib

from rich.color import Color, ColorParseError

TAG_COLORS: list[str] = [
    "#cc0000",  # red
    "#2e8b57",  # sea green
    "#dd6600",  # orange
    "#ccaa00",  # dark yellow
    "#7b68ee",  # medium slate blue
    "#2266cc",  # blue
    "#cc6699",  # pink
    "#886644",  # brown
    "#668800",  # olive green
    "#4499cc",  # sky blue
    "#aa66cc",  # medium purple
    "#448888",  # dark cyan
    "#22aa44",  # green
    "#cc8800",  # amber
]

PRIORITY_COLORS: dict[str, str] = {
    "high": "#ee2222",
    "medium": "#dd6600",
    "low": "#4499cc",
}


def color_for_tag(tag: str) -> str:
    """Deterministic hex color for a tag, ignoring case and the leading #."""
    h = hashlib.md5(tag.lstrip("#").lower().encode()).hexdigest()
    index = sum(int(h[i : i + 2], 16) for i in range(0, 32, 2))
    return TAG_COLORS[index % len(TAG_COLORS)]


def lane_color(value: str | None) -> str | None:
    """Return value if the terminal can show it as a color, else None.

    Lane colors are free text in the document (often CSS such as
    "rgba(...)"), so anything rich cannot parse is ignored.
    """
    if not value:
        return None
    try:
        Color.parse(value)
    except ColorParseError:
        return None
    return value
