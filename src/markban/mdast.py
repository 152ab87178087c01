"""Positioned block tree built from markdown-it tokens.

markdown-it only reports line ranges (Token.map). This module turns the
top-level token stream into MdNode objects carrying unist-style positions
(1-based line/column plus 0-based offsets) and the content boundaries the
board extractor and item hydrator slice the source with.
"""

from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import dataclass, field

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from markban.models import Point, Position

_LIST_MARKER = re.compile(r"[ \t]*(?:[-*+]|\d{1,9}[.)])(?:[ \t]+|$)")
_CHECKBOX = re.compile(r"\[([^\[\]\n])\][ \t]+(?=\S)")
_ATX_OPEN = re.compile(r"[ \t]{0,3}#{1,6}(?:[ \t]+|$)")
_ATX_CLOSE = re.compile(r"(?:[ \t]+#+)?[ \t]*$")

# markdown-it SyntaxTreeNode type -> MdNode type
_TYPES = {
    "heading": "heading",
    "paragraph": "paragraph",
    "bullet_list": "list",
    "ordered_list": "list",
    "list_item": "list_item",
    "hr": "thematic_break",
    "html_block": "html",
    "fence": "code",
    "code_block": "code",
    "blockquote": "blockquote",
    "table": "table",
}


@dataclass
class MdNode:
    """A block-level node with its source position.

    content_start/content_end bound the node's text content in the source:
    heading text without the #s, list item text without the bullet and
    checkbox.
    """

    type: str
    position: Position
    content_start: int
    content_end: int
    children: list[MdNode] = field(default_factory=list)
    value: str = ""
    depth: int = 0
    check_char: str | None = None
    source: SyntaxTreeNode | None = field(default=None, repr=False)


class _Lines:
    """Line/offset lookup for a source string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.lines = text.split("\n")
        self.starts = []
        offset = 0
        for line in self.lines:
            self.starts.append(offset)
            offset += len(line) + 1

    def line_end(self, index: int) -> int:
        return self.starts[index] + len(self.lines[index])

    def last_content_line(self, start: int, end: int) -> int:
        """Index of the last non-blank line in [start, end), or start."""
        last = end - 1
        while last > start and not self.lines[last].strip():
            last -= 1
        return last

    def point(self, offset: int) -> Point:
        line = max(0, bisect_right(self.starts, offset) - 1)
        return Point(line=line + 1, column=offset - self.starts[line] + 1, offset=offset)


def create_parser() -> MarkdownIt:
    """The CommonMark tokenizer used for boards."""
    return MarkdownIt("commonmark").enable("table").enable("strikethrough")


def parse_markdown(text: str, md: MarkdownIt | None = None) -> list[MdNode]:
    """Parse text into top-level MdNodes."""
    md = md or create_parser()
    root = SyntaxTreeNode(md.parse(text))
    lines = _Lines(text)
    return [_convert(child, lines) for child in root.children if child.map]


def plain_text(node: SyntaxTreeNode | None) -> str:
    """Flatten the visible text of a markdown-it node."""
    if node is None:
        return ""
    parts = []
    for child in node.walk():
        if child.type in ("text", "code_inline"):
            parts.append(child.content)
        elif child.type in ("softbreak", "hardbreak"):
            parts.append("\n")
    return "".join(parts)


def _convert(node: SyntaxTreeNode, lines: _Lines) -> MdNode:
    start_line, end_line = node.map
    last_line = lines.last_content_line(start_line, end_line)
    start = lines.starts[start_line]
    end = lines.line_end(last_line)
    kind = _TYPES.get(node.type, node.type)

    result = MdNode(
        type=kind,
        position=Position(lines.point(start), lines.point(end)),
        content_start=start,
        content_end=end,
        source=node,
    )

    if kind == "heading":
        result.depth = int(node.tag[1:])
        result.content_start, result.content_end = _heading_bounds(node, lines, start_line, last_line)
        result.value = plain_text(node)
    elif kind == "list":
        result.children = [_convert(child, lines) for child in node.children if child.map]
    elif kind == "list_item":
        _fill_list_item(result, node, lines, start_line)
    elif kind == "paragraph":
        result.value = plain_text(node)
    elif kind in ("html", "code"):
        result.value = node.content

    return result


def _heading_bounds(node: SyntaxTreeNode, lines: _Lines, first: int, last: int) -> tuple[int, int]:
    if node.markup.startswith("#"):
        line = lines.lines[first]
        opening = _ATX_OPEN.match(line)
        content_start = lines.starts[first] + (opening.end() if opening else 0)
        closing = _ATX_CLOSE.search(line, opening.end() if opening else 0)
        content_end = lines.starts[first] + (closing.start() if closing else len(line))
        return content_start, max(content_start, content_end)
    # Setext: every line but the underline
    text_last = max(first, last - 1)
    content_start = lines.starts[first] + len(lines.lines[first]) - len(lines.lines[first].lstrip())
    return content_start, lines.line_end(text_last)


def _fill_list_item(result: MdNode, node: SyntaxTreeNode, lines: _Lines, first: int) -> None:
    line = lines.lines[first]
    marker = _LIST_MARKER.match(line)
    content_start = lines.starts[first] + (marker.end() if marker else 0)
    content_end = result.content_end
    while content_end > content_start and lines.text[content_end - 1] in " \t":
        content_end -= 1

    checkbox = _CHECKBOX.match(lines.text, content_start, content_end)
    if checkbox:
        result.check_char = checkbox.group(1)
        content_start = checkbox.end()

    result.content_start = content_start
    result.content_end = max(content_start, content_end)
