"""Deferred deletion of text ranges.

Extractors find tokens by offset in the same original string. Deleting a
token immediately would shift every offset found after it, so ranges are
first marked by overwriting them with a placeholder of the same length,
and removed together in a single pass at the end.
"""

PLACEHOLDER = "\x00"


def mark_for_deletion(text: str, start: int, end: int) -> str:
    """Mark text[start:end] for deletion without changing the length.

    Out-of-range or inverted spans leave text unchanged.
    """
    if start < 0 or end > len(text) or start >= end:
        return text
    return text[:start] + PLACEHOLDER * (end - start) + text[end:]


def execute_deletion(text: str) -> str:
    """Remove every marked character."""
    return text.replace(PLACEHOLDER, "")


def widen_span(text: str, start: int, end: int) -> tuple[int, int]:
    """Widen a span to swallow one adjacent space so no gap is left behind.

    Removing "#tag" from "buy #tag milk" this way leaves "buy milk". Tokens at
    the start of a line take the space after them instead.
    """
    if start > 0 and text[start - 1] in " \t":
        return start - 1, end
    if end < len(text) and text[end] in " \t":
        return start, end + 1
    return start, end


class DeletionEditor:
    """Accumulates spans against one original string and applies them once.

    Spans may overlap. execute() removes them in descending offset order so
    every span stays valid until it is applied.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._spans: list[tuple[int, int]] = []

    def mark(self, start: int, end: int) -> None:
        if 0 <= start < end <= len(self.text):
            self._spans.append((start, end))

    @property
    def marked(self) -> str:
        """The original text with every marked span replaced by placeholders."""
        text = self.text
        for start, end in self._spans:
            text = mark_for_deletion(text, start, end)
        return text

    def execute(self) -> str:
        """Return the text with all marked spans removed."""
        text = self.text
        for start, end in _merge(self._spans)[::-1]:
            text = text[:start] + text[end:]
        return text


def _merge(spans: list[tuple[int, int]]) -> list[tuple[int, int]]:
    merged: list[tuple[int, int]] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged
