"""Exceptions raised by markban."""


class MarkbanError(Exception):
    """Base class for markban errors."""


class BoardParseError(MarkbanError):
    """The document could not be turned into a board.

    Raised inside whole-document parsing and captured into the board's
    error list by md_to_board.
    """


class BoardNotSavableError(MarkbanError):
    """The board must not be written back to disk."""
