"""
Exceptions raised by the character-level language model.
"""


class LanguageModelError(Exception):
    """Base class for all language model errors."""


class InsufficientCorpusError(LanguageModelError):
    """Raised when the corpus is too short to form the first window."""

    def __init__(self, window_length, available):
        self.window_length = window_length
        self.available = available
        super().__init__(
            f"Corpus has {available} character(s), at least {window_length} required to form a window")


class StreamReadError(LanguageModelError):
    """Raised when the corpus source cannot be opened or read."""
