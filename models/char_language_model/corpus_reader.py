"""
Corpus Readers

Sequential character sources consumed by LanguageModel.train. Any object
exposing `has_more()` and `read_next_character()` can be used as a corpus.
"""

import os

from models.char_language_model.exceptions import StreamReadError


class StringCharacterReader:
    """Reads characters one at a time from an in-memory string."""

    def __init__(self, text):
        self._text = text
        self._position = 0

    def has_more(self):
        return self._position < len(self._text)

    def read_next_character(self):
        if not self.has_more():
            raise StreamReadError(
                f"Attempted to read past the end of the corpus at position {self._position}")
        character = self._text[self._position]
        self._position += 1
        return character


class FileCharacterReader:
    """
    Reads characters one at a time from a text file.

    The file is opened on construction and closed when the reader is closed
    or used as a context manager. A single character of lookahead is kept so
    that `has_more()` can answer without consuming input.

    Args:
        path (str): Path to the corpus file
        encoding (str): Text encoding of the file (default: utf-8)
    """

    def __init__(self, path, encoding="utf-8"):
        self.path = os.fspath(path)
        self.encoding = encoding
        try:
            self._handle = open(self.path, "r", encoding=encoding, newline="")
        except OSError as e:
            raise StreamReadError(f"Cannot open corpus file {self.path}: {e}") from e
        self._lookahead = None
        self._exhausted = False

    def _fill(self):
        if self._lookahead is not None or self._exhausted:
            return
        if self._handle is None:
            raise StreamReadError(f"Corpus file {self.path} is closed")
        try:
            character = self._handle.read(1)
        except (OSError, UnicodeDecodeError) as e:
            raise StreamReadError(f"Error reading corpus file {self.path}: {e}") from e
        if character == "":
            self._exhausted = True
        else:
            self._lookahead = character

    def has_more(self):
        self._fill()
        return self._lookahead is not None

    def read_next_character(self):
        self._fill()
        if self._lookahead is None:
            raise StreamReadError(
                f"Attempted to read past the end of corpus file {self.path}")
        character, self._lookahead = self._lookahead, None
        return character

    def close(self):
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False
