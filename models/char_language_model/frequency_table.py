"""
Frequency Table

Per-window record of the characters that followed a given context during
training, together with the probability distribution derived from them.

Classes:
    - CharRecord: One observed next-character outcome for a window.
    - FrequencyTable: Ordered collection of CharRecords for one window.

Notes:
    - Records keep the order in which characters were first seen. That order
      is used both to accumulate cumulative probabilities and to scan during
      sampling, so it must never be sorted.
"""

import numpy as np


class CharRecord:
    """
    A single (character, count, p, cp) entry.

    Attributes:
        character (str): The observed character
        count (int): Number of times the character followed the window
        p (float): Probability of the character, set by finalize_probabilities
        cp (float): Cumulative probability up to and including this record
    """

    __slots__ = ("character", "count", "p", "cp")

    def __init__(self, character, count=1):
        self.character = character
        self.count = count
        self.p = 0.0
        self.cp = 0.0

    def __eq__(self, other):
        if not isinstance(other, CharRecord):
            return NotImplemented
        return (self.character, self.count, self.p, self.cp) == (
            other.character, other.count, other.p, other.cp)

    def __repr__(self):
        return f"CharRecord({self.character!r}, count={self.count}, p={self.p}, cp={self.cp})"

    def __str__(self):
        return f"({self.character} {self.count} {self.p} {self.cp})"


class FrequencyTable:
    """
    Ordered, character-unique collection of CharRecords for one window.
    """

    def __init__(self):
        self._records = []
        self._index = {}
        # Cumulative probabilities in record order, rebuilt by finalize_probabilities
        self._cumulative = np.empty(0, dtype=np.float64)

    def record_occurrence(self, character):
        """
        Count one occurrence of `character` after this window.

        Args:
            character (str): The character that followed the window
        """
        position = self._index.get(character)
        if position is None:
            self._index[character] = len(self._records)
            self._records.append(CharRecord(character))
        else:
            self._records[position].count += 1

    def finalize_probabilities(self):
        """
        Convert counts to probabilities and cumulative probabilities.

        Each record gets p = count / total and cp = the running sum of p in
        record order. Values are recomputed from counts on every call.
        """
        counts = np.fromiter((record.count for record in self._records),
                             dtype=np.float64, count=len(self._records))
        total = counts.sum()
        if total <= 0:
            self._cumulative = np.empty(0, dtype=np.float64)
            return

        probabilities = counts / total
        self._cumulative = np.cumsum(probabilities)

        for record, p, cp in zip(self._records, probabilities, self._cumulative):
            record.p = float(p)
            record.cp = float(cp)

    def sample_character(self, draw):
        """
        Pick a character using a uniform draw in [0, 1).

        Returns the character of the first record whose cp is strictly greater
        than `draw`, or the last record's character when rounding leaves the
        final cp just below the draw.

        Args:
            draw (float): A uniform random number in [0, 1)

        Returns:
            str: The sampled character
        """
        if not self._records:
            raise LookupError("Cannot sample from an empty frequency table")

        # side="right" gives the first index whose cp > draw
        position = int(np.searchsorted(self._cumulative, draw, side="right"))
        if position >= len(self._records):
            return self._records[-1].character
        return self._records[position].character

    @property
    def total_count(self):
        return sum(record.count for record in self._records)

    @property
    def records(self):
        return list(self._records)

    def get(self, character):
        """Return the record for `character`, or None if it was never seen."""
        position = self._index.get(character)
        if position is None:
            return None
        return self._records[position]

    def __contains__(self, character):
        return character in self._index

    def __len__(self):
        return len(self._records)

    def __iter__(self):
        return iter(self._records)

    def __str__(self):
        return "(" + " ".join(str(record) for record in self._records) + ")"

    def __repr__(self):
        return f"FrequencyTable({self._records!r})"
