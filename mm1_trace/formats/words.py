"""
Frame reader for MM1 word streams.

An MM1 file is a flat sequence of 32-bit little-endian words. Record
fields are addressed in 16-bit halves relative to the record's first
word, and 32-bit fields are stored as two consecutive halves, low first:

    word n:    [ half 2n (low) | half 2n+1 (high) ]

The reader keeps a word cursor that only moves forward. Every field access
is bounds checked; an access past the end raises OutOfBounds with the byte
offset of the record being read.
"""

import numpy as np

from ..core.errors import OutOfBounds


# Bytes per stream word
WORD_BYTES = 4

# 16-bit halves per stream word
HALVES_PER_WORD = 2


class FrameReader:
    """
    Bounds-checked view of an MM1 buffer.

    The views are numpy arrays over the caller's buffer, so nothing is
    copied and the buffer must outlive the reader and any view it hands
    out. A trailing partial word is not addressable but still counts
    towards remaining_bytes.
    """

    def __init__(self, data: bytes):
        self._data = data
        self.size_bytes = len(data)
        self.size_words = self.size_bytes // WORD_BYTES
        self.halves = np.frombuffer(data, dtype='<u2', count=self.size_words * HALVES_PER_WORD)
        self.words = np.frombuffer(data, dtype='<u4', count=self.size_words)
        self.cursor = 0

    @property
    def offset(self) -> int:
        """Byte offset of the cursor."""
        return self.cursor * WORD_BYTES

    @property
    def remaining_bytes(self) -> int:
        return self.size_bytes - self.offset

    @property
    def at_end(self) -> bool:
        return self.cursor >= self.size_words

    def available_halves(self, word_cursor: int) -> int:
        return max(0, (self.size_words - word_cursor) * HALVES_PER_WORD)

    def ensure(self, word_cursor: int, n_halves: int, record: str = 'header'):
        """Raise OutOfBounds unless n_halves are readable at word_cursor."""
        if n_halves > self.available_halves(word_cursor):
            raise OutOfBounds(
                offset=word_cursor * WORD_BYTES,
                record=record,
                context={'need': n_halves, 'have': self.available_halves(word_cursor)},
            )

    def read16(self, word_cursor: int, half_index: int) -> int:
        pos = word_cursor * HALVES_PER_WORD + half_index
        if half_index < 0 or pos >= len(self.halves):
            raise OutOfBounds(offset=word_cursor * WORD_BYTES, context={'half': half_index})
        return int(self.halves[pos])

    def read32(self, word_cursor: int, half_index: int) -> int:
        """
        Read a 32-bit field stored as two halves, low half first.

        The value is returned unsigned; counters and tick fields may
        legitimately exceed 2^31.
        """
        low = self.read16(word_cursor, half_index)
        high = self.read16(word_cursor, half_index + 1)
        return (high << 16) | low

    def tags_match(self, word_cursor: int, tag_lo: int, tag_hi: int) -> bool:
        """Check a record's tag pair without raising when out of range."""
        if self.available_halves(word_cursor) < 2:
            return False
        return (self.read16(word_cursor, 0) == tag_lo and
                self.read16(word_cursor, 1) == tag_hi)

    def view32(self, word_cursor: int, half_index: int, n_words: int,
               record: str = 'pixel') -> np.ndarray:
        """
        Non-owning view of n_words 32-bit values starting at a half offset.

        The half offset must be word aligned.
        """
        start = word_cursor + half_index // HALVES_PER_WORD
        if n_words < 0 or start + n_words > self.size_words:
            raise OutOfBounds(
                offset=word_cursor * WORD_BYTES,
                record=record,
                context={'words': n_words},
            )
        return self.words[start:start + n_words]

    def advance(self, n_halves: int):
        """Move the cursor forward by n_halves // 2 words."""
        step = n_halves // HALVES_PER_WORD
        if step < 0 or self.cursor + step > self.size_words:
            raise OutOfBounds(offset=self.offset, context={'advance': n_halves})
        self.cursor += step
