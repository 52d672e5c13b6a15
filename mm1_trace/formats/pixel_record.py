"""
Pixel record for MM1 mapping buffers.

A pixel record holds the statistics and spectrum acquired at one pixel on
one detector channel. Field positions are 16-bit halves from the record
start; the spectrum payload follows the header as 32-bit bin counts.

Layout (halves):
    0:      tag0           0x33CC
    1:      tag1           0xCC33
    2:      header_size    Pixel header length in halves
    3:      mode           Mapping mode
    4-5:    pixel_number   Pixel number, low half first
    6-7:    block_size     Total record length in halves, low half first
    8:      ch_size        Channel data length in halves
    32-33:  realtime       Realtime in ticks
    34-35:  livetime       Trigger livetime in ticks
    36-37:  triggers       Input trigger count
    38-39:  output_events  Output event count
    header_size..block_size: spectrum, ch_size / 2 bins
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .words import FrameReader, WORD_BYTES


# Tag pair opening every pixel record
PIXEL_TAG_LO = 0x33CC
PIXEL_TAG_HI = 0xCC33

# Halves that must be present to decode the header statistics
PIXEL_HEADER_MIN_HALVES = 40

# Seconds per realtime/livetime tick
MAPPING_TICK_SECONDS = 3.2e-7


@dataclass
class PixelRecord:
    """Decoded pixel record."""

    offset: int            # Byte offset of the record in the file
    header_size: int       # Pixel header length in halves
    mode: int
    pixel_number: int
    block_size: int        # Record length in halves
    ch_size: int           # Spectrum length in halves
    realtime: int          # Ticks
    livetime: int          # Ticks
    triggers: int
    output_events: int
    det_chan: int = 0      # Inherited from the owning buffer header
    spectrum: Optional[np.ndarray] = field(default=None, repr=False, compare=False)

    @property
    def length_bytes(self) -> int:
        return (self.block_size // 2) * WORD_BYTES

    @property
    def end_offset(self) -> int:
        """Offset of the last byte of the record (inclusive)."""
        return self.offset + self.length_bytes - 1

    @property
    def bins(self) -> int:
        """Number of 32-bit bins in the spectrum payload."""
        return self.ch_size // 2

    def realtime_seconds(self, tick_seconds: float = MAPPING_TICK_SECONDS) -> float:
        return self.realtime * tick_seconds

    def livetime_seconds(self, tick_seconds: float = MAPPING_TICK_SECONDS) -> float:
        return self.livetime * tick_seconds

    @classmethod
    def probe(cls, reader: FrameReader) -> bool:
        """Check whether a pixel record starts at the cursor."""
        return reader.tags_match(reader.cursor, PIXEL_TAG_LO, PIXEL_TAG_HI)

    @classmethod
    def decode(cls, reader: FrameReader, det_chan: int = 0) -> 'PixelRecord':
        """
        Decode the pixel header fields at the cursor.

        The spectrum is not attached; see attach_spectrum(). Does not move
        the cursor.

        Raises:
            OutOfBounds: If fewer than 40 halves remain.
        """
        at = reader.cursor
        reader.ensure(at, PIXEL_HEADER_MIN_HALVES, record='pixel')

        return cls(
            offset=at * WORD_BYTES,
            header_size=reader.read16(at, 2),
            mode=reader.read16(at, 3),
            pixel_number=reader.read32(at, 4),
            block_size=reader.read32(at, 6),
            ch_size=reader.read16(at, 8),
            realtime=reader.read32(at, 32),
            livetime=reader.read32(at, 34),
            triggers=reader.read32(at, 36),
            output_events=reader.read32(at, 38),
            det_chan=det_chan,
        )

    def attach_spectrum(self, reader: FrameReader):
        """Attach a view of the spectrum payload from the reader's buffer."""
        at = self.offset // WORD_BYTES
        self.spectrum = reader.view32(at, self.header_size, self.bins)
