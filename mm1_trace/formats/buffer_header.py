"""
Buffer header for MM1 mapping buffers.

Every mapping buffer opens with a buffer header followed by pixel_count
pixel records. Field positions are 16-bit halves from the header start.

Layout (halves):
    0:     tag0          0x55AA
    1:     tag1          0xAA55
    2:     header_size   Header length in halves
    3:     mode          Mapping mode (1 = full spectrum)
    4:     run_number    Run number
    5-6:   buffer_number Sequential buffer number, low half first
    7:     buffer_id     0 = A, 1 = B
    8:     pixel_count   Pixel records in this buffer
    9-10:  start_pixel   First pixel number, low half first
    11:    module_id     Module number
    12:    det_chan      Detector channel
"""

from dataclasses import dataclass

from .words import FrameReader, WORD_BYTES


# Tag pair opening every buffer header
BUFFER_TAG_LO = 0x55AA
BUFFER_TAG_HI = 0xAA55

# Halves that must be present to decode the fixed fields
BUFFER_HEADER_MIN_HALVES = 13

# Only full-spectrum mapping (MM1) buffers are traced
MAPPING_MODE_MM1 = 1

BUFFER_IDS = ('A', 'B')


@dataclass
class BufferHeader:
    """Decoded buffer header."""

    offset: int            # Byte offset of the header in the file
    header_size: int       # Header length in halves
    mode: int
    run_number: int
    buffer_number: int
    buffer_id: int
    pixel_count: int
    start_pixel: int
    module_id: int
    det_chan: int

    @property
    def id_char(self) -> str:
        """Buffer id rendered as 'A' or 'B'."""
        if 0 <= self.buffer_id < len(BUFFER_IDS):
            return BUFFER_IDS[self.buffer_id]
        return '?'

    @property
    def length_bytes(self) -> int:
        return (self.header_size // 2) * WORD_BYTES

    @property
    def end_offset(self) -> int:
        """Offset of the last byte of the header (inclusive)."""
        return self.offset + self.length_bytes - 1

    @classmethod
    def probe(cls, reader: FrameReader) -> bool:
        """Check whether a buffer header starts at the cursor."""
        return reader.tags_match(reader.cursor, BUFFER_TAG_LO, BUFFER_TAG_HI)

    @classmethod
    def decode(cls, reader: FrameReader) -> 'BufferHeader':
        """
        Decode the header fields at the cursor.

        The tags are assumed to have been probed. Does not move the cursor.

        Raises:
            OutOfBounds: If fewer than 13 halves remain.
        """
        at = reader.cursor
        reader.ensure(at, BUFFER_HEADER_MIN_HALVES, record='header')

        return cls(
            offset=at * WORD_BYTES,
            header_size=reader.read16(at, 2),
            mode=reader.read16(at, 3),
            run_number=reader.read16(at, 4),
            buffer_number=reader.read32(at, 5),
            buffer_id=reader.read16(at, 7),
            pixel_count=reader.read16(at, 8),
            start_pixel=reader.read32(at, 9),
            module_id=reader.read16(at, 11),
            det_chan=reader.read16(at, 12),
        )
