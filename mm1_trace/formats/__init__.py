"""MM1 frame layouts and readers."""

from .words import FrameReader, WORD_BYTES
from .buffer_header import BufferHeader, BUFFER_TAG_LO, BUFFER_TAG_HI
from .pixel_record import PixelRecord, PIXEL_TAG_LO, PIXEL_TAG_HI, MAPPING_TICK_SECONDS
from .reader import MM1Reader, MM1File

__all__ = [
    'FrameReader',
    'WORD_BYTES',
    'BufferHeader',
    'BUFFER_TAG_LO',
    'BUFFER_TAG_HI',
    'PixelRecord',
    'PIXEL_TAG_LO',
    'PIXEL_TAG_HI',
    'MAPPING_TICK_SECONDS',
    'MM1Reader',
    'MM1File',
]
