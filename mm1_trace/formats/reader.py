"""
MM1Reader - High-level interface for reading MM1 capture files.

MM1Reader handles:
- Loading the whole capture into memory
- Format probing on the first buffer header
- Handing a FrameReader to the decoder

MM1 files have no outer header or footer; the first word must already be
a buffer header tag for the file to hold any records.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from .buffer_header import BUFFER_TAG_LO, BUFFER_TAG_HI
from .words import FrameReader, WORD_BYTES


logger = logging.getLogger(__name__)


@dataclass
class MM1File:
    """
    A capture file loaded into memory.

    Attributes:
        path: Path to the capture file
        data: File contents
    """
    path: Path
    data: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.data)

    @property
    def size_words(self) -> int:
        return len(self.data) // WORD_BYTES

    def frames(self) -> FrameReader:
        """Fresh frame reader positioned at the start of the file."""
        return FrameReader(self.data)


class MM1Reader:
    """
    High-level interface for reading MM1 capture files.

    Usage:
        mm1_file = MM1Reader.open(path)
        for event in MM1Reader.decode(mm1_file):
            process(event)
    """

    @classmethod
    def open(cls, path: Path) -> MM1File:
        """
        Load a capture file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            OSError: If the file cannot be read
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"MM1 file not found: {path}")

        data = path.read_bytes()
        logger.info(f"Loaded {path}: {len(data)} bytes, {len(data) // WORD_BYTES} words")

        return MM1File(path=path, data=data)

    @classmethod
    def probe(cls, path: Path) -> bool:
        """Check whether a file starts with a buffer header tag."""
        path = Path(path)
        try:
            with open(path, 'rb') as f:
                first = f.read(WORD_BYTES)
        except OSError:
            return False

        if len(first) < WORD_BYTES:
            return False

        return FrameReader(first).tags_match(0, BUFFER_TAG_LO, BUFFER_TAG_HI)

    @classmethod
    def decode(cls, mm1_file: MM1File, max_channels: Optional[int] = None,
               strict_pixel_mode: bool = False) -> Iterator:
        """
        Decode all records of a loaded file.

        Yields:
            BufferHeader, PixelRecord and a final TrailingBytes event
        """
        from ..core.decoder import MM1Decoder, MAX_CHANNELS

        decoder = MM1Decoder(
            mm1_file.data,
            max_channels=max_channels or MAX_CHANNELS,
            strict_pixel_mode=strict_pixel_mode,
        )
        yield from decoder.events()
