"""
MM1 decode loop and record validation.

A capture is a concatenation of groups:

    BufferHeader, PixelRecord x pixel_count, BufferHeader, ...

The decoder alternates one buffer header with its pixel records until the
cursor no longer sits on a buffer header tag. Whatever is left is reported
as trailing bytes, which is informational and not an error.

Every structural violation is fatal. The decoder raises the matching
MM1Error subclass with the byte offset of the offending record and does
not try to resynchronise.

With two channels and N pixels per buffer the usual order is:

    ch 0, buf 0, pix [0, N-1]
    ch 1, buf 0, pix [0, N-1]
    ch 0, buf 1, pix [N, 2N-1]
    ch 1, buf 1, pix [N, 2N-1]

Only per-channel pixel numbering is enforced, not this interleaving.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from .errors import (
    BadBufferId,
    BadMode,
    BadPixelTag,
    ChannelOutOfRange,
    PixelOrderViolation,
    SizeMismatch,
)
from .report import TraceSummary
from .sequence import PixelTracker
from ..formats.buffer_header import (
    BufferHeader,
    BUFFER_HEADER_MIN_HALVES,
    MAPPING_MODE_MM1,
)
from ..formats.pixel_record import PixelRecord
from ..formats.words import FrameReader


logger = logging.getLogger(__name__)


# Detector channels per capture
MAX_CHANNELS = 8


@dataclass
class TrailingBytes:
    """Bytes left after the last buffer header group."""
    offset: int
    remaining: int


Event = Union[BufferHeader, PixelRecord, TrailingBytes]


@dataclass
class DecodeResult:
    """All events of a completed decode."""
    buffers: List[BufferHeader] = field(default_factory=list)
    pixels: List[PixelRecord] = field(default_factory=list)
    trailing: Optional[TrailingBytes] = None
    summary: TraceSummary = field(default_factory=TraceSummary)


class MM1Decoder:
    """
    Forward-only decoder over an in-memory MM1 buffer.

    The per-channel pixel counters belong to the decoder instance, so two
    decoders never share state. The input buffer must outlive the decoder
    and every spectrum view it yields.

    Usage:
        decoder = MM1Decoder(data)
        for event in decoder.events():
            if isinstance(event, PixelRecord):
                plot(event.spectrum)
    """

    def __init__(self, data: bytes, max_channels: int = MAX_CHANNELS,
                 strict_pixel_mode: bool = False):
        self.reader = FrameReader(data)
        self.max_channels = max_channels
        self.strict_pixel_mode = strict_pixel_mode
        self.tracker = PixelTracker(max_channels=max_channels)

    def parse_buffer_header(self):
        """
        Parse the buffer header at the cursor.

        Returns:
            BufferHeader, or None when the cursor is not on a buffer tag
            (end of stream).
        """
        reader = self.reader

        if not BufferHeader.probe(reader):
            return None

        header = BufferHeader.decode(reader)
        offset = header.offset

        if header.mode != MAPPING_MODE_MM1:
            raise BadMode(offset=offset, context={'mode': header.mode})

        if not 0 <= header.buffer_id <= 1:
            raise BadBufferId(offset=offset, context={'id': header.buffer_id})

        if header.det_chan >= self.max_channels:
            raise ChannelOutOfRange(offset=offset, context={'detChan': header.det_chan})

        if not self.tracker.matches(header.det_chan, header.start_pixel):
            raise PixelOrderViolation(
                offset=offset,
                context={
                    'start': header.start_pixel,
                    'expected': self.tracker.expected_pixel(header.det_chan),
                },
            )

        # A header shorter than its own fields would never move the cursor
        if header.header_size < BUFFER_HEADER_MIN_HALVES:
            raise SizeMismatch(offset=offset, context={'header': header.header_size})

        reader.ensure(reader.cursor, header.header_size, record='header')
        reader.advance(header.header_size)

        logger.debug(
            f"buffer @ 0x{offset:08x}: num={header.buffer_number} id={header.id_char} "
            f"detChan={header.det_chan} pixels={header.pixel_count} start={header.start_pixel}"
        )
        return header

    def parse_pixel_record(self, header: BufferHeader) -> PixelRecord:
        """Parse one pixel record belonging to header."""
        reader = self.reader
        offset = reader.offset

        if not PixelRecord.probe(reader):
            # Report truncation rather than a tag mismatch when the tags
            # themselves are missing.
            reader.ensure(reader.cursor, 2, record='pixel')
            raise BadPixelTag(
                offset=offset,
                record='pixel',
                context={
                    'tag0': f"0x{reader.read16(reader.cursor, 0):04x}",
                    'tag1': f"0x{reader.read16(reader.cursor, 1):04x}",
                },
            )

        record = PixelRecord.decode(reader, det_chan=header.det_chan)

        if header.mode != MAPPING_MODE_MM1:
            raise BadMode(offset=offset, record='pixel', context={'mode': header.mode})

        if self.strict_pixel_mode and record.mode != MAPPING_MODE_MM1:
            raise BadMode(offset=offset, record='pixel', context={'mode': record.mode})

        if not self.tracker.matches(header.det_chan, record.pixel_number):
            raise PixelOrderViolation(
                offset=offset,
                record='pixel',
                context={
                    'pixel': record.pixel_number,
                    'expected': self.tracker.expected_pixel(header.det_chan),
                },
            )

        if record.block_size - record.header_size != record.ch_size:
            raise SizeMismatch(
                offset=offset,
                record='pixel',
                context={
                    'header': record.header_size,
                    'total': record.block_size,
                    'ch0': record.ch_size,
                },
            )

        # A zero-length block would never move the cursor
        if record.block_size // 2 == 0:
            raise SizeMismatch(offset=offset, record='pixel', context={'total': record.block_size})

        reader.ensure(reader.cursor, record.block_size, record='pixel')
        record.attach_spectrum(reader)

        self.tracker.advance(header.det_chan)
        reader.advance(record.block_size)

        logger.debug(
            f"pixel @ 0x{offset:08x}: num={record.pixel_number} detChan={record.det_chan} "
            f"size={record.block_size} chsize={record.ch_size}"
        )
        return record

    def events(self) -> Iterator[Event]:
        """
        Run the decode loop.

        Yields:
            BufferHeader and PixelRecord events in file order, then one
            TrailingBytes event.

        Raises:
            MM1Error: On the first structural violation.
        """
        buffers = 0
        pixels = 0

        while True:
            header = self.parse_buffer_header()
            if header is None:
                break

            buffers += 1
            yield header

            for _ in range(header.pixel_count):
                record = self.parse_pixel_record(header)
                pixels += 1
                yield record

        trailing = TrailingBytes(offset=self.reader.offset, remaining=self.reader.remaining_bytes)
        logger.info(
            f"decoded {buffers} buffers, {pixels} pixels, "
            f"{trailing.remaining} bytes remaining @ 0x{trailing.offset:08x}"
        )
        yield trailing

    def decode(self) -> DecodeResult:
        """Decode the whole buffer and collect the events."""
        result = DecodeResult()
        result.summary.size_bytes = self.reader.size_bytes

        for event in self.events():
            if isinstance(event, BufferHeader):
                result.buffers.append(event)
                result.summary.add_buffer(event)
            elif isinstance(event, PixelRecord):
                result.pixels.append(event)
                result.summary.add_pixel(event)
            else:
                result.trailing = event
                result.summary.trailing_bytes = event.remaining

        return result
