"""
Trace summary for a decoded MM1 file.

The summary is a structured document containing:
- Source metadata (path, size)
- Buffer and pixel totals
- Per-channel buffer and pixel counts
- Consumed and trailing byte counts
- The structural error that stopped decoding, if any
"""

import json
from dataclasses import dataclass, field, asdict
from typing import Dict, Optional

from .errors import MM1Error


@dataclass
class ChannelStats:
    """Per-channel statistics section."""
    buffers: int = 0
    pixels: int = 0
    realtime_ticks: int = 0
    livetime_ticks: int = 0
    triggers: int = 0
    output_events: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class TraceSummary:
    """
    Summary of one decode run.

    Usage:
        summary = TraceSummary(source_file='scan_d00.bin', size_bytes=n)
        for event in decoder.events():
            if isinstance(event, BufferHeader):
                summary.add_buffer(event)
            elif isinstance(event, PixelRecord):
                summary.add_pixel(event)
        print(summary.to_json())
    """
    source_file: Optional[str] = None
    size_bytes: int = 0
    buffers: int = 0
    pixels: int = 0
    consumed_bytes: int = 0
    trailing_bytes: int = 0
    channels: Dict[int, ChannelStats] = field(default_factory=dict)
    error: Optional[dict] = None

    def channel(self, det_chan: int) -> ChannelStats:
        if det_chan not in self.channels:
            self.channels[det_chan] = ChannelStats()
        return self.channels[det_chan]

    def add_buffer(self, header) -> None:
        self.buffers += 1
        self.consumed_bytes += header.length_bytes
        self.channel(header.det_chan).buffers += 1

    def add_pixel(self, record) -> None:
        self.pixels += 1
        self.consumed_bytes += record.length_bytes

        stats = self.channel(record.det_chan)
        stats.pixels += 1
        stats.realtime_ticks += record.realtime
        stats.livetime_ticks += record.livetime
        stats.triggers += record.triggers
        stats.output_events += record.output_events

    def add_error(self, error: MM1Error) -> None:
        self.error = error.to_dict()

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        return {
            'source_file': self.source_file,
            'size_bytes': self.size_bytes,
            'buffers': self.buffers,
            'pixels': self.pixels,
            'consumed_bytes': self.consumed_bytes,
            'trailing_bytes': self.trailing_bytes,
            'channels': {
                str(chan): stats.to_dict()
                for chan, stats in sorted(self.channels.items())
            },
            'error': self.error,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
