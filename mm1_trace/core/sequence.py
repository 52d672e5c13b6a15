"""
Per-channel pixel tracking with u32 wrap handling.

Pixel numbers are 32-bit counters in the file. Python integers don't wrap,
so the expected value is masked to u32 after every increment.

This module provides:
- u32(): Constrain value to u32 range
- u32_add(): Add with wrap
- PixelTracker: Expected next pixel number per detector channel
"""

from dataclasses import dataclass, field
from typing import List


U32_MAX = 0xFFFFFFFF


def u32(val: int) -> int:
    """
    Constrain value to u32 range [0, 2^32-1].

    Examples:
        u32(0x100000000) = 0
        u32(-1) = 0xFFFFFFFF
    """
    return val & U32_MAX


def u32_add(a: int, b: int) -> int:
    """Add two values in u32 space with wrap."""
    return (a + b) & U32_MAX


@dataclass
class PixelTracker:
    """
    Track the next expected pixel number for each detector channel.

    Pixels on a channel must be numbered 0, 1, 2, ... across all buffers
    of that channel. Channels are independent; no interleaving pattern
    between channels is enforced.

    Usage:
        tracker = PixelTracker(max_channels=8)
        if not tracker.matches(header.det_chan, header.start_pixel):
            ...
        tracker.advance(pixel.det_chan)
    """

    max_channels: int = 8
    expected: List[int] = field(default_factory=list)

    def __post_init__(self):
        if not self.expected:
            self.expected = [0] * self.max_channels

    def expected_pixel(self, det_chan: int) -> int:
        return self.expected[det_chan]

    def matches(self, det_chan: int, pixel: int) -> bool:
        """Check a pixel number against the channel's expected value."""
        return u32(pixel) == self.expected[det_chan]

    def advance(self, det_chan: int) -> int:
        """Count one validated pixel on a channel; returns the new expected."""
        self.expected[det_chan] = u32_add(self.expected[det_chan], 1)
        return self.expected[det_chan]
