"""Pytest fixtures and MM1 file builders."""

import random
import struct
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import pytest


BUFFER_HEADER_HALVES = 32
PIXEL_HEADER_HALVES = 128


def _pack_halves(halves: List[int]) -> bytes:
    return struct.pack(f'<{len(halves)}H', *halves)


def _put32(halves: List[int], index: int, value: int):
    halves[index] = value & 0xFFFF
    halves[index + 1] = (value >> 16) & 0xFFFF


def buffer_header(det_chan: int = 0,
                  start_pixel: int = 0,
                  pixel_count: int = 1,
                  buffer_number: int = 0,
                  buffer_id: int = 0,
                  mode: int = 1,
                  run_number: int = 0,
                  module_id: int = 0,
                  header_size: int = BUFFER_HEADER_HALVES,
                  overrides: Optional[Dict[int, int]] = None) -> bytes:
    """Encode a buffer header of header_size halves."""
    halves = [0] * header_size
    halves[0] = 0x55AA
    halves[1] = 0xAA55
    halves[2] = header_size
    halves[3] = mode
    halves[4] = run_number
    _put32(halves, 5, buffer_number)
    halves[7] = buffer_id
    halves[8] = pixel_count
    _put32(halves, 9, start_pixel)
    halves[11] = module_id
    halves[12] = det_chan
    for index, value in (overrides or {}).items():
        halves[index] = value
    return _pack_halves(halves)


def pixel_record(pixel_number: int = 0,
                 bins: Sequence[int] = (),
                 header_size: int = PIXEL_HEADER_HALVES,
                 realtime: int = 0,
                 livetime: int = 0,
                 triggers: int = 0,
                 output_events: int = 0,
                 mode: int = 1,
                 block_size: Optional[int] = None,
                 ch_size: Optional[int] = None,
                 overrides: Optional[Dict[int, int]] = None) -> bytes:
    """Encode a pixel record: header_size halves of header plus the bins."""
    ch = len(bins) * 2 if ch_size is None else ch_size
    block = header_size + len(bins) * 2 if block_size is None else block_size

    halves = [0] * header_size
    halves[0] = 0x33CC
    halves[1] = 0xCC33
    halves[2] = header_size
    halves[3] = mode
    _put32(halves, 4, pixel_number)
    _put32(halves, 6, block)
    halves[8] = ch
    _put32(halves, 32, realtime)
    _put32(halves, 34, livetime)
    _put32(halves, 36, triggers)
    _put32(halves, 38, output_events)
    for index, value in (overrides or {}).items():
        halves[index] = value
    return _pack_halves(halves) + struct.pack(f'<{len(bins)}I', *bins)


def build_capture(channels: int,
                  buffers: int,
                  pixels_per_buffer: int,
                  bins: int = 8,
                  seed: int = 0) -> Tuple[bytes, List[Tuple[int, List[int]]]]:
    """
    Synthesise a capture in acquisition order.

    Returns:
        (data, groups) where groups lists (det_chan, pixel numbers) per
        buffer in file order.
    """
    rng = random.Random(seed)
    chunks = []
    groups = []

    for buf in range(buffers):
        for chan in range(channels):
            start = buf * pixels_per_buffer
            numbers = list(range(start, start + pixels_per_buffer))
            chunks.append(buffer_header(
                det_chan=chan,
                start_pixel=start,
                pixel_count=pixels_per_buffer,
                buffer_number=buf,
                buffer_id=buf % 2,
            ))
            for number in numbers:
                chunks.append(pixel_record(
                    pixel_number=number,
                    bins=[rng.randrange(0, 5000) for _ in range(bins)],
                    realtime=rng.randrange(0, 1 << 32),
                    livetime=rng.randrange(0, 1 << 32),
                    triggers=rng.randrange(0, 100000),
                    output_events=rng.randrange(0, 100000),
                ))
            groups.append((chan, numbers))

    return b''.join(chunks), groups


@pytest.fixture
def deterministic_seed() -> int:
    """Fixed seed for reproducible tests."""
    return 0xDEADBEEF


@pytest.fixture
def scenario_a() -> bytes:
    """One buffer, one 64-bin pixel on channel 0."""
    return (buffer_header(pixel_count=1) +
            pixel_record(pixel_number=0, bins=[0] * 64, realtime=1000, livetime=1000))


@pytest.fixture
def scenario_b() -> bytes:
    """Two channels, two buffers each, one pixel per buffer."""
    chunks = []
    for buf in range(2):
        for chan in range(2):
            chunks.append(buffer_header(det_chan=chan, start_pixel=buf,
                                        buffer_number=buf, buffer_id=buf))
            chunks.append(pixel_record(pixel_number=buf, bins=[1, 2, 3, 4]))
    return b''.join(chunks)


@pytest.fixture
def write_capture(tmp_path: Path):
    """Write capture bytes to a temporary file and return its path."""
    def _write(data: bytes, name: str = 'capture_d00.bin') -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path
    return _write
