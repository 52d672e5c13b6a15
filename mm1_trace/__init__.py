"""
mm1-trace: structural tracer for MM1 mapping-mode capture files.

Walks the buffer headers and pixel records of a capture, checks every
structural invariant and prints a trace of each record.
"""

__version__ = "1.0.0"

from .formats import FrameReader, BufferHeader, PixelRecord, MM1Reader, MM1File
from .core.decoder import MM1Decoder, DecodeResult, TrailingBytes, MAX_CHANNELS
from .core.errors import MM1Error, ErrorCode
from .plot import plot_spectrum

__all__ = [
    'FrameReader',
    'BufferHeader',
    'PixelRecord',
    'MM1Reader',
    'MM1File',
    'MM1Decoder',
    'DecodeResult',
    'TrailingBytes',
    'MAX_CHANNELS',
    'MM1Error',
    'ErrorCode',
    'plot_spectrum',
]
