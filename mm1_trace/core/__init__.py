"""Record validation for mm1-trace."""

from .errors import (
    ErrorCode,
    ERROR_METADATA,
    exit_code_for,
    MM1Error,
    OutOfBounds,
    BadMode,
    BadBufferId,
    ChannelOutOfRange,
    PixelOrderViolation,
    BadPixelTag,
    SizeMismatch,
)
from .sequence import PixelTracker, u32, u32_add
from .report import ChannelStats, TraceSummary

__all__ = [
    # Errors
    'ErrorCode',
    'ERROR_METADATA',
    'exit_code_for',
    'MM1Error',
    'OutOfBounds',
    'BadMode',
    'BadBufferId',
    'ChannelOutOfRange',
    'PixelOrderViolation',
    'BadPixelTag',
    'SizeMismatch',
    # Tracking
    'PixelTracker',
    'u32',
    'u32_add',
    # Report
    'ChannelStats',
    'TraceSummary',
]
