"""
Error codes for mm1-trace.

Structured error codes for machine-parseable diagnostics.

Format: E{category}{number}
- E1xxx: Structural errors (fatal, decoding stops)
- E3xxx: Configuration errors
- E4xxx: Input/usage errors
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Structured error codes."""

    # E1xxx: Structural errors
    E1001_OUT_OF_BOUNDS = "E1001"
    E1002_BAD_MODE = "E1002"
    E1003_BAD_BUFFER_ID = "E1003"
    E1004_CHANNEL_OUT_OF_RANGE = "E1004"
    E1005_PIXEL_ORDER = "E1005"
    E1006_BAD_PIXEL_TAG = "E1006"
    E1007_SIZE_MISMATCH = "E1007"

    # E3xxx: Configuration errors
    E3001_INVALID_CONFIG = "E3001"

    # E4xxx: Input/usage errors
    E4001_FILE_READ_FAILED = "E4001"
    E4002_USAGE = "E4002"


# Error code metadata
ERROR_METADATA = {
    ErrorCode.E1001_OUT_OF_BOUNDS: {
        'severity': 'error',
        'message': 'record extends past the end of the file',
        'exit_code': 2,
    },
    ErrorCode.E1002_BAD_MODE: {
        'severity': 'error',
        'message': 'bad mode',
        'exit_code': 2,
    },
    ErrorCode.E1003_BAD_BUFFER_ID: {
        'severity': 'error',
        'message': 'bad buffer id',
        'exit_code': 2,
    },
    ErrorCode.E1004_CHANNEL_OUT_OF_RANGE: {
        'severity': 'error',
        'message': 'detChan larger than max channels',
        'exit_code': 2,
    },
    ErrorCode.E1005_PIXEL_ORDER: {
        'severity': 'error',
        'message': 'bad pixel',
        'exit_code': 2,
    },
    ErrorCode.E1006_BAD_PIXEL_TAG: {
        'severity': 'error',
        'message': 'bad tags',
        'exit_code': 2,
    },
    ErrorCode.E1007_SIZE_MISMATCH: {
        'severity': 'error',
        'message': 'size mismatch',
        'exit_code': 2,
    },
    ErrorCode.E3001_INVALID_CONFIG: {
        'severity': 'error',
        'message': 'invalid configuration',
        'exit_code': 1,
    },
    ErrorCode.E4001_FILE_READ_FAILED: {
        'severity': 'error',
        'message': 'file read failed',
        'exit_code': 1,
    },
    ErrorCode.E4002_USAGE: {
        'severity': 'error',
        'message': 'invalid usage',
        'exit_code': 1,
    },
}


def exit_code_for(code: ErrorCode) -> int:
    """Process exit status for an error code."""
    return ERROR_METADATA[code]['exit_code']


class MM1Error(Exception):
    """
    Structural error found while decoding an MM1 file.

    Every structural error is fatal: the decode loop stops at the first
    one and the offending record's byte offset is reported.

    Example:
        raise PixelOrderViolation(
            offset=0x400, record='pixel',
            context={'det_chan': 0, 'expected': 1, 'actual': 2},
        )
    """

    code = ErrorCode.E1001_OUT_OF_BOUNDS

    def __init__(self, offset: int, record: str = 'header',
                 context: Optional[dict] = None):
        self.offset = offset
        self.record = record
        self.context = context or {}
        super().__init__(self.message)

    @property
    def severity(self) -> str:
        return ERROR_METADATA.get(self.code, {}).get('severity', 'error')

    @property
    def exit_code(self) -> int:
        return exit_code_for(self.code)

    @property
    def message(self) -> str:
        base_msg = ERROR_METADATA.get(self.code, {}).get('message', 'unknown error')
        details = ' '.join(f"{k}:{v}" for k, v in self.context.items())
        if details:
            base_msg = f"{base_msg}: {details}"
        return f"{base_msg}, XMAP {self.record} @ 0x{self.offset:08x}"

    def to_dict(self) -> dict:
        return {
            'code': self.code.value,
            'kind': type(self).__name__,
            'severity': self.severity,
            'message': self.message,
            'offset': self.offset,
            'record': self.record,
            'context': self.context,
        }


class OutOfBounds(MM1Error):
    code = ErrorCode.E1001_OUT_OF_BOUNDS


class BadMode(MM1Error):
    code = ErrorCode.E1002_BAD_MODE


class BadBufferId(MM1Error):
    code = ErrorCode.E1003_BAD_BUFFER_ID


class ChannelOutOfRange(MM1Error):
    code = ErrorCode.E1004_CHANNEL_OUT_OF_RANGE


class PixelOrderViolation(MM1Error):
    code = ErrorCode.E1005_PIXEL_ORDER


class BadPixelTag(MM1Error):
    code = ErrorCode.E1006_BAD_PIXEL_TAG


class SizeMismatch(MM1Error):
    code = ErrorCode.E1007_SIZE_MISMATCH
