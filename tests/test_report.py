"""
Tests for the trace summary and error code metadata.

These tests verify:
1. Per-channel totals and consumed bytes
2. The stopping error is recorded
3. Exit codes come from the error code table
"""

import json

import pytest

from mm1_trace.core.decoder import DecodeResult, MM1Decoder, TrailingBytes
from mm1_trace.core.errors import (
    ERROR_METADATA,
    BadMode,
    ErrorCode,
    MM1Error,
    exit_code_for,
)
from mm1_trace.core.report import TraceSummary

from conftest import buffer_header, pixel_record


class TestTraceSummary:
    """Test summary accumulation."""

    def test_scenario_b_totals(self, scenario_b):
        summary = MM1Decoder(scenario_b).decode().summary

        assert summary.ok
        assert summary.buffers == 4
        assert summary.pixels == 4
        assert summary.consumed_bytes == len(scenario_b) == 4 * (64 + 272)
        assert summary.trailing_bytes == 0
        assert sorted(summary.channels) == [0, 1]
        assert summary.channels[1].buffers == 2
        assert summary.channels[1].pixels == 2

    def test_pixel_counters_accumulate(self):
        data = (buffer_header(pixel_count=2) +
                pixel_record(pixel_number=0, realtime=10, livetime=8, triggers=5, output_events=4) +
                pixel_record(pixel_number=1, realtime=20, livetime=16, triggers=7, output_events=6))
        stats = MM1Decoder(data).decode().summary.channels[0]

        assert stats.realtime_ticks == 30
        assert stats.livetime_ticks == 24
        assert stats.triggers == 12
        assert stats.output_events == 10

    def test_trailing_bytes_recorded(self, scenario_a):
        summary = MM1Decoder(scenario_a + b'\xff' * 12).decode().summary
        assert summary.trailing_bytes == 12
        assert summary.consumed_bytes == len(scenario_a)

    def test_empty_result(self):
        result = DecodeResult()
        assert result.trailing is None
        assert result.summary.ok

    def test_empty_capture(self):
        result = MM1Decoder(b'').decode()
        assert result.trailing == TrailingBytes(offset=0, remaining=0)
        assert result.buffers == []

    def test_add_error(self):
        summary = TraceSummary(source_file='scan_d00.bin')
        summary.add_error(BadMode(offset=0x40, context={'mode': 2}))

        assert not summary.ok
        assert summary.error['code'] == 'E1002'
        assert summary.error['kind'] == 'BadMode'
        assert summary.error['offset'] == 0x40

    def test_to_json(self, scenario_b):
        summary = MM1Decoder(scenario_b).decode().summary
        summary.source_file = 'scan_d00.bin'

        doc = json.loads(summary.to_json())
        assert doc['source_file'] == 'scan_d00.bin'
        assert doc['pixels'] == 4
        assert doc['channels']['1']['buffers'] == 2
        assert doc['error'] is None


class TestErrorCodes:
    """Test the error code table."""

    def test_every_code_has_metadata(self):
        for code in ErrorCode:
            assert set(ERROR_METADATA[code]) == {'severity', 'message', 'exit_code'}

    @pytest.mark.parametrize("code,expected", [
        (ErrorCode.E1001_OUT_OF_BOUNDS, 2),
        (ErrorCode.E1007_SIZE_MISMATCH, 2),
        (ErrorCode.E3001_INVALID_CONFIG, 1),
        (ErrorCode.E4001_FILE_READ_FAILED, 1),
        (ErrorCode.E4002_USAGE, 1),
    ])
    def test_exit_codes(self, code, expected):
        assert exit_code_for(code) == expected

    def test_structural_errors_exit_2(self):
        for kind in MM1Error.__subclasses__():
            assert kind(offset=0).exit_code == 2
