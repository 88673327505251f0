"""Unit tests for SubRip timestamp arithmetic."""

import pytest

from subtitle_aligner.core.timecode import (
    ms_to_timestamp,
    parse_timing_line,
    timestamp_to_ms,
)


class TestTimestampToMs:

    def test_comma_separator(self):
        assert timestamp_to_ms("01:02:03,456") == 3_723_456

    def test_dot_separator(self):
        assert timestamp_to_ms("00:00:01.250") == 1_250

    def test_short_fraction_is_padded(self):
        assert timestamp_to_ms("00:00:01.5") == 1_500

    def test_long_fraction_is_truncated(self):
        assert timestamp_to_ms("00:00:01,23456") == 1_234

    def test_missing_fraction(self):
        assert timestamp_to_ms("00:00:07") == 7_000

    def test_surrounding_whitespace(self):
        assert timestamp_to_ms("  00:00:02,000 ") == 2_000

    @pytest.mark.parametrize("value", ["", "garbage", "00:01", "aa:bb:cc,ddd"])
    def test_unparseable_maps_to_zero(self, value):
        assert timestamp_to_ms(value) == 0


class TestMsToTimestamp:

    def test_formats_all_units(self):
        assert ms_to_timestamp(3_723_456) == "01:02:03,456"

    def test_zero(self):
        assert ms_to_timestamp(0) == "00:00:00,000"

    def test_negative_clamps_to_zero(self):
        assert ms_to_timestamp(-250) == "00:00:00,000"

    def test_float_is_floored(self):
        assert ms_to_timestamp(1_500.9) == "00:00:01,500"

    def test_inverse_of_parse(self):
        for ts in ("00:00:00,001", "00:59:59,999", "10:00:00,000"):
            assert ms_to_timestamp(timestamp_to_ms(ts)) == ts


class TestTimingLine:

    def test_plain_timing_line(self):
        assert parse_timing_line("00:00:01,000 --> 00:00:02,000") == (1_000, 2_000)

    def test_trailing_cue_settings_tolerated(self):
        line = "00:00:01,000 --> 00:00:02,000 align:start position:0%"
        assert parse_timing_line(line) == (1_000, 2_000)

    def test_dot_separators(self):
        assert parse_timing_line("00:00:01.000-->00:00:02.500") == (1_000, 2_500)

    @pytest.mark.parametrize("line", ["", "hello", "00:00:01,000 -> 00:00:02,000", "00:00:01,000"])
    def test_no_timestamp_pair(self, line):
        assert parse_timing_line(line) is None

    def test_hundred_hour_timestamps(self):
        line = "100:00:00,000 --> 100:00:01,500"
        assert parse_timing_line(line) == (360_000_000, 360_001_500)

    def test_hour_field_is_not_read_from_a_longer_number(self):
        # "x123:00:00,000" must not be read as 23 h
        assert parse_timing_line("x123:00:00,000 --> 123:00:01,000") == (442_800_000, 442_801_000)
        assert parse_timing_line("9:00:00,000 --> 00:00:01,000") is None

    def test_formatted_long_offsets_parse_back(self):
        value = 123 * 3_600_000 + 4_567
        line = "{} --> {}".format(ms_to_timestamp(value), ms_to_timestamp(value + 1_000))
        assert parse_timing_line(line) == (value, value + 1_000)
