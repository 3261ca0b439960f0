#!/usr/bin/env python3
"""Tests for timestamp parsing and formatting."""

import pytest

from core.timing_utils import TimeConverter


def test_parse_full_timestamp_with_hours():
    """Test H:MM:SS.mmm parsing."""
    assert TimeConverter.parse_timestamp("1:05:30.250") == 3930250


def test_parse_comma_and_dot_delimiters_agree():
    """Test that SRT and WebVTT delimiters parse to the same value."""
    assert TimeConverter.parse_timestamp("00:01:02,345") == 62345
    assert TimeConverter.parse_timestamp("00:01:02.345") == 62345


def test_comma_and_dot_format_to_same_srt_string():
    """Test timestamp normalization through format_srt."""
    for stamp in ("00:01:02,345", "00:01:02.345"):
        assert TimeConverter.format_srt(TimeConverter.parse_timestamp(stamp)) == "00:01:02,345"


def test_parse_short_and_padded_forms():
    """Test MM:SS.mmm, short fractions and fractionless timestamps."""
    assert TimeConverter.parse_timestamp("01:02.500") == 62500
    assert TimeConverter.parse_timestamp("00:00:01.5") == 1500
    assert TimeConverter.parse_timestamp("00:00:01.05") == 1050
    assert TimeConverter.parse_timestamp("00:00:07") == 7000


@pytest.mark.parametrize("garbage", ["", "abc", "1:2:3:4", "00:00:xx,000"])
def test_parse_garbage_returns_zero(garbage):
    """Test that malformed timestamps fail soft."""
    assert TimeConverter.parse_timestamp(garbage) == 0


def test_parse_ass_timestamp():
    """Test centisecond ASS timestamps."""
    assert TimeConverter.parse_ass_timestamp("0:00:01.50") == 1500
    assert TimeConverter.parse_ass_timestamp("1:02:03.04") == 3723040
    # Millisecond precision falls back to the generic parser
    assert TimeConverter.parse_ass_timestamp("0:00:01.500") == 1500
    assert TimeConverter.parse_ass_timestamp("nonsense") == 0


def test_format_timestamp_per_format():
    """Test formatting for each output format."""
    assert TimeConverter.format_srt(3825678) == "01:03:45,678"
    assert TimeConverter.format_vtt(3825678) == "01:03:45.678"
    assert TimeConverter.format_ass(3825678) == "1:03:45.67"


def test_format_timestamp_clamps_negative():
    """Test that negative times are clamped to zero."""
    assert TimeConverter.format_srt(-500) == "00:00:00,000"


@pytest.mark.parametrize("offset, expected", [
    ("2.5s", 2500),
    ("-1500ms", -1500),
    ("750", 750),
    ("-00:00:02,500", -2500),
    ("+00:01:00.000", 60000),
])
def test_parse_offset(offset, expected):
    """Test the supported offset syntaxes."""
    assert TimeConverter.parse_offset(offset) == expected


def test_parse_offset_rejects_garbage():
    """Test that an unparseable offset raises ValueError."""
    with pytest.raises(ValueError):
        TimeConverter.parse_offset("soon")


def test_format_duration():
    """Test human-readable durations."""
    assert TimeConverter.format_duration(2500) == "2.5s"
    assert TimeConverter.format_duration(90000) == "1m 30.0s"
    assert TimeConverter.format_duration(3825500) == "1h 3m 45.5s"
