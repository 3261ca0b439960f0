#!/usr/bin/env python3
"""Tests for timing shift, scale and two-point sync."""

import pytest

from core.subtitle_formats import SubtitleEntry, reindex_entries
from processors.timing_adjuster import TimingAdjuster


def _entries():
    return reindex_entries([
        SubtitleEntry(start_time=1000, end_time=2000, text="One"),
        SubtitleEntry(start_time=3000, end_time=4500, text="Two"),
        SubtitleEntry(start_time=10000, end_time=12000, text="Three"),
    ])


def _times(entries):
    return [(e.start_time, e.end_time) for e in entries]


def test_shift_delay():
    """Test shifting all entries later."""
    shifted = TimingAdjuster.shift(_entries(), 2500)
    assert _times(shifted) == [(3500, 4500), (5500, 7000), (12500, 14500)]


def test_shift_advance_clamps_at_zero():
    """Test that negative results are clamped."""
    shifted = TimingAdjuster.shift(_entries(), -1500)
    assert _times(shifted) == [(0, 500), (1500, 3000), (8500, 10500)]


def test_shift_selected_ids_only():
    """Test shifting a subset of entries."""
    entries = _entries()
    shifted = TimingAdjuster.shift(entries, 100, ids=[entries[1].id])

    assert _times(shifted) == [(1000, 2000), (3100, 4600), (10000, 12000)]
    assert shifted[0] is entries[0]


def test_shift_zero_returns_copy():
    """Test that a zero offset leaves entries untouched."""
    entries = _entries()
    shifted = TimingAdjuster.shift(entries, 0)

    assert shifted == entries
    assert shifted is not entries


def test_scale():
    """Test scaling by a frame-rate ratio."""
    scaled = TimingAdjuster.scale(_entries(), 1.5)
    assert _times(scaled) == [(1500, 3000), (4500, 6750), (15000, 18000)]


def test_scale_rejects_non_positive_ratio():
    """Test ratio validation."""
    with pytest.raises(ValueError):
        TimingAdjuster.scale(_entries(), 0)


def test_two_point_sync():
    """Test the linear map through two reference points."""
    # t' = 2t - 1000
    synced = TimingAdjuster.two_point_sync(_entries(), (1000, 1000), (10000, 19000))
    assert _times(synced) == [(1000, 3000), (5000, 8000), (19000, 23000)]


def test_two_point_sync_needs_distinct_points():
    """Test that identical originals leave the entries unchanged."""
    entries = _entries()
    assert TimingAdjuster.two_point_sync(entries, (1000, 0), (1000, 500)) == entries


def test_first_line_offset():
    """Test the offset that moves the first line to a target time."""
    assert TimingAdjuster.first_line_offset(_entries(), 500) == -500
    assert TimingAdjuster.first_line_offset([], 500) == 0
