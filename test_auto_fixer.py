#!/usr/bin/env python3
"""Tests for the automatic error fixers and the fix pipeline."""

from core.subtitle_formats import SubtitleEntry, reindex_entries
from processors.auto_fixer import (
    fix_all_errors,
    fix_duplicates,
    fix_empty_entries,
    fix_formatting_tags,
    fix_hearing_impaired,
    fix_line_breaking,
    fix_long_duration,
    fix_overlapping_timestamps,
    fix_short_duration,
    fix_short_gaps,
)
from processors.error_detector import FixOptions, detect_all_errors, find_hearing_impaired_text

LONG_TEXT = "This is a long line that definitely needs to be wrapped somewhere"


def _entries(*rows):
    return reindex_entries(SubtitleEntry(start_time=s, end_time=e, text=t) for s, e, t in rows)


def _timing(entries):
    return [(e.index, e.start_time, e.end_time, e.text) for e in entries]


def test_fix_overlap_ends_one_millisecond_before_next():
    """Test the basic overlap repair."""
    entries = _entries((1000, 3000, "Hello"), (2000, 5000, "World"))
    fixed = fix_overlapping_timestamps(entries)

    assert (fixed[0].start_time, fixed[0].end_time) == (1000, 1999)
    assert (fixed[1].start_time, fixed[1].end_time) == (2000, 5000)
    assert entries[0].end_time == 3000


def test_overlap_invariant_holds_after_fix():
    """Test that every adjacent pair is ordered after the overlap fix."""
    entries = _entries((5000, 9000, "c"), (0, 6000, "a"), (3000, 4000, "b"),
                       (3000, 3500, "b2"), (8000, 8100, "d"))
    fixed = fix_overlapping_timestamps(entries)

    assert [e.index for e in fixed] == [1, 2, 3, 4, 5]
    for current, following in zip(fixed, fixed[1:]):
        assert current.start_time <= following.start_time
        assert current.end_time <= following.start_time


def test_fix_hearing_impaired_removes_annotation_entry():
    """Test that a music-only entry is dropped."""
    entries = _entries((0, 2000, "[Music]"), (3000, 5000, "Hello"))
    fixed = fix_hearing_impaired(entries)

    assert len(fixed) == len(entries) - 1
    assert fixed[0].text == "Hello"
    assert fixed[0].index == 1


def test_fix_hearing_impaired_keeps_mixed_dialogue():
    """Test that inline annotations are cut out of dialogue."""
    entries = _entries((0, 1000, "[Door slams] Who's there?"),
                       (2000, 3000, "(sighs) I know (quietly)"),
                       (4000, 5000, "♪ la la la ♪"))
    fixed = fix_hearing_impaired(entries)

    assert [e.text for e in fixed] == ["Who's there?", "I know"]


def test_fix_hearing_impaired_drops_repeated_music_notes():
    """Test that detector and fixer agree on multi-delimiter annotations."""
    entries = _entries((0, 1000, "[Music] [Applause]"),
                       (2000, 3000, "♪ la ♪ la ♪"),
                       (4000, 5000, "Hello"))
    fixed = fix_hearing_impaired(entries)

    assert [e.text for e in fixed] == ["Hello"]
    assert find_hearing_impaired_text(fixed) == []


def test_fix_empty_entries():
    """Test that blank entries are removed and the rest reindexed."""
    fixed = fix_empty_entries(_entries((0, 1000, " "), (2000, 3000, "Text")))

    assert _timing(fixed) == [(1, 2000, 3000, "Text")]


def test_fix_duplicates():
    """Test that near-identical repeats are removed."""
    entries = _entries((1000, 2000, "Hello"), (1300, 2300, "HELLO"), (5000, 6000, "Hello"))
    fixed = fix_duplicates(entries)

    assert [e.start_time for e in fixed] == [1000, 5000]


def test_fix_duplicates_single_match_rule():
    """Test that only the last kept copy is compared, so a third copy survives."""
    entries = _entries((0, 300, "Hey"), (400, 700, "Hey"), (800, 1100, "Hey"))
    fixed = fix_duplicates(entries)

    assert [e.start_time for e in fixed] == [0, 800]


def test_fix_formatting_tags():
    """Test that tags and override blocks are stripped."""
    entries = _entries((0, 1000, "<i>Hi</i> there"), (2000, 3000, "{\\an8}Top"), (4000, 5000, "Plain"))
    fixed = fix_formatting_tags(entries)

    assert [e.text for e in fixed] == ["Hi there", "Top", "Plain"]
    assert fixed[2] is entries[2]


def test_fix_short_and_long_duration():
    """Test the duration clamps."""
    entries = _entries((0, 200, "Short"), (1000, 16000, "Long"), (17000, 18000, "Fine"))

    assert fix_short_duration(entries, 500)[0].end_time == 500
    assert fix_long_duration(entries, 10000)[1].end_time == 11000
    assert fix_short_duration(entries, 500)[2] is entries[2]


def test_fix_short_gaps_moves_earlier_end():
    """Test that the gap is widened without touching the next start."""
    entries = _entries((0, 1000, "A"), (1050, 2000, "B"))
    fixed = fix_short_gaps(entries, min_gap_ms=80)

    assert fixed[0].end_time == 970
    assert fixed[1].start_time == 1050


def test_fix_short_gaps_respects_duration_floor():
    """Test that the earlier entry keeps the minimum duration."""
    entries = _entries((0, 350, "A"), (360, 2000, "B"))

    assert fix_short_gaps(entries, min_gap_ms=80)[0].end_time == 300
    assert fix_short_gaps(entries, min_gap_ms=80, min_duration_ms=200)[0].end_time == 280


def test_fix_line_breaking():
    """Test greedy re-wrapping at whitespace."""
    fixed = fix_line_breaking(_entries((0, 3000, LONG_TEXT)), 42)

    assert fixed[0].text == "This is a long line that definitely needs\nto be wrapped somewhere"


def test_fix_line_breaking_never_splits_long_words():
    """Test that a word longer than the limit stays whole on its own line."""
    long_word = "x" * 50
    fixed = fix_line_breaking(_entries((0, 3000, "short " + long_word)), 42)

    assert fixed[0].text == "short\n" + long_word


def test_fix_all_errors_pipeline():
    """Test the full pipeline on a messy collection."""
    entries = _entries(
        (0, 2000, "Hello"),
        (1500, 3000, "World"),
        (3020, 3200, "<i>Quick</i>"),
        (5000, 20000, "[Music]"),
        (21000, 40000, LONG_TEXT),
        (21200, 22000, "  "),
    )
    fixed = fix_all_errors(entries)

    assert _timing(fixed) == [
        (1, 0, 1420, "Hello"),
        (2, 1500, 2940, "World"),
        (3, 3020, 3520, "Quick"),
        (4, 21000, 31000, "This is a long line that definitely needs\nto be wrapped somewhere"),
    ]
    assert detect_all_errors(fixed) == []
    assert len(entries) == 6


def test_fix_all_errors_is_idempotent():
    """Test that a second run changes nothing when no duplicate hides behind markup."""
    entries = _entries(
        (0, 2000, "Hello"),
        (1500, 3000, "World"),
        (3020, 3200, "<i>Quick</i>"),
        (21000, 40000, LONG_TEXT),
    )
    once = fix_all_errors(entries)
    twice = fix_all_errors(once)

    assert _timing(twice) == _timing(once)
    assert [e.id for e in twice] == [e.id for e in once]


def test_fix_all_errors_duplicate_exposed_by_tag_stripping():
    """Test that duplicates only become equal after tag stripping survive the first run."""
    entries = _entries((0, 500, "<i>Hi</i>"), (100, 1100, "Hi"))
    once = fix_all_errors(entries)
    twice = fix_all_errors(once)

    assert _timing(once) == [(1, 0, 500, "Hi"), (2, 100, 1100, "Hi")]
    assert _timing(twice) == [(1, 0, 500, "Hi")]


def test_fix_all_errors_passes_min_duration_to_gap_fixer():
    """Test that the pipeline gap fix does not undo the duration extension."""
    entries = _entries((0, 1000, "A"), (1010, 3000, "B"))
    fixed = fix_all_errors(entries, FixOptions(min_duration_ms=1000))

    assert fixed[0].end_time == 1000


def test_fix_all_errors_empty_input():
    """Test that an empty collection stays empty."""
    assert fix_all_errors([]) == []
