"""
Automatic repair of common subtitle errors.

Each fixer is a pure function that takes a sequence of entries and returns a
new list. fix_all_errors() chains them in a fixed order: structural cleanup
first, then text cleanup, then timing, then line wrapping. The timing fixers
depend on that order since the duration clamps ignore neighbouring entries
and may reopen overlaps or gaps.
"""

import re
from dataclasses import replace
from typing import Callable, Dict, List, Optional, Sequence, Tuple
from core.subtitle_formats import SubtitleEntry, reindex_entries
from processors.error_detector import (
    FixOptions,
    DEFAULT_FIX_OPTIONS,
    HTML_TAG_PATTERN,
    ASS_OVERRIDE_PATTERN,
    is_hearing_impaired,
)
from utils.constants import (
    DEFAULT_MAX_CHARS_PER_LINE,
    DEFAULT_MIN_DURATION_MS,
    DEFAULT_MAX_DURATION_MS,
    DEFAULT_MIN_GAP_MS,
    DEFAULT_GAP_FIX_MIN_DURATION_MS,
    DUPLICATE_WINDOW_MS,
)
from utils.logging_config import get_logger

logger = get_logger(__name__)

_INLINE_BRACKETS = re.compile(r'\[.*?\]')
_INLINE_PARENS = re.compile(r'\(.*?\)')


def _count_changed(before: Sequence[SubtitleEntry], after: Sequence[SubtitleEntry]) -> int:
    return sum(1 for old, new in zip(before, after) if old is not new)


def fix_empty_entries(entries: Sequence[SubtitleEntry]) -> List[SubtitleEntry]:
    """Remove entries whose trimmed text is empty."""
    result = [e for e in entries if e.text.strip()]
    logger.debug(f"Removed {len(entries) - len(result)} empty entries")
    return reindex_entries(result)


def fix_duplicates(entries: Sequence[SubtitleEntry]) -> List[SubtitleEntry]:
    """
    Remove entries repeating the most recent kept entry with the same text
    within 500ms. Mirrors find_duplicates(), including its single-match rule.
    """
    seen: Dict[str, SubtitleEntry] = {}
    result = []
    for entry in entries:
        key = entry.text.strip().lower()
        existing = seen.get(key)
        if existing is None or abs(existing.start_time - entry.start_time) >= DUPLICATE_WINDOW_MS:
            result.append(entry)
            seen[key] = entry

    logger.debug(f"Removed {len(entries) - len(result)} duplicate entries")
    return reindex_entries(result)


def fix_formatting_tags(entries: Sequence[SubtitleEntry]) -> List[SubtitleEntry]:
    """Strip HTML-like tags and ASS override blocks from entry text."""
    result = []
    for entry in entries:
        text = ASS_OVERRIDE_PATTERN.sub('', HTML_TAG_PATTERN.sub('', entry.text)).strip()
        result.append(entry if text == entry.text else replace(entry, text=text))

    logger.debug(f"Stripped formatting tags from {_count_changed(entries, result)} entries")
    return result


def fix_hearing_impaired(entries: Sequence[SubtitleEntry]) -> List[SubtitleEntry]:
    """
    Remove hearing-impaired annotations.

    Bracketed and parenthesised fragments are cut out of the text first, so
    dialogue mixed with annotations survives. Entries left empty, or still
    consisting only of an annotation (e.g. ``♪ ... ♪``), are then dropped.
    """
    result = []
    for entry in entries:
        text = _INLINE_BRACKETS.sub('', entry.text).strip()
        text = _INLINE_PARENS.sub('', text).strip()
        if not text or is_hearing_impaired(text):
            continue
        result.append(entry if text == entry.text else replace(entry, text=text))

    logger.debug(f"Hearing impaired cleanup dropped {len(entries) - len(result)} entries")
    return reindex_entries(result)


def fix_overlapping_timestamps(entries: Sequence[SubtitleEntry]) -> List[SubtitleEntry]:
    """
    Sort by start time and end each overlapping entry 1ms before the next one starts.

    Example:
        Entries 1000-3000 and 2000-5000 become 1000-1999 and 2000-5000.
    """
    ordered = sorted(entries, key=lambda e: e.start_time)
    fixed = 0
    for i in range(len(ordered) - 1):
        if ordered[i].end_time > ordered[i + 1].start_time:
            ordered[i] = replace(ordered[i], end_time=ordered[i + 1].start_time - 1)
            fixed += 1

    logger.debug(f"Fixed {fixed} overlapping entries")
    return reindex_entries(ordered)


def fix_short_duration(entries: Sequence[SubtitleEntry],
                       min_duration_ms: int = DEFAULT_MIN_DURATION_MS) -> List[SubtitleEntry]:
    """Extend entries shorter than the minimum duration; neighbours are not considered."""
    result = [
        replace(e, end_time=e.start_time + min_duration_ms) if e.duration < min_duration_ms else e
        for e in entries
    ]
    logger.debug(f"Extended {_count_changed(entries, result)} short entries")
    return result


def fix_long_duration(entries: Sequence[SubtitleEntry],
                      max_duration_ms: int = DEFAULT_MAX_DURATION_MS) -> List[SubtitleEntry]:
    """Shorten entries longer than the maximum duration."""
    result = [
        replace(e, end_time=e.start_time + max_duration_ms) if e.duration > max_duration_ms else e
        for e in entries
    ]
    logger.debug(f"Shortened {_count_changed(entries, result)} long entries")
    return result


def fix_short_gaps(entries: Sequence[SubtitleEntry],
                   min_gap_ms: int = DEFAULT_MIN_GAP_MS,
                   min_duration_ms: int = DEFAULT_GAP_FIX_MIN_DURATION_MS) -> List[SubtitleEntry]:
    """
    Widen gaps smaller than ``min_gap_ms`` by pulling the earlier entry's end back.

    The next entry's start is never moved. The earlier entry keeps at least
    ``min_duration_ms``, even if that leaves the gap short.
    """
    ordered = sorted(entries, key=lambda e: e.start_time)
    fixed = 0
    for i in range(len(ordered) - 1):
        current, following = ordered[i], ordered[i + 1]
        gap = following.start_time - current.end_time
        if 0 <= gap < min_gap_ms:
            desired_end = following.start_time - min_gap_ms
            min_end = current.start_time + min_duration_ms
            ordered[i] = replace(current, end_time=max(min_end, desired_end))
            fixed += 1

    logger.debug(f"Widened {fixed} short gaps")
    return reindex_entries(ordered)


def _wrap_line(line: str, max_chars_per_line: int) -> List[str]:
    # Greedy wrap; a word longer than the limit stays on its own line, unsplit
    wrapped = []
    current = ''
    for word in line.split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) > max_chars_per_line and current:
            wrapped.append(current)
            current = word
        else:
            current = candidate
    if current:
        wrapped.append(current)
    return wrapped


def fix_line_breaking(entries: Sequence[SubtitleEntry],
                      max_chars_per_line: int = DEFAULT_MAX_CHARS_PER_LINE) -> List[SubtitleEntry]:
    """Re-wrap lines longer than the limit at whitespace."""
    result = []
    for entry in entries:
        new_lines = []
        for line in entry.text.split('\n'):
            if len(line) <= max_chars_per_line:
                new_lines.append(line)
            else:
                new_lines.extend(_wrap_line(line, max_chars_per_line))
        text = '\n'.join(new_lines)
        result.append(entry if text == entry.text else replace(entry, text=text))

    logger.debug(f"Re-wrapped {_count_changed(entries, result)} entries")
    return result


FixStep = Tuple[str, Callable[[Sequence[SubtitleEntry], FixOptions], List[SubtitleEntry]]]

FIX_PIPELINE: Tuple[FixStep, ...] = (
    ('remove-empty', lambda entries, o: fix_empty_entries(entries)),
    ('remove-duplicates', lambda entries, o: fix_duplicates(entries)),
    ('strip-formatting-tags', lambda entries, o: fix_formatting_tags(entries)),
    ('strip-hearing-impaired', lambda entries, o: fix_hearing_impaired(entries)),
    ('fix-overlaps', lambda entries, o: fix_overlapping_timestamps(entries)),
    ('extend-short-duration', lambda entries, o: fix_short_duration(entries, o.min_duration_ms)),
    ('shorten-long-duration', lambda entries, o: fix_long_duration(entries, o.max_duration_ms)),
    ('fix-short-gaps', lambda entries, o: fix_short_gaps(entries, o.min_gap_ms, o.min_duration_ms)),
    ('rewrap-long-lines', lambda entries, o: fix_line_breaking(entries, o.max_chars_per_line)),
)


def fix_all_errors(entries: Sequence[SubtitleEntry],
                   options: Optional[FixOptions] = None) -> List[SubtitleEntry]:
    """
    Apply every fixer in pipeline order.

    The gap fixer receives ``options.min_duration_ms`` as its floor so it
    cannot undo the duration extension that ran before it.

    Args:
        entries: Entries to repair
        options: Thresholds (defaults: 42 chars, 500ms, 10000ms, 80ms)

    Returns:
        Repaired, reindexed entries
    """
    options = options or DEFAULT_FIX_OPTIONS
    result = list(entries)
    for name, step in FIX_PIPELINE:
        result = step(result, options)
        logger.debug(f"After {name}: {len(result)} entries")

    logger.info(f"Auto-fix finished: {len(entries)} -> {len(result)} entries")
    return reindex_entries(result)
