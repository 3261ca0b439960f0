"""
Error detection for subtitle collections.

Every detector is a pure function over a sequence of entries and returns a
list of SubtitleError reports. Detectors that depend on temporal adjacency
sort a local copy by start time; the caller's sequence is never reordered.
"""

import re
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence
from core.subtitle_formats import SubtitleEntry
from utils.constants import (
    DEFAULT_MAX_CHARS_PER_LINE,
    DEFAULT_MIN_DURATION_MS,
    DEFAULT_MAX_DURATION_MS,
    DEFAULT_MIN_GAP_MS,
    DUPLICATE_WINDOW_MS,
)
from utils.logging_config import get_logger

logger = get_logger(__name__)


class ErrorType(Enum):
    """Kinds of problems the detectors report."""
    EMPTY = "empty"
    OVERLAP = "overlap"
    HEARING_IMPAIRED = "hearing_impaired"
    LONG_LINE = "long_line"
    DUPLICATE = "duplicate"
    FORMATTING_TAGS = "formatting_tags"
    SHORT_DURATION = "short_duration"
    LONG_DURATION = "long_duration"
    GAP_SHORT = "gap_short"


@dataclass(frozen=True)
class SubtitleError:
    """A single detected problem."""
    type: ErrorType
    entry_id: str
    index: int
    description: str


@dataclass(frozen=True)
class FixOptions:
    """Thresholds shared by the detectors and the auto-fix pipeline."""
    max_chars_per_line: int = DEFAULT_MAX_CHARS_PER_LINE
    min_duration_ms: int = DEFAULT_MIN_DURATION_MS
    max_duration_ms: int = DEFAULT_MAX_DURATION_MS
    min_gap_ms: int = DEFAULT_MIN_GAP_MS


DEFAULT_FIX_OPTIONS = FixOptions()

# Whole-text hearing-impaired patterns, matched against the trimmed text
HEARING_IMPAIRED_PATTERNS = (
    re.compile(r'\[.*\]'),          # [Music], [Music] [Applause]
    re.compile(r'\(.*\)'),          # (laughing)
    re.compile(r'♪.*♪'),            # ♪ la ♪ la ♪
    re.compile(r'-\s*\[.*\]'),      # - [Speaker]
)

HTML_TAG_PATTERN = re.compile(r'</?[a-z][^>]*>', re.IGNORECASE)
ASS_OVERRIDE_PATTERN = re.compile(r'\{\\[^}]*\}')


def is_hearing_impaired(text: str) -> bool:
    """True if the whole trimmed text is a hearing-impaired annotation."""
    trimmed = text.strip()
    return any(pattern.fullmatch(trimmed) for pattern in HEARING_IMPAIRED_PATTERNS)


def has_formatting_tags(text: str) -> bool:
    """True if the text contains HTML-like tags or ASS override blocks."""
    return bool(HTML_TAG_PATTERN.search(text) or ASS_OVERRIDE_PATTERN.search(text))


def _error(error_type: ErrorType, entry: SubtitleEntry, description: str) -> SubtitleError:
    return SubtitleError(type=error_type, entry_id=entry.id, index=entry.index,
                         description=description)


def _sorted_by_start(entries: Sequence[SubtitleEntry]) -> List[SubtitleEntry]:
    return sorted(entries, key=lambda e: e.start_time)


def find_empty_entries(entries: Sequence[SubtitleEntry]) -> List[SubtitleError]:
    """Find entries whose trimmed text is empty."""
    return [
        _error(ErrorType.EMPTY, e, f"Entry #{e.index} has empty text")
        for e in entries if not e.text.strip()
    ]


def find_overlapping_timestamps(entries: Sequence[SubtitleEntry]) -> List[SubtitleError]:
    """Find entries that end after the next entry (in time order) starts."""
    ordered = _sorted_by_start(entries)
    errors = []
    for current, following in zip(ordered, ordered[1:]):
        if current.end_time > following.start_time:
            errors.append(_error(
                ErrorType.OVERLAP, current,
                f"Entry #{current.index} overlaps with #{following.index} "
                f"by {current.end_time - following.start_time}ms"
            ))
    return errors


def find_hearing_impaired_text(entries: Sequence[SubtitleEntry]) -> List[SubtitleError]:
    """Find entries that consist entirely of a hearing-impaired annotation."""
    return [
        _error(ErrorType.HEARING_IMPAIRED, e, f"Entry #{e.index} contains hearing impaired text")
        for e in entries if is_hearing_impaired(e.text)
    ]


def find_long_lines(entries: Sequence[SubtitleEntry],
                    max_chars_per_line: int = DEFAULT_MAX_CHARS_PER_LINE) -> List[SubtitleError]:
    """Find entries with at least one line longer than the limit."""
    return [
        _error(ErrorType.LONG_LINE, e,
               f"Entry #{e.index} has lines exceeding {max_chars_per_line} characters")
        for e in entries
        if any(len(line) > max_chars_per_line for line in e.text.split('\n'))
    ]


def find_duplicates(entries: Sequence[SubtitleEntry]) -> List[SubtitleError]:
    """
    Find entries repeating the text of a nearby earlier entry.

    Text is compared case-insensitively after trimming. Only the most recent
    kept entry with the same text is compared: for three copies 400ms apart
    the second is reported, but the third is measured against the first
    (800ms away) and kept although it is only 400ms after the second.
    """
    seen: Dict[str, SubtitleEntry] = {}
    errors = []
    for entry in entries:
        key = entry.text.strip().lower()
        existing = seen.get(key)
        if existing is not None and abs(existing.start_time - entry.start_time) < DUPLICATE_WINDOW_MS:
            errors.append(_error(
                ErrorType.DUPLICATE, entry,
                f"Entry #{entry.index} is a duplicate of #{existing.index}"
            ))
        else:
            seen[key] = entry
    return errors


def find_formatting_tags(entries: Sequence[SubtitleEntry]) -> List[SubtitleError]:
    """Find entries containing inline markup."""
    return [
        _error(ErrorType.FORMATTING_TAGS, e, f"Entry #{e.index} contains formatting tags")
        for e in entries if has_formatting_tags(e.text)
    ]


def find_short_duration(entries: Sequence[SubtitleEntry],
                        min_duration_ms: int = DEFAULT_MIN_DURATION_MS) -> List[SubtitleError]:
    """Find entries shorter than the minimum duration."""
    return [
        _error(ErrorType.SHORT_DURATION, e,
               f"Entry #{e.index} duration is only {e.duration}ms (min: {min_duration_ms}ms)")
        for e in entries if e.duration < min_duration_ms
    ]


def find_long_duration(entries: Sequence[SubtitleEntry],
                       max_duration_ms: int = DEFAULT_MAX_DURATION_MS) -> List[SubtitleError]:
    """Find entries longer than the maximum duration."""
    return [
        _error(ErrorType.LONG_DURATION, e,
               f"Entry #{e.index} duration is {e.duration}ms (max: {max_duration_ms}ms)")
        for e in entries if e.duration > max_duration_ms
    ]


def find_short_gaps(entries: Sequence[SubtitleEntry],
                    min_gap_ms: int = DEFAULT_MIN_GAP_MS) -> List[SubtitleError]:
    """Find non-negative gaps smaller than the minimum; overlaps are left to the overlap check."""
    ordered = _sorted_by_start(entries)
    errors = []
    for current, following in zip(ordered, ordered[1:]):
        gap = following.start_time - current.end_time
        if 0 <= gap < min_gap_ms:
            errors.append(_error(
                ErrorType.GAP_SHORT, current,
                f"Entry #{current.index} has short gap ({gap}ms) to #{following.index}"
            ))
    return errors


def detect_all_errors(entries: Sequence[SubtitleEntry],
                      options: Optional[FixOptions] = None) -> List[SubtitleError]:
    """
    Run every detector and return the combined reports.

    Args:
        entries: Entries to scan
        options: Thresholds (defaults: 42 chars, 500ms, 10000ms, 80ms)

    Returns:
        Errors grouped by detector, in a fixed detector order
    """
    options = options or DEFAULT_FIX_OPTIONS
    errors = [
        *find_empty_entries(entries),
        *find_overlapping_timestamps(entries),
        *find_hearing_impaired_text(entries),
        *find_long_lines(entries, options.max_chars_per_line),
        *find_duplicates(entries),
        *find_formatting_tags(entries),
        *find_short_duration(entries, options.min_duration_ms),
        *find_long_duration(entries, options.max_duration_ms),
        *find_short_gaps(entries, options.min_gap_ms),
    ]
    logger.debug(f"Detected {len(errors)} error(s) in {len(entries)} entries")
    return errors


def group_errors(errors: Sequence[SubtitleError]) -> Dict[ErrorType, List[SubtitleError]]:
    """Group error reports by type, keeping detector order."""
    grouped: Dict[ErrorType, List[SubtitleError]] = defaultdict(list)
    for error in errors:
        grouped[error.type].append(error)
    return dict(grouped)
