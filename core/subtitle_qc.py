"""
Readability and timing quality control for subtitle entries.

Each entry is measured (characters, words, longest line, duration, CPS, WPM)
and compared against a threshold bundle. The resulting issue tags are
independent of each other except for ``overlap`` and ``gap_short``, which
describe the same gap and never fire together.
"""

import math
import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
from core.subtitle_formats import SubtitleEntry

# Issue tags
ISSUE_CPS = 'cps'
ISSUE_WPM = 'wpm'
ISSUE_CPL = 'cpl'
ISSUE_DURATION_SHORT = 'duration_short'
ISSUE_DURATION_LONG = 'duration_long'
ISSUE_OVERLAP = 'overlap'
ISSUE_GAP_SHORT = 'gap_short'

QC_ISSUES = (
    ISSUE_CPS,
    ISSUE_WPM,
    ISSUE_CPL,
    ISSUE_DURATION_SHORT,
    ISSUE_DURATION_LONG,
    ISSUE_OVERLAP,
    ISSUE_GAP_SHORT,
)

_TAG_PATTERN = re.compile(r'<[^>]+>')
_OVERRIDE_PATTERN = re.compile(r'\{\\[^}]+\}')
_ANNOTATION_PATTERN = re.compile(r'\[[^\]]+\]')
_WHITESPACE_PATTERN = re.compile(r'\s+')


@dataclass(frozen=True)
class QCThresholds:
    """Limits an entry is checked against."""
    max_cps: float = 21
    max_wpm: float = 190
    max_cpl: int = 42
    min_duration_ms: int = 700
    max_duration_ms: int = 7000
    min_gap_ms: int = 80


DEFAULT_QC_THRESHOLDS = QCThresholds()


@dataclass(frozen=True)
class EntryMetrics:
    """Readability measurements for one entry."""
    char_count: int
    word_count: int
    max_line_chars: int
    duration_ms: int
    cps: float
    wpm: float


@dataclass(frozen=True)
class QCResult:
    """Metrics, issue tags and gap to the following entry."""
    metrics: EntryMetrics
    issues: Tuple[str, ...] = ()
    gap_to_next_ms: Optional[int] = None


def strip_markup(text: str) -> str:
    """Remove tags, ASS override blocks and bracketed annotations."""
    text = _TAG_PATTERN.sub('', text)
    text = _OVERRIDE_PATTERN.sub('', text)
    return _ANNOTATION_PATTERN.sub('', text)


def _round_one_decimal(value: float) -> float:
    # Half-up rounding, non-finite values become 0
    if not math.isfinite(value):
        return 0.0
    return math.floor(value * 10 + 0.5) / 10


def get_metrics(entry: SubtitleEntry) -> EntryMetrics:
    """
    Measure an entry.

    Args:
        entry: Entry to measure

    Returns:
        EntryMetrics with whitespace-free character counts

    Example:
        >>> get_metrics(SubtitleEntry(0, 1000, "Hello world")).cps
        10.0
    """
    lines = strip_markup(entry.text).split('\n')
    compact = _WHITESPACE_PATTERN.sub(' ', ' '.join(lines)).strip()

    char_count = len(_WHITESPACE_PATTERN.sub('', compact))
    word_count = len(compact.split(' ')) if compact else 0
    max_line_chars = max((len(_WHITESPACE_PATTERN.sub('', line)) for line in lines), default=0)

    duration_ms = max(1, entry.end_time - entry.start_time)
    duration_sec = duration_ms / 1000.0

    return EntryMetrics(
        char_count=char_count,
        word_count=word_count,
        max_line_chars=max_line_chars,
        duration_ms=duration_ms,
        cps=_round_one_decimal(char_count / duration_sec),
        wpm=_round_one_decimal(word_count / (duration_sec / 60.0)),
    )


def evaluate_entry(entry: SubtitleEntry, next_entry: Optional[SubtitleEntry] = None,
                   thresholds: QCThresholds = DEFAULT_QC_THRESHOLDS) -> QCResult:
    """
    Evaluate one entry against the thresholds.

    Args:
        entry: Entry to evaluate
        next_entry: Following entry, or None for the last one
        thresholds: Threshold bundle, usually from a style profile

    Returns:
        QCResult
    """
    metrics = get_metrics(entry)
    issues = []

    if metrics.cps > thresholds.max_cps:
        issues.append(ISSUE_CPS)
    if metrics.wpm > thresholds.max_wpm:
        issues.append(ISSUE_WPM)
    if metrics.max_line_chars > thresholds.max_cpl:
        issues.append(ISSUE_CPL)
    if metrics.duration_ms < thresholds.min_duration_ms:
        issues.append(ISSUE_DURATION_SHORT)
    if metrics.duration_ms > thresholds.max_duration_ms:
        issues.append(ISSUE_DURATION_LONG)

    gap_to_next_ms = None
    if next_entry is not None:
        gap_to_next_ms = next_entry.start_time - entry.end_time
        if gap_to_next_ms < 0:
            issues.append(ISSUE_OVERLAP)
        elif gap_to_next_ms < thresholds.min_gap_ms:
            issues.append(ISSUE_GAP_SHORT)

    return QCResult(metrics=metrics, issues=tuple(issues), gap_to_next_ms=gap_to_next_ms)


def evaluate_entries(entries: Sequence[SubtitleEntry],
                     thresholds: QCThresholds = DEFAULT_QC_THRESHOLDS) -> List[QCResult]:
    """Evaluate every entry against its successor in list order."""
    return [
        evaluate_entry(entry, entries[i + 1] if i + 1 < len(entries) else None, thresholds)
        for i, entry in enumerate(entries)
    ]


def summarize(results: Sequence[QCResult]) -> Dict[str, int]:
    """Count how many entries carry each issue tag."""
    counts = Counter(issue for result in results for issue in result.issues)
    return {issue: counts[issue] for issue in QC_ISSUES if counts[issue]}
