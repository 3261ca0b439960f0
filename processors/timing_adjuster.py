"""
Timing adjustment processor for subtitle entries.

This module provides functionality for shifting subtitle timing by a fixed
offset, scaling it by a ratio, or re-timing it linearly from two reference
points. All operations return new entries and clamp times at zero.
"""

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence, Tuple
from core.subtitle_formats import SubtitleEntry
from core.timing_utils import TimeConverter
from utils.logging_config import get_logger

logger = get_logger(__name__)


class TimingAdjuster:
    """Handles timing adjustments for subtitle entries."""

    @staticmethod
    def shift(entries: Sequence[SubtitleEntry], offset_ms: int,
              ids: Optional[Iterable[str]] = None) -> List[SubtitleEntry]:
        """
        Shift entries by a fixed offset.

        Args:
            entries: Entries to shift
            offset_ms: Offset in milliseconds (positive = delay, negative = advance)
            ids: Only shift entries with these ids (all entries if None)

        Returns:
            New list of entries in the original order

        Example:
            >>> shifted = TimingAdjuster.shift(entries, -2470)
        """
        if offset_ms == 0:
            return list(entries)

        selected = set(ids) if ids is not None else None
        result = []
        shifted = 0
        for entry in entries:
            if selected is not None and entry.id not in selected:
                result.append(entry)
                continue
            result.append(replace(
                entry,
                start_time=max(0, entry.start_time + offset_ms),
                end_time=max(0, entry.end_time + offset_ms)
            ))
            shifted += 1

        direction = "Delayed" if offset_ms > 0 else "Advanced"
        logger.info(f"{direction} {shifted} entries by {abs(offset_ms)}ms")
        return result

    @staticmethod
    def scale(entries: Sequence[SubtitleEntry], ratio: float) -> List[SubtitleEntry]:
        """
        Multiply every timestamp by ``ratio`` (e.g. for frame-rate conversion).

        Raises:
            ValueError: If ratio is not positive
        """
        if ratio <= 0:
            raise ValueError(f"Scale ratio must be positive, got {ratio}")
        if ratio == 1.0:
            return list(entries)

        logger.info(f"Scaling {len(entries)} entries by {ratio}")
        return [
            replace(
                entry,
                start_time=max(0, int(round(entry.start_time * ratio))),
                end_time=max(0, int(round(entry.end_time * ratio)))
            )
            for entry in entries
        ]

    @staticmethod
    def two_point_sync(entries: Sequence[SubtitleEntry],
                       point1: Tuple[int, int],
                       point2: Tuple[int, int]) -> List[SubtitleEntry]:
        """
        Re-time entries with the linear map through two (original, desired) points.

        Args:
            entries: Entries to re-time
            point1: (original_ms, desired_ms) for the first reference
            point2: (original_ms, desired_ms) for the second reference

        Returns:
            New entries; the input unchanged if both originals coincide
        """
        (original1, desired1), (original2, desired2) = point1, point2
        if original1 == original2:
            logger.warning("Two-point sync needs two distinct reference points")
            return list(entries)

        a = (desired2 - desired1) / (original2 - original1)
        b = desired1 - a * original1
        logger.info(f"Two-point sync: t' = {a:.6f} * t + {b:.1f}ms")

        return [
            replace(
                entry,
                start_time=max(0, int(round(a * entry.start_time + b))),
                end_time=max(0, int(round(a * entry.end_time + b)))
            )
            for entry in entries
        ]

    @staticmethod
    def first_line_offset(entries: Sequence[SubtitleEntry], target_ms: int) -> int:
        """
        Offset that makes the earliest entry start at ``target_ms``.

        Returns 0 when there are no entries.
        """
        if not entries:
            return 0
        first_start = min(entry.start_time for entry in entries)
        offset_ms = target_ms - first_start
        logger.debug(f"First line starts at {TimeConverter.format_srt(first_start)}, "
                     f"offset to {TimeConverter.format_srt(target_ms)} is {offset_ms}ms")
        return offset_ms
