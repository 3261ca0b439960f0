"""
Time conversion utilities for subtitle processing.

This module provides functions for:
- Parsing SRT, WebVTT and ASS timestamps into integer milliseconds
- Formatting milliseconds back into each format's timestamp syntax
- Parsing user-supplied timing offsets
- Human-readable durations

Timestamp parsing never raises: unrecognized input yields 0 ms so a single
bad cue cannot abort a whole file.
"""

import re
from typing import Union
from utils.logging_config import get_logger

logger = get_logger(__name__)

# MM:SS.mmm (no hours)
_SHORT_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})\.(\d{1,3})$')
# H:MM:SS.mmm
_FULL_PATTERN = re.compile(r'^(\d{1,2}):(\d{2}):(\d{2})\.(\d{1,3})$')
# H:MM:SS (no fraction)
_NO_FRACTION_PATTERN = re.compile(r'^(\d{1,2}):(\d{2}):(\d{2})$')
# H:MM:SS.cc (ASS, unbounded hours)
_ASS_PATTERN = re.compile(r'^(\d+):(\d{2}):(\d{2})\.(\d{2})$')

_OFFSET_TIMESTAMP_PATTERN = re.compile(r'^([+-]?)(.+:.+)$')


class TimeConverter:
    """Handles timestamp parsing and formatting for subtitles, in milliseconds."""

    SRT = 'srt'
    VTT = 'vtt'
    ASS = 'ass'

    @staticmethod
    def parse_timestamp(time_str: str) -> int:
        """
        Convert an SRT or WebVTT timestamp to milliseconds.

        Accepts ``H:MM:SS,mmm``, ``H:MM:SS.mmm``, ``MM:SS.mmm`` and
        ``H:MM:SS``. Fractions shorter than three digits are right-padded.

        Args:
            time_str: Timestamp string

        Returns:
            Time in milliseconds, or 0 if the string is not recognized

        Example:
            >>> TimeConverter.parse_timestamp("1:05:30.250")
            3930250
        """
        if not time_str:
            return 0
        cleaned = time_str.strip().replace(',', '.')

        match = _SHORT_PATTERN.match(cleaned)
        if match:
            m, s, ms = match.groups()
            return int(m) * 60_000 + int(s) * 1000 + int(ms.ljust(3, '0'))

        match = _FULL_PATTERN.match(cleaned)
        if match:
            h, m, s, ms = match.groups()
            return int(h) * 3_600_000 + int(m) * 60_000 + int(s) * 1000 + int(ms.ljust(3, '0'))

        match = _NO_FRACTION_PATTERN.match(cleaned)
        if match:
            h, m, s = match.groups()
            return int(h) * 3_600_000 + int(m) * 60_000 + int(s) * 1000

        logger.debug(f"Unrecognized timestamp '{time_str}', using 0ms")
        return 0

    @staticmethod
    def parse_ass_timestamp(time_str: str) -> int:
        """
        Convert an ASS timestamp (``H:MM:SS.cc``) to milliseconds.

        Falls back to parse_timestamp() for anything that is not
        centisecond-precision, so it returns 0 for garbage as well.
        """
        match = _ASS_PATTERN.match(time_str.strip()) if time_str else None
        if not match:
            return TimeConverter.parse_timestamp(time_str)
        h, m, s, cs = match.groups()
        return int(h) * 3_600_000 + int(m) * 60_000 + int(s) * 1000 + int(cs) * 10

    @staticmethod
    def format_timestamp(ms: Union[int, float], format_type: str = 'srt') -> str:
        """
        Convert milliseconds to a timestamp string for the given format.

        Args:
            ms: Time in milliseconds (negative values are clamped to 0)
            format_type: Output format ('srt', 'vtt' or 'ass')

        Returns:
            Formatted time string

        Example:
            >>> TimeConverter.format_timestamp(3825678, "srt")
            '01:03:45,678'
            >>> TimeConverter.format_timestamp(3825678, "ass")
            '1:03:45.67'
        """
        total_ms = max(0, int(round(ms)))
        hours = total_ms // 3_600_000
        minutes = (total_ms % 3_600_000) // 60_000
        seconds = (total_ms % 60_000) // 1000
        millis = total_ms % 1000

        if format_type == TimeConverter.ASS:
            # Centisecond precision, sub-centisecond part is truncated
            return f"{hours}:{minutes:02d}:{seconds:02d}.{millis // 10:02d}"
        if format_type == TimeConverter.VTT:
            return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"
        return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"

    @staticmethod
    def format_srt(ms: Union[int, float]) -> str:
        """Format milliseconds as ``HH:MM:SS,mmm``."""
        return TimeConverter.format_timestamp(ms, TimeConverter.SRT)

    @staticmethod
    def format_vtt(ms: Union[int, float]) -> str:
        """Format milliseconds as ``HH:MM:SS.mmm``."""
        return TimeConverter.format_timestamp(ms, TimeConverter.VTT)

    @staticmethod
    def format_ass(ms: Union[int, float]) -> str:
        """Format milliseconds as ``H:MM:SS.cc``."""
        return TimeConverter.format_timestamp(ms, TimeConverter.ASS)

    @staticmethod
    def parse_offset(offset_str: str) -> int:
        """
        Parse offset string to milliseconds.

        Args:
            offset_str: Offset string (e.g., "2.5s", "-1500ms", "-00:00:02,500")

        Returns:
            Offset in milliseconds

        Raises:
            ValueError: If offset string format is invalid
        """
        offset_str = offset_str.strip()

        # Timestamp format with an optional sign
        match = _OFFSET_TIMESTAMP_PATTERN.match(offset_str)
        if match:
            sign, stamp = match.groups()
            value = TimeConverter.parse_timestamp(stamp)
            if value == 0 and not re.fullmatch(r'[0:.,]+', stamp):
                raise ValueError(f"Invalid offset timestamp: {offset_str}")
            return -value if sign == '-' else value

        try:
            if offset_str.lower().endswith('ms'):
                return int(offset_str[:-2])
            if offset_str.lower().endswith('s'):
                return int(round(float(offset_str[:-1]) * 1000))
            return int(offset_str)
        except ValueError:
            pass

        raise ValueError(f"Invalid offset format: {offset_str}. "
                         f"Supported formats: '1500ms', '2.5s', '00:00:02,500', or plain milliseconds")

    @staticmethod
    def format_duration(ms: Union[int, float]) -> str:
        """
        Format a duration in milliseconds to a human-readable string.

        Example:
            >>> TimeConverter.format_duration(3825500)
            '1h 3m 45.5s'
        """
        seconds = ms / 1000.0
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            return f"{minutes}m {seconds % 60:.1f}s"
        else:
            hours = int(seconds // 3600)
            remaining_seconds = seconds % 3600
            minutes = int(remaining_seconds // 60)
            return f"{hours}h {minutes}m {remaining_seconds % 60:.1f}s"
