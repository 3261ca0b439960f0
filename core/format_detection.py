"""
Subtitle format detection.

Formats are sniffed from content first; SRT has no signature of its own so it
is the fallback, and the file name extension breaks ties when the content
does not look like SRT either.
"""

from pathlib import PurePath
from typing import Optional
from utils.constants import SubtitleFormat
from utils.logging_config import get_logger

logger = get_logger(__name__)

ASS_SECTION_MARKERS = ('[Script Info]', '[V4+ Styles]', '[V4 Styles]')


class FormatDetector:
    """Detects subtitle formats from content and file names."""

    @staticmethod
    def detect_from_content(content: str) -> SubtitleFormat:
        """
        Detect the format of subtitle text.

        Args:
            content: Raw subtitle text

        Returns:
            SubtitleFormat (SRT when nothing else matches)

        Example:
            >>> FormatDetector.detect_from_content("WEBVTT\\n\\n00:01.000 --> 00:02.000\\nHi")
            <SubtitleFormat.VTT: 'vtt'>
        """
        trimmed = content.lstrip('\ufeff').strip()
        if trimmed.startswith('WEBVTT'):
            return SubtitleFormat.VTT
        if any(marker in trimmed for marker in ASS_SECTION_MARKERS):
            return SubtitleFormat.ASS
        return SubtitleFormat.SRT

    @staticmethod
    def detect_from_filename(filename: str) -> SubtitleFormat:
        """
        Detect the format from a file name extension.

        Unknown extensions map to SRT.
        """
        try:
            return SubtitleFormat.from_extension(PurePath(filename).suffix)
        except ValueError:
            return SubtitleFormat.SRT

    @staticmethod
    def detect(content: str, filename: Optional[str] = None) -> SubtitleFormat:
        """
        Detect the format from content, falling back to the file name.

        The file name is only consulted when content sniffing fell through to
        SRT and the content has no SRT time range at all.
        """
        detected = FormatDetector.detect_from_content(content)
        if detected == SubtitleFormat.SRT and filename and '-->' not in content:
            by_name = FormatDetector.detect_from_filename(filename)
            if by_name != detected:
                logger.debug(f"Content is ambiguous, using extension of {filename}: {by_name.value}")
            return by_name
        return detected
