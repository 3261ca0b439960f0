"""
Subtitle format handlers and data structures.

This module provides:
- Immutable data structures for subtitle entries and documents
- Format-specific parsers for SRT, WebVTT and ASS/SSA
- Serializers for the same three formats
- Entry helpers (id generation, reindexing, sorting)

Entries are frozen dataclasses. Every helper returns new objects and never
mutates its input, so a document can be shared between callers freely.
"""

import itertools
import re
import uuid
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Tuple
from utils.constants import (
    SubtitleFormat,
    ASS_EVENTS_FORMAT,
    DEFAULT_ASS_HEADER,
    DEFAULT_NEW_ENTRY_DURATION_MS,
)
from utils.logging_config import get_logger
from core.timing_utils import TimeConverter
from core.format_detection import FormatDetector

logger = get_logger(__name__)

_id_counter = itertools.count(1)


def generate_entry_id() -> str:
    """Return a new process-unique entry identifier."""
    return f"sub_{next(_id_counter)}_{uuid.uuid4().hex[:8]}"


@dataclass(frozen=True)
class SubtitleEntry:
    """A single subtitle cue in canonical form (millisecond timing)."""
    start_time: int  # Start time in milliseconds
    end_time: int    # End time in milliseconds
    text: str        # Display text, may contain newlines and inline markup
    index: int = 1   # 1-based display position, recomputed on reindex
    id: str = field(default_factory=generate_entry_id)

    @property
    def duration(self) -> int:
        """Get the duration of this entry in milliseconds."""
        return self.end_time - self.start_time

    def format_time_range(self, format_type: str = 'srt') -> str:
        """
        Format the time range as a string.

        Args:
            format_type: Format type ('srt', 'vtt' or 'ass')

        Returns:
            Formatted time range string
        """
        start_str = TimeConverter.format_timestamp(self.start_time, format_type)
        end_str = TimeConverter.format_timestamp(self.end_time, format_type)
        return f"{start_str} --> {end_str}"


@dataclass(frozen=True)
class SubtitleDocument:
    """Represents a parsed subtitle collection."""
    format: SubtitleFormat
    entries: Tuple[SubtitleEntry, ...] = ()
    header: Optional[str] = None  # ASS only: everything before [Events], verbatim
    skipped_blocks: int = 0       # SRT/VTT blocks dropped for lacking timing or text

    def __post_init__(self):
        """Freeze the entry sequence."""
        if not isinstance(self.entries, tuple):
            object.__setattr__(self, 'entries', tuple(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def with_entries(self, entries: Iterable[SubtitleEntry]) -> 'SubtitleDocument':
        """Return a copy holding the given entries, reindexed."""
        return replace(self, entries=tuple(reindex_entries(entries)))

    def get_earliest_entry(self) -> Optional[SubtitleEntry]:
        """Get the entry with the earliest start time."""
        return min(self.entries, key=lambda e: e.start_time) if self.entries else None

    def get_latest_entry(self) -> Optional[SubtitleEntry]:
        """Get the entry with the latest end time."""
        return max(self.entries, key=lambda e: e.end_time) if self.entries else None

    def get_total_duration(self) -> int:
        """Get the total duration from first to last entry in milliseconds."""
        if not self.entries:
            return 0
        return self.get_latest_entry().end_time - self.get_earliest_entry().start_time


def reindex_entries(entries: Iterable[SubtitleEntry]) -> List[SubtitleEntry]:
    """Return entries with ``index`` set to their 1-based position."""
    return [
        entry if entry.index == i else replace(entry, index=i)
        for i, entry in enumerate(entries, start=1)
    ]


def sort_entries(entries: Iterable[SubtitleEntry]) -> List[SubtitleEntry]:
    """Return entries sorted by start time (stable), reindexed."""
    return reindex_entries(sorted(entries, key=lambda e: e.start_time))


def create_empty_entry(start_time: int, end_time: Optional[int] = None,
                       index: int = 1) -> SubtitleEntry:
    """Create a new entry with empty text and a default two second duration."""
    if end_time is None:
        end_time = start_time + DEFAULT_NEW_ENTRY_DURATION_MS
    return SubtitleEntry(start_time=start_time, end_time=end_time, text='', index=index)


class SubtitleParser:
    """Base class for subtitle format parsers."""

    format: SubtitleFormat = SubtitleFormat.SRT

    @staticmethod
    def normalize_content(content: str) -> str:
        """Strip a leading BOM and normalize line endings to ``\\n``."""
        if content.startswith('\ufeff'):
            content = content[1:]
        return content.replace('\r\n', '\n').replace('\r', '\n')

    @staticmethod
    def split_blocks(content: str) -> List[str]:
        """Split text into blank-line separated blocks."""
        return [block for block in re.split(r'\n[ \t]*\n', content) if block.strip()]

    @classmethod
    def parse(cls, content: str) -> SubtitleDocument:
        raise NotImplementedError

    @classmethod
    def serialize(cls, entries: Sequence[SubtitleEntry], header: Optional[str] = None) -> str:
        raise NotImplementedError


class SRTParser(SubtitleParser):
    """Parser for SRT subtitle format."""

    format = SubtitleFormat.SRT

    @staticmethod
    def _split_time_line(time_line: str) -> Tuple[str, str]:
        start_str, end_str = time_line.split('-->', 1)
        return start_str.strip(), end_str.strip()

    @classmethod
    def _parse_blocks(cls, blocks: List[str]) -> Tuple[List[SubtitleEntry], int]:
        """
        Parse cue blocks shared by SRT and WebVTT.

        Returns:
            Tuple of (entries, number of dropped blocks)
        """
        entries = []
        skipped = 0

        for block in blocks:
            lines = block.strip().split('\n')
            if len(lines) < 2:
                skipped += 1
                continue

            # The index line is optional, so search for the timing line
            time_line_idx = next((i for i, line in enumerate(lines) if '-->' in line), -1)
            if time_line_idx == -1:
                skipped += 1
                continue

            start_str, end_str = cls._split_time_line(lines[time_line_idx])
            text = '\n'.join(lines[time_line_idx + 1:]).strip()
            if not text:
                skipped += 1
                continue

            entries.append(SubtitleEntry(
                start_time=TimeConverter.parse_timestamp(start_str),
                end_time=TimeConverter.parse_timestamp(end_str),
                text=text,
                index=len(entries) + 1
            ))

        return entries, skipped

    @classmethod
    def parse(cls, content: str) -> SubtitleDocument:
        """
        Parse SRT text.

        Args:
            content: Raw SRT content

        Returns:
            SubtitleDocument with sequentially indexed entries

        Example:
            >>> doc = SRTParser.parse("1\\n00:00:01,000 --> 00:00:02,000\\nHello\\n")
            >>> doc.entries[0].text
            'Hello'
        """
        blocks = cls.split_blocks(cls.normalize_content(content))
        entries, skipped = cls._parse_blocks(blocks)

        if skipped:
            logger.debug(f"Dropped {skipped} SRT block(s) without timing or text")
        logger.info(f"Parsed {len(entries)} entries from SRT content")
        return SubtitleDocument(format=SubtitleFormat.SRT, entries=tuple(entries),
                                skipped_blocks=skipped)

    @classmethod
    def serialize(cls, entries: Sequence[SubtitleEntry], header: Optional[str] = None) -> str:
        """
        Serialize entries to SRT text.

        Index numbers come from list position, not from ``entry.index``.
        """
        return '\n\n'.join(
            f"{i}\n{entry.format_time_range('srt')}\n{entry.text}"
            for i, entry in enumerate(entries, start=1)
        )


class VTTParser(SRTParser):
    """Parser for WebVTT subtitle format."""

    format = SubtitleFormat.VTT

    @staticmethod
    def _split_time_line(time_line: str) -> Tuple[str, str]:
        start_str, after_arrow = time_line.split('-->', 1)
        # Cue settings (position, align, ...) follow the end time
        end_parts = after_arrow.split()
        return start_str.strip(), end_parts[0] if end_parts else ''

    @classmethod
    def parse(cls, content: str) -> SubtitleDocument:
        """
        Parse WebVTT text.

        Everything up to the first blank line (the WEBVTT line and header
        metadata) is discarded. Without a blank line there are no cues.
        """
        normalized = cls.normalize_content(content)

        header_end = re.search(r'\n[ \t]*\n', normalized)
        if not header_end:
            logger.info("Parsed 0 entries from VTT content (no cue section)")
            return SubtitleDocument(format=SubtitleFormat.VTT)

        blocks = cls.split_blocks(normalized[header_end.end():])
        entries, skipped = cls._parse_blocks(blocks)

        if skipped:
            logger.debug(f"Dropped {skipped} VTT block(s) without timing or text")
        logger.info(f"Parsed {len(entries)} entries from VTT content")
        return SubtitleDocument(format=SubtitleFormat.VTT, entries=tuple(entries),
                                skipped_blocks=skipped)

    @classmethod
    def serialize(cls, entries: Sequence[SubtitleEntry], header: Optional[str] = None) -> str:
        """Serialize entries to WebVTT text."""
        body = '\n\n'.join(
            f"{i}\n{entry.format_time_range('vtt')}\n{entry.text}"
            for i, entry in enumerate(entries, start=1)
        )
        return "WEBVTT\n\n" + body


class ASSParser(SubtitleParser):
    """Parser for ASS/SSA subtitle format."""

    format = SubtitleFormat.ASS

    @staticmethod
    def _find_events(lines: List[str]) -> Tuple[int, Optional[str]]:
        """Locate the [Events] section and its Format: line."""
        events_start = -1
        for i, line in enumerate(lines):
            stripped = line.strip().lower()
            if stripped == '[events]':
                events_start = i
            elif events_start >= 0 and stripped.startswith('format:'):
                return events_start, line
        return events_start, None

    @staticmethod
    def _parse_dialogue_line(line: str, start_idx: int, end_idx: int,
                             text_idx: int, column_count: int) -> Optional[Tuple[int, int, str]]:
        """
        Parse a Dialogue: line.

        The line is split into at most ``column_count`` fields, so commas in a
        trailing Text column stay part of the text.

        Returns:
            Tuple of (start_ms, end_ms, text) or None if there are too few fields
        """
        body = line.split(':', 1)[1].lstrip()
        parts = body.split(',', column_count - 1)
        if len(parts) <= max(start_idx, end_idx, text_idx):
            return None

        text = parts[text_idx].replace('\\N', '\n').replace('\\n', '\n')
        return (
            TimeConverter.parse_ass_timestamp(parts[start_idx]),
            TimeConverter.parse_ass_timestamp(parts[end_idx]),
            text,
        )

    @classmethod
    def parse(cls, content: str) -> SubtitleDocument:
        """
        Parse ASS/SSA text.

        The column order of dialogue lines is read from the Format: line of
        the [Events] section. Every line before [Events] is kept verbatim in
        ``header``. A file without [Events] or Format: yields no entries.
        """
        lines = cls.normalize_content(content).split('\n')

        events_start, format_line = cls._find_events(lines)
        header = '\n'.join(lines[:events_start if events_start >= 0 else len(lines)])

        if events_start < 0 or format_line is None:
            logger.warning("ASS content has no [Events] Format: line, no entries parsed")
            return SubtitleDocument(format=SubtitleFormat.ASS, header=header)

        columns = [c.strip().lower() for c in format_line.split(':', 1)[1].split(',')]
        try:
            start_idx = columns.index('start')
            end_idx = columns.index('end')
            text_idx = columns.index('text')
        except ValueError:
            logger.warning(f"ASS Format: line lacks Start/End/Text columns: {format_line.strip()}")
            return SubtitleDocument(format=SubtitleFormat.ASS, header=header)

        entries = []
        for line in lines[events_start + 1:]:
            line = line.strip()
            if not line.lower().startswith('dialogue:'):
                continue
            parsed = cls._parse_dialogue_line(line, start_idx, end_idx, text_idx, len(columns))
            if parsed is None:
                logger.debug(f"Skipping short dialogue line: {line}")
                continue
            start_ms, end_ms, text = parsed
            entries.append(SubtitleEntry(
                start_time=start_ms,
                end_time=end_ms,
                text=text,
                index=len(entries) + 1
            ))

        logger.info(f"Parsed {len(entries)} entries from ASS content")
        return SubtitleDocument(format=SubtitleFormat.ASS, entries=tuple(entries), header=header)

    @classmethod
    def serialize(cls, entries: Sequence[SubtitleEntry], header: Optional[str] = None) -> str:
        """
        Serialize entries to ASS text.

        Uses the preserved header if there is one, otherwise a default header
        with a single Default style.
        """
        header_text = header.rstrip('\n') if header else DEFAULT_ASS_HEADER

        output = [header_text, '', '[Events]', ASS_EVENTS_FORMAT]
        for entry in entries:
            start_str = TimeConverter.format_ass(entry.start_time)
            end_str = TimeConverter.format_ass(entry.end_time)
            text = entry.text.replace('\n', '\\N')
            output.append(f"Dialogue: 0,{start_str},{end_str},Default,,0,0,0,,{text}")

        return '\n'.join(output) + '\n'


class SubtitleFormatFactory:
    """Factory class for picking parsers and serializers by format."""

    _parsers = {
        SubtitleFormat.SRT: SRTParser,
        SubtitleFormat.VTT: VTTParser,
        SubtitleFormat.ASS: ASSParser,
    }

    @classmethod
    def get_parser(cls, format_type: SubtitleFormat) -> type:
        """
        Get a parser for the specified format.

        Raises:
            ValueError: If format is not supported
        """
        if format_type not in cls._parsers:
            raise ValueError(f"Unsupported subtitle format: {format_type}")
        return cls._parsers[format_type]

    @classmethod
    def parse_subtitles(cls, content: str, format_type: Optional[SubtitleFormat] = None,
                        filename: Optional[str] = None) -> SubtitleDocument:
        """
        Parse subtitle text of any supported format.

        Args:
            content: Raw subtitle text
            format_type: Format hint; detected from content (then filename) if None
            filename: Optional file name used when content is ambiguous

        Returns:
            SubtitleDocument
        """
        if format_type is None:
            format_type = FormatDetector.detect(content, filename)
        return cls.get_parser(format_type).parse(content)

    @classmethod
    def serialize_subtitles(cls, entries: Sequence[SubtitleEntry], format_type: SubtitleFormat,
                            header: Optional[str] = None) -> str:
        """Serialize entries to the specified format."""
        return cls.get_parser(format_type).serialize(entries, header)

    @classmethod
    def serialize_document(cls, document: SubtitleDocument,
                           format_type: Optional[SubtitleFormat] = None) -> str:
        """
        Serialize a document, optionally to a different format.

        The ASS header only travels along when the target is ASS.
        """
        target = format_type or document.format
        header = document.header if target == SubtitleFormat.ASS else None
        return cls.serialize_subtitles(document.entries, target, header)
