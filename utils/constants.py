"""
Shared constants and configurations for the subtitle fix suite.

This module contains all the constants used across different modules including:
- Supported subtitle formats and extensions
- Default thresholds for error detection and auto-fixing
- Default ASS header used when none was preserved
- Logging and application metadata
"""

from enum import Enum
from typing import Set

# ============================================================================
# FILE FORMAT CONSTANTS
# ============================================================================

class SubtitleFormat(Enum):
    """Supported subtitle formats."""
    SRT = "srt"
    VTT = "vtt"
    ASS = "ass"

    @classmethod
    def from_extension(cls, ext: str) -> 'SubtitleFormat':
        """
        Get format from file extension.

        Args:
            ext: File extension (with or without dot)

        Returns:
            SubtitleFormat enum value

        Raises:
            ValueError: If extension is not supported
        """
        ext = ext.lower().lstrip('.')
        if ext == 'ssa':
            return cls.ASS
        for format_type in cls:
            if format_type.value == ext:
                return format_type
        raise ValueError(f"Unsupported subtitle format: {ext}")

    @classmethod
    def from_name(cls, name: str) -> 'SubtitleFormat':
        """
        Get format from a user-supplied name such as 'srt', 'webvtt' or 'ssa'.

        Raises:
            ValueError: If the name is not a known format
        """
        name = name.strip().lower()
        if name == 'webvtt':
            return cls.VTT
        return cls.from_extension(name)


# Supported subtitle file extensions
SUBTITLE_EXTENSIONS: Set[str] = {'.srt', '.ass', '.ssa', '.vtt'}

# UTF-8 BOM marker
UTF8_BOM: bytes = b"\xef\xbb\xbf"

# ============================================================================
# TIMING AND FIXING CONSTANTS
# ============================================================================

# Defaults for error detection and the auto-fix pipeline
DEFAULT_MAX_CHARS_PER_LINE: int = 42
DEFAULT_MIN_DURATION_MS: int = 500
DEFAULT_MAX_DURATION_MS: int = 10000
DEFAULT_MIN_GAP_MS: int = 80

# Floor used by the gap fixer when called on its own
DEFAULT_GAP_FIX_MIN_DURATION_MS: int = 300

# Two entries with equal text closer than this are duplicates
DUPLICATE_WINDOW_MS: int = 500

# Duration given to freshly created entries
DEFAULT_NEW_ENTRY_DURATION_MS: int = 2000

# Spacing used when inserting an entry after another one
DEFAULT_INSERT_GAP_MS: int = 100

# ============================================================================
# ASS CONSTANTS
# ============================================================================

ASS_EVENTS_FORMAT: str = "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text"

DEFAULT_ASS_HEADER: str = """[Script Info]
Title: Subtitle File
ScriptType: v4.00+
WrapStyle: 0
ScaledBorderAndShadow: yes
YCbCr Matrix: TV.709
PlayResX: 1920
PlayResY: 1080

[V4+ Styles]
Format: Name, Fontname, Fontsize, PrimaryColour, SecondaryColour, OutlineColour, BackColour, Bold, Italic, Underline, StrikeOut, ScaleX, ScaleY, Spacing, Angle, BorderStyle, Outline, Shadow, Alignment, MarginL, MarginR, MarginV, Encoding
Style: Default,Arial,48,&H00FFFFFF,&H000000FF,&H00000000,&H00000000,0,0,0,0,100,100,0,0,1,2,2,2,10,10,10,1"""

# ============================================================================
# DEFAULT CONFIGURATION VALUES
# ============================================================================

# Default backup directory name
BACKUP_DIR_NAME: str = "subtitle_backups"

# Prefix for environment variable overrides
ENV_PREFIX: str = "SUBFIX_"

# Default log format
DEFAULT_LOG_FORMAT: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEFAULT_LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'

# Application metadata
APP_NAME: str = "Subtitle Fix Suite"
APP_VERSION: str = "1.0.0"
APP_DESCRIPTION: str = """
A subtitle parsing, quality-control and auto-repair tool with support for:
- SRT, WebVTT and ASS/SSA parsing, serialization and conversion
- Readability QC (CPS, WPM, CPL) against named threshold profiles
- Error detection (overlaps, short gaps, duplicates, hearing-impaired text, ...)
- An ordered auto-fix pipeline
- Timing adjustment
"""
