"""
Core subtitle processing modules.

This package contains the fundamental components for subtitle processing:
- Canonical data model and format handlers (SRT, WebVTT, ASS)
- Timestamp conversion
- Format and encoding detection
- Readability QC and threshold profiles
"""

from .subtitle_formats import (
    SubtitleFormat,
    SubtitleEntry,
    SubtitleDocument,
    SubtitleFormatFactory,
    SRTParser,
    VTTParser,
    ASSParser,
    generate_entry_id,
    reindex_entries,
    sort_entries,
    create_empty_entry,
)
from .timing_utils import TimeConverter
from .format_detection import FormatDetector
from .encoding_detection import EncodingDetector
from .subtitle_qc import QCThresholds, QCResult, EntryMetrics, evaluate_entry, evaluate_entries
from .style_profiles import StyleProfile, SUBTITLE_STYLE_PROFILES, DEFAULT_STYLE_PROFILE_ID, get_style_profile

__all__ = [
    'SubtitleFormat',
    'SubtitleEntry',
    'SubtitleDocument',
    'SubtitleFormatFactory',
    'SRTParser',
    'VTTParser',
    'ASSParser',
    'generate_entry_id',
    'reindex_entries',
    'sort_entries',
    'create_empty_entry',
    'TimeConverter',
    'FormatDetector',
    'EncodingDetector',
    'QCThresholds',
    'QCResult',
    'EntryMetrics',
    'evaluate_entry',
    'evaluate_entries',
    'StyleProfile',
    'SUBTITLE_STYLE_PROFILES',
    'DEFAULT_STYLE_PROFILE_ID',
    'get_style_profile',
]
