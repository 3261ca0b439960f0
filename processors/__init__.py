"""
Subtitle processing modules.

This package contains specialized processors for different subtitle operations:
- Error detection
- Automatic error repair
- Timing adjustment
- Entry editing
- Find and replace
- Format conversion
"""

from .error_detector import ErrorType, SubtitleError, FixOptions, detect_all_errors, group_errors
from .auto_fixer import fix_all_errors
from .timing_adjuster import TimingAdjuster
from .entry_editor import insert_entry, insert_entry_before, delete_entries, merge_entries, split_entry
from .find_replace import SearchOptions, find_matches, replace_first, replace_all
from .converter import FormatConverter

__all__ = [
    'ErrorType',
    'SubtitleError',
    'FixOptions',
    'detect_all_errors',
    'group_errors',
    'fix_all_errors',
    'TimingAdjuster',
    'insert_entry',
    'insert_entry_before',
    'delete_entries',
    'merge_entries',
    'split_entry',
    'SearchOptions',
    'find_matches',
    'replace_first',
    'replace_all',
    'FormatConverter'
]
