"""
Find and replace over entry text.

Every operation is a pure transform: entries whose text does not change are
returned as the same objects, and ids, timing and indexes are left alone.
"""

import re
from dataclasses import dataclass, replace
from typing import List, Optional, Pattern, Sequence
from core.subtitle_formats import SubtitleEntry
from utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SearchOptions:
    """How the search text is matched."""
    match_case: bool = False
    whole_word: bool = False
    use_regex: bool = False


DEFAULT_SEARCH_OPTIONS = SearchOptions()


def compile_search_pattern(find_text: str,
                           options: Optional[SearchOptions] = None) -> Optional[Pattern]:
    """
    Build the pattern for a search.

    Plain text is escaped before use, so ``a.b`` only matches a literal dot.
    Whole-word matching wraps the escaped text in ``\\b`` anchors; it is
    ignored in regex mode, where the expression is used as given.

    Returns:
        Compiled pattern, or None for an empty search

    Raises:
        ValueError: If regex mode is on and ``find_text`` is not a valid expression
    """
    if not find_text:
        return None

    options = options or DEFAULT_SEARCH_OPTIONS
    flags = 0 if options.match_case else re.IGNORECASE

    if options.use_regex:
        expression = find_text
    elif options.whole_word:
        expression = rf'\b{re.escape(find_text)}\b'
    else:
        expression = re.escape(find_text)

    try:
        return re.compile(expression, flags)
    except re.error as e:
        raise ValueError(f"Invalid search pattern {find_text!r}: {e}") from e


def _substitute(pattern: Pattern, replacement: str, text: str, count: int,
                use_regex: bool) -> str:
    # Group references like \1 are only expanded in regex mode
    if use_regex:
        try:
            return pattern.sub(replacement, text, count=count)
        except re.error as e:
            raise ValueError(f"Invalid replacement {replacement!r}: {e}") from e
    return pattern.sub(lambda match: replacement, text, count=count)


def find_matches(entries: Sequence[SubtitleEntry], find_text: str,
                 options: Optional[SearchOptions] = None) -> List[SubtitleEntry]:
    """Return the entries whose text contains the search, in list order."""
    pattern = compile_search_pattern(find_text, options)
    if pattern is None:
        return []
    return [e for e in entries if pattern.search(e.text)]


def replace_first(entries: Sequence[SubtitleEntry], find_text: str, replacement: str,
                  options: Optional[SearchOptions] = None) -> List[SubtitleEntry]:
    """Replace the first occurrence in the first matching entry."""
    options = options or DEFAULT_SEARCH_OPTIONS
    pattern = compile_search_pattern(find_text, options)
    result = list(entries)
    if pattern is None:
        return result

    for i, entry in enumerate(result):
        if pattern.search(entry.text):
            text = _substitute(pattern, replacement, entry.text, 1, options.use_regex)
            result[i] = replace(entry, text=text)
            logger.debug(f"Replaced first match in entry #{entry.index}")
            break
    return result


def replace_all(entries: Sequence[SubtitleEntry], find_text: str, replacement: str,
                options: Optional[SearchOptions] = None) -> List[SubtitleEntry]:
    """
    Replace every occurrence in every entry.

    Example:
        >>> replace_all(entries, "colour", "color", SearchOptions(whole_word=True))
    """
    options = options or DEFAULT_SEARCH_OPTIONS
    pattern = compile_search_pattern(find_text, options)
    if pattern is None:
        return list(entries)

    result = []
    changed = 0
    for entry in entries:
        text = _substitute(pattern, replacement, entry.text, 0, options.use_regex)
        if text == entry.text:
            result.append(entry)
        else:
            result.append(replace(entry, text=text))
            changed += 1

    logger.debug(f"Replaced text in {changed} entries")
    return result
