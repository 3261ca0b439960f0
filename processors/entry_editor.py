"""
Entry-level editing operations.

Insert, delete, merge and split return new, reindexed lists. An operation
that does not apply (unknown id, bad split point, fewer than two entries to
merge) hands back the entries unchanged.
"""

from dataclasses import replace
from typing import Iterable, List, Optional, Sequence
from core.subtitle_formats import SubtitleEntry, create_empty_entry, reindex_entries
from utils.constants import DEFAULT_INSERT_GAP_MS
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Lead time used when inserting in front of the first entry
_INSERT_BEFORE_FIRST_LEAD_MS = 2100


def _position_of(entries: Sequence[SubtitleEntry], entry_id: str) -> int:
    return next((i for i, e in enumerate(entries) if e.id == entry_id), -1)


def insert_entry(entries: Sequence[SubtitleEntry], after_id: Optional[str] = None,
                 text: str = '') -> List[SubtitleEntry]:
    """
    Insert a new two-second entry after ``after_id`` (or at the end).

    The new entry starts 100ms after the anchor entry ends.
    """
    insert_at = len(entries)
    start_time = 0

    anchor = _position_of(entries, after_id) if after_id else -1
    if anchor >= 0:
        insert_at = anchor + 1
        start_time = entries[anchor].end_time + DEFAULT_INSERT_GAP_MS
    elif entries:
        start_time = entries[-1].end_time + DEFAULT_INSERT_GAP_MS

    new_entry = replace(create_empty_entry(start_time), text=text)
    result = list(entries)
    result.insert(insert_at, new_entry)
    logger.debug(f"Inserted entry {new_entry.id} at position {insert_at + 1}")
    return reindex_entries(result)


def insert_entry_before(entries: Sequence[SubtitleEntry], before_id: str,
                        text: str = '') -> List[SubtitleEntry]:
    """Insert a new two-second entry in front of ``before_id`` (or at the start)."""
    position = _position_of(entries, before_id)
    insert_at = max(position, 0)

    start_time = 0
    if position > 0:
        start_time = entries[position - 1].end_time + DEFAULT_INSERT_GAP_MS
    elif position == 0:
        start_time = max(0, entries[0].start_time - _INSERT_BEFORE_FIRST_LEAD_MS)

    new_entry = replace(create_empty_entry(start_time), text=text)
    result = list(entries)
    result.insert(insert_at, new_entry)
    logger.debug(f"Inserted entry {new_entry.id} at position {insert_at + 1}")
    return reindex_entries(result)


def delete_entries(entries: Sequence[SubtitleEntry], ids: Iterable[str]) -> List[SubtitleEntry]:
    """Remove the entries with the given ids."""
    doomed = set(ids)
    result = [e for e in entries if e.id not in doomed]
    logger.debug(f"Deleted {len(entries) - len(result)} entries")
    return reindex_entries(result)


def merge_entries(entries: Sequence[SubtitleEntry], ids: Iterable[str]) -> List[SubtitleEntry]:
    """
    Merge the given entries into one.

    The merged entry keeps the id and start of the earliest entry, ends with
    the latest one, joins the texts with newlines and takes the earliest
    entry's place in the list.
    """
    wanted = set(ids)
    to_merge = sorted((e for e in entries if e.id in wanted), key=lambda e: e.start_time)
    if len(to_merge) < 2:
        return list(entries)

    first = to_merge[0]
    merged = replace(
        first,
        end_time=to_merge[-1].end_time,
        text='\n'.join(e.text for e in to_merge)
    )

    result = []
    for entry in entries:
        if entry.id == first.id:
            result.append(merged)
        elif entry.id not in wanted:
            result.append(entry)

    logger.debug(f"Merged {len(to_merge)} entries into {merged.id}")
    return reindex_entries(result)


def split_entry(entries: Sequence[SubtitleEntry], entry_id: str,
                split_time_ms: int) -> List[SubtitleEntry]:
    """
    Split an entry in two at ``split_time_ms``.

    Both halves keep the full text; the second half gets a new id. The split
    point must lie strictly inside the entry.
    """
    position = _position_of(entries, entry_id)
    if position < 0:
        return list(entries)

    entry = entries[position]
    if not entry.start_time < split_time_ms < entry.end_time:
        logger.debug(f"Split point {split_time_ms}ms is outside entry {entry_id}")
        return list(entries)

    first_half = replace(entry, end_time=split_time_ms)
    second_half = SubtitleEntry(start_time=split_time_ms, end_time=entry.end_time, text=entry.text)

    result = list(entries)
    result[position:position + 1] = [first_half, second_half]
    return reindex_entries(result)
