"""
Named QC threshold presets.

The set is closed: profiles are plain data selected by id.
"""

from dataclasses import dataclass
from typing import Dict, Tuple
from core.subtitle_qc import QCThresholds


@dataclass(frozen=True)
class StyleProfile:
    """A named threshold bundle."""
    id: str
    label: str
    description: str
    thresholds: QCThresholds


SUBTITLE_STYLE_PROFILES: Tuple[StyleProfile, ...] = (
    StyleProfile(
        id='youtube',
        label='YouTube',
        description='Balanced limits for general online video',
        thresholds=QCThresholds(max_cps=21, max_wpm=190, max_cpl=42,
                                min_duration_ms=700, max_duration_ms=7000, min_gap_ms=80),
    ),
    StyleProfile(
        id='netflix',
        label='Netflix',
        description='Streaming style guide limits (20 CPS, 2-frame gap at 24 fps)',
        thresholds=QCThresholds(max_cps=20, max_wpm=180, max_cpl=42,
                                min_duration_ms=833, max_duration_ms=7000, min_gap_ms=83),
    ),
    StyleProfile(
        id='broadcast',
        label='Broadcast',
        description='Conservative limits for television broadcast',
        thresholds=QCThresholds(max_cps=18, max_wpm=170, max_cpl=37,
                                min_duration_ms=1000, max_duration_ms=6000, min_gap_ms=120),
    ),
    StyleProfile(
        id='shortform',
        label='Short-form',
        description='Fast-paced limits for short vertical video',
        thresholds=QCThresholds(max_cps=24, max_wpm=210, max_cpl=48,
                                min_duration_ms=600, max_duration_ms=5000, min_gap_ms=60),
    ),
)

DEFAULT_STYLE_PROFILE_ID = 'youtube'

_PROFILES_BY_ID: Dict[str, StyleProfile] = {profile.id: profile for profile in SUBTITLE_STYLE_PROFILES}


def get_style_profile(profile_id: str) -> StyleProfile:
    """Return the profile with the given id, or the default profile."""
    return _PROFILES_BY_ID.get(profile_id, _PROFILES_BY_ID[DEFAULT_STYLE_PROFILE_ID])


def profile_ids() -> Tuple[str, ...]:
    """Ids of all available profiles, in display order."""
    return tuple(profile.id for profile in SUBTITLE_STYLE_PROFILES)
