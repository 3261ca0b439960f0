"""
Runtime configuration loaded from the environment.

Values come from SUBFIX_* environment variables, optionally read from a
``.env`` file. Anything not set falls back to the defaults in
``utils.constants``.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .constants import (
    ENV_PREFIX,
    DEFAULT_MAX_CHARS_PER_LINE,
    DEFAULT_MIN_DURATION_MS,
    DEFAULT_MAX_DURATION_MS,
    DEFAULT_MIN_GAP_MS,
)
from .logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Settings shared by the CLI and callers embedding the engine."""
    profile: Optional[str] = None
    max_chars_per_line: int = DEFAULT_MAX_CHARS_PER_LINE
    min_duration_ms: int = DEFAULT_MIN_DURATION_MS
    max_duration_ms: int = DEFAULT_MAX_DURATION_MS
    min_gap_ms: int = DEFAULT_MIN_GAP_MS
    log_level: str = "WARNING"


def _int_setting(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(ENV_PREFIX + key)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {ENV_PREFIX}{key}={raw!r}: not an integer")
        return default


def load_config(env_file: Optional[Path] = None,
                environ: Optional[Mapping[str, str]] = None) -> EngineConfig:
    """
    Build an EngineConfig from environment variables.

    Args:
        env_file: Optional .env file to load first (defaults to ./.env if present)
        environ: Mapping to read instead of os.environ (mainly for tests)

    Returns:
        EngineConfig instance

    Example:
        >>> config = load_config()
        >>> print(config.max_chars_per_line)
    """
    if environ is None:
        # Existing environment variables win over the .env file
        load_dotenv(dotenv_path=env_file, override=False)
        environ = os.environ

    profile = environ.get(ENV_PREFIX + "PROFILE") or None

    return EngineConfig(
        profile=profile.strip().lower() if profile else None,
        max_chars_per_line=_int_setting(environ, "MAX_CHARS_PER_LINE", DEFAULT_MAX_CHARS_PER_LINE),
        min_duration_ms=_int_setting(environ, "MIN_DURATION_MS", DEFAULT_MIN_DURATION_MS),
        max_duration_ms=_int_setting(environ, "MAX_DURATION_MS", DEFAULT_MAX_DURATION_MS),
        min_gap_ms=_int_setting(environ, "MIN_GAP_MS", DEFAULT_MIN_GAP_MS),
        log_level=environ.get(ENV_PREFIX + "LOG_LEVEL", "WARNING"),
    )
