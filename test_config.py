#!/usr/bin/env python3
"""Tests for environment configuration and logging setup."""

import logging

from utils.config import EngineConfig, load_config
from utils.constants import DEFAULT_MAX_CHARS_PER_LINE, DEFAULT_MIN_GAP_MS, SubtitleFormat
from utils.logging_config import ColoredFormatter, level_from_name, setup_logging


def test_load_config_defaults():
    """Test that an empty environment gives the built-in defaults."""
    assert load_config(environ={}) == EngineConfig()


def test_load_config_reads_prefixed_variables():
    """Test that SUBFIX_* variables override the defaults."""
    config = load_config(environ={
        "SUBFIX_PROFILE": " Netflix ",
        "SUBFIX_MAX_CHARS_PER_LINE": "37",
        "SUBFIX_MIN_DURATION_MS": "800",
        "SUBFIX_MAX_DURATION_MS": "6000",
        "SUBFIX_MIN_GAP_MS": "120",
        "SUBFIX_LOG_LEVEL": "DEBUG",
    })

    assert config.profile == "netflix"
    assert config.max_chars_per_line == 37
    assert config.min_duration_ms == 800
    assert config.max_duration_ms == 6000
    assert config.min_gap_ms == 120
    assert config.log_level == "DEBUG"


def test_load_config_ignores_invalid_integers():
    """Test that bad values fall back to defaults."""
    config = load_config(environ={"SUBFIX_MAX_CHARS_PER_LINE": "forty", "SUBFIX_MIN_GAP_MS": " "})

    assert config.max_chars_per_line == DEFAULT_MAX_CHARS_PER_LINE
    assert config.min_gap_ms == DEFAULT_MIN_GAP_MS


def test_load_config_from_env_file(tmp_path, monkeypatch):
    """Test loading a .env file without overriding existing variables."""
    env_file = tmp_path / ".env"
    env_file.write_text("SUBFIX_MAX_CHARS_PER_LINE=30\nSUBFIX_MIN_GAP_MS=100\n", encoding="utf-8")
    monkeypatch.delenv("SUBFIX_MAX_CHARS_PER_LINE", raising=False)
    monkeypatch.setenv("SUBFIX_MIN_GAP_MS", "90")

    config = load_config(env_file=env_file)

    assert config.max_chars_per_line == 30
    assert config.min_gap_ms == 90


def test_format_names():
    """Test format lookup by extension and name."""
    assert SubtitleFormat.from_extension(".SSA") == SubtitleFormat.ASS
    assert SubtitleFormat.from_name("webvtt") == SubtitleFormat.VTT
    assert SubtitleFormat.from_name("srt") == SubtitleFormat.SRT


def test_level_from_name():
    """Test log level name mapping."""
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("nonsense") == logging.WARNING
    assert level_from_name("") == logging.WARNING


def test_colored_formatter_does_not_alter_record():
    """Test that coloring does not leak into other handlers."""
    record = logging.LogRecord("subfix", logging.ERROR, __file__, 1, "boom", None, None)
    output = ColoredFormatter("%(levelname)s %(message)s").format(record)

    assert "boom" in output
    assert record.levelname == "ERROR"


def test_setup_logging_replaces_root_handlers():
    """Test that repeated setup leaves a single root handler."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(logging.DEBUG, use_colors=False)
        logger = setup_logging(logging.INFO, use_colors=False)

        assert logger is root
        assert len(root.handlers) == 1
        assert root.level == logging.INFO
        assert not isinstance(root.handlers[0].formatter, ColoredFormatter)
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
