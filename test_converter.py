#!/usr/bin/env python3
"""Tests for format conversion and the file layer."""

from core.subtitle_formats import SubtitleFormatFactory
from processors.converter import FormatConverter
from utils.constants import BACKUP_DIR_NAME, DEFAULT_ASS_HEADER, SubtitleFormat
from utils.file_operations import FileHandler

SRT_TEXT = "1\n00:00:01,000 --> 00:00:02,500\nHello, world\n\n2\n00:00:03,000 --> 00:00:04,000\nBye\n"

ASS_TEXT = """[Script Info]
Title: Keep me

[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
Dialogue: 0,0:00:01.00,0:00:02.50,Default,,0,0,0,,Hello, world
"""


def test_convert_text_srt_to_vtt():
    """Test SRT to WebVTT conversion."""
    vtt = FormatConverter.convert_text(SRT_TEXT, SubtitleFormat.VTT)

    assert vtt == ("WEBVTT\n\n"
                   "1\n00:00:01.000 --> 00:00:02.500\nHello, world\n\n"
                   "2\n00:00:03.000 --> 00:00:04.000\nBye")


def test_convert_text_to_ass_and_back():
    """Test that SRT survives a trip through ASS at centisecond precision."""
    ass = FormatConverter.convert_text(SRT_TEXT, SubtitleFormat.ASS)
    assert ass.startswith(DEFAULT_ASS_HEADER)

    srt = FormatConverter.convert_text(ass, SubtitleFormat.SRT)
    assert srt == SRT_TEXT.rstrip("\n")


def test_convert_text_keeps_ass_header_only_for_ass():
    """Test header pass-through."""
    assert "Title: Keep me" in FormatConverter.convert_text(ASS_TEXT, SubtitleFormat.ASS)
    assert "Title: Keep me" not in FormatConverter.convert_text(ASS_TEXT, SubtitleFormat.VTT)


def test_convert_text_with_source_hint_and_filename():
    """Test explicit source format and filename-based detection."""
    vtt_body = "WEBVTT\n\n00:01.000 --> 00:02.000\nHi\n"
    assert FormatConverter.convert_text(vtt_body, SubtitleFormat.SRT, SubtitleFormat.VTT) == \
        "1\n00:00:01,000 --> 00:00:02,000\nHi"
    assert FormatConverter.convert_text("", SubtitleFormat.SRT, filename="empty.vtt") == ""


def test_convert_file_uses_output_extension(tmp_path):
    """Test converting a CRLF SRT file to ASS."""
    source = tmp_path / "movie.srt"
    source.write_bytes(SRT_TEXT.replace("\n", "\r\n").encode("utf-8"))
    target = tmp_path / "out" / "movie.ass"

    assert FormatConverter().convert_file(source, target)

    raw = target.read_bytes()
    assert b"\r" not in raw
    doc = SubtitleFormatFactory.parse_subtitles(raw.decode("utf-8"))
    assert doc.format == SubtitleFormat.ASS
    assert [e.text for e in doc.entries] == ["Hello, world", "Bye"]


def test_convert_file_reads_legacy_encoding(tmp_path):
    """Test that non-UTF-8 input is decoded and written as UTF-8."""
    source = tmp_path / "latin.srt"
    text = "1\n00:00:01,000 --> 00:00:02,000\nÇa va très bien, merci beaucoup à vous\n"
    source.write_bytes(text.encode("cp1252"))
    target = tmp_path / "latin.vtt"

    assert FormatConverter().convert_file(source, target)
    assert "WEBVTT" in target.read_text(encoding="utf-8")


def test_convert_file_failures_return_false(tmp_path):
    """Test that missing input and unknown extensions are reported, not raised."""
    converter = FormatConverter()
    source = tmp_path / "movie.srt"
    source.write_text(SRT_TEXT, encoding="utf-8")

    assert not converter.convert_file(tmp_path / "missing.srt", tmp_path / "out.vtt")
    assert not converter.convert_file(source, tmp_path / "out.txt")
    assert converter.convert_file(source, tmp_path / "out.txt", target_format=SubtitleFormat.VTT)


def test_convert_file_with_backup(tmp_path):
    """Test that an existing output file is backed up."""
    source = tmp_path / "movie.srt"
    source.write_text(SRT_TEXT, encoding="utf-8")
    target = tmp_path / "movie.vtt"
    target.write_text("old", encoding="utf-8")

    assert FormatConverter(create_backup=True).convert_file(source, target)

    backups = list((tmp_path / BACKUP_DIR_NAME).iterdir())
    assert len(backups) == 1
    assert backups[0].read_text(encoding="utf-8") == "old"


def test_safe_write_creates_directories(tmp_path):
    """Test safe_write with a missing parent directory."""
    target = tmp_path / "nested" / "dir" / "file.srt"
    FileHandler.safe_write(target, "content\n")

    assert target.read_text(encoding="utf-8") == "content\n"


def test_find_subtitle_files(tmp_path):
    """Test subtitle discovery by extension."""
    (tmp_path / "a.srt").write_text("", encoding="utf-8")
    (tmp_path / "b.txt").write_text("", encoding="utf-8")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "c.ass").write_text("", encoding="utf-8")

    assert [p.name for p in FileHandler.find_subtitle_files(tmp_path)] == ["a.srt", "c.ass"]
    assert [p.name for p in FileHandler.find_subtitle_files(tmp_path, recursive=False)] == ["a.srt"]
    assert FileHandler.find_subtitle_files(tmp_path / "nope") == []
