"""
Command-line interface for the Subtitle Fix Suite.

This module provides CLI functionality for format conversion, quality
checks, automatic repair and timing shifts.
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional
from core.style_profiles import SUBTITLE_STYLE_PROFILES, get_style_profile, profile_ids
from core.subtitle_formats import SubtitleDocument
from core.subtitle_qc import QCThresholds, evaluate_entries, summarize
from core.timing_utils import TimeConverter
from processors.auto_fixer import fix_all_errors
from processors.converter import FormatConverter
from processors.error_detector import FixOptions, detect_all_errors, group_errors
from processors.find_replace import SearchOptions, find_matches, replace_all, replace_first
from processors.timing_adjuster import TimingAdjuster
from utils.config import EngineConfig, load_config
from utils.constants import APP_NAME, APP_VERSION, APP_DESCRIPTION, SubtitleFormat
from utils.file_operations import FileHandler
from utils.logging_config import setup_logging, get_logger, level_from_name

logger = get_logger(__name__)

FORMAT_CHOICES = ['srt', 'vtt', 'webvtt', 'ass', 'ssa']


def setup_cli_logging(verbose: bool = False, debug: bool = False, use_colors: bool = True,
                      default_level: int = logging.WARNING) -> logging.Logger:
    """Set up logging for CLI operations."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = default_level

    return setup_logging(level=level, use_colors=use_colors)


def _format_arg(value: Optional[str]) -> Optional[SubtitleFormat]:
    return SubtitleFormat.from_name(value) if value else None


class CLIHandler:
    """Handles command-line interface operations."""

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize the CLI handler.

        Args:
            config: Engine settings (loaded from the environment if None)
        """
        self.config = config or load_config()

    def create_parser(self) -> argparse.ArgumentParser:
        """
        Create the main argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog='subfix',
            description=f"{APP_NAME} v{APP_VERSION}\n{APP_DESCRIPTION}",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Convert SRT to WebVTT
  subfix convert movie.srt -o movie.vtt

  # Check readability against the Netflix profile
  subfix check movie.srt --profile netflix

  # Auto-fix and keep a backup of the original
  subfix fix movie.srt --backup

  # Shift all subtitles 2.5 seconds earlier
  subfix shift movie.srt --offset="-2.5s"

  # Replace a word everywhere, whole words only
  subfix replace movie.srt --find colour --replace color --whole-word
            """
        )

        parser.add_argument('--version', action='version', version=f'{APP_NAME} {APP_VERSION}')
        parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose output')
        parser.add_argument('-d', '--debug', action='store_true', help='Enable debug output')
        parser.add_argument('--no-colors', action='store_true', help='Disable colored output')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        self._add_convert_parser(subparsers)
        self._add_check_parser(subparsers)
        self._add_fix_parser(subparsers)
        self._add_shift_parser(subparsers)
        self._add_replace_parser(subparsers)
        self._add_profiles_parser(subparsers)

        return parser

    @staticmethod
    def _add_threshold_arguments(command_parser):
        """Add the threshold flags shared by check and fix."""
        command_parser.add_argument('--max-chars', type=int, help='Maximum characters per line')
        command_parser.add_argument('--min-duration', type=int, help='Minimum entry duration (ms)')
        command_parser.add_argument('--max-duration', type=int, help='Maximum entry duration (ms)')
        command_parser.add_argument('--min-gap', type=int, help='Minimum gap between entries (ms)')

    def _add_convert_parser(self, subparsers):
        """Add convert command parser."""
        convert_parser = subparsers.add_parser(
            'convert',
            help='Convert between SRT, WebVTT and ASS',
            description='Parse a subtitle file and write it in another format'
        )

        convert_parser.add_argument('input', type=Path, help='Subtitle file to convert')
        convert_parser.add_argument('-o', '--output', type=Path, required=True, help='Output file path')
        convert_parser.add_argument('--to', choices=FORMAT_CHOICES,
                                    help='Output format (default: from output extension)')
        convert_parser.add_argument('--from', dest='source_format', choices=FORMAT_CHOICES,
                                    help='Input format (default: detected)')
        convert_parser.add_argument('-b', '--backup', action='store_true',
                                    help='Back up the output file if it already exists')

    def _add_check_parser(self, subparsers):
        """Add check command parser."""
        check_parser = subparsers.add_parser(
            'check',
            help='Report errors and readability issues',
            description='Run the error detectors and the QC evaluator on a subtitle file'
        )

        check_parser.add_argument('input', type=Path, help='Subtitle file or directory to check')
        check_parser.add_argument('-r', '--recursive', action='store_true',
                                  help='Search subdirectories when input is a directory')
        check_parser.add_argument('--profile', choices=profile_ids(),
                                  help='QC threshold profile (default: SUBFIX_PROFILE or youtube)')
        self._add_threshold_arguments(check_parser)

    def _add_fix_parser(self, subparsers):
        """Add fix command parser."""
        fix_parser = subparsers.add_parser(
            'fix',
            help='Automatically repair common errors',
            description='Run the auto-fix pipeline and write the result'
        )

        fix_parser.add_argument('input', type=Path, help='Subtitle file to fix')
        fix_parser.add_argument('-o', '--output', type=Path, help='Output file path (default: overwrite input)')
        fix_parser.add_argument('--to', choices=FORMAT_CHOICES, help='Output format')
        fix_parser.add_argument('-b', '--backup', action='store_true',
                                help='Create backup of the file being overwritten')
        self._add_threshold_arguments(fix_parser)

    def _add_shift_parser(self, subparsers):
        """Add shift command parser."""
        shift_parser = subparsers.add_parser(
            'shift',
            help='Shift subtitle timing',
            description='Shift all subtitles by a fixed offset'
        )

        shift_parser.add_argument('input', type=Path, help='Subtitle file to shift')
        shift_parser.add_argument('--offset', required=True,
                                  help='Offset such as "2.5s", "-1500ms" or "-00:00:02,500"')
        shift_parser.add_argument('-o', '--output', type=Path, help='Output file path (default: overwrite input)')
        shift_parser.add_argument('-b', '--backup', action='store_true',
                                  help='Create backup of the file being overwritten')

    def _add_replace_parser(self, subparsers):
        """Add replace command parser."""
        replace_parser = subparsers.add_parser(
            'replace',
            help='Find and replace subtitle text',
            description='Replace text in subtitle entries'
        )

        replace_parser.add_argument('input', type=Path, help='Subtitle file to edit')
        replace_parser.add_argument('--find', required=True, help='Text or pattern to search for')
        replace_parser.add_argument('--replace', dest='replacement', default='',
                                    help='Replacement text (default: remove matches)')
        replace_parser.add_argument('--match-case', action='store_true', help='Case-sensitive search')
        replace_parser.add_argument('--whole-word', action='store_true', help='Only match whole words')
        replace_parser.add_argument('--regex', action='store_true',
                                    help='Treat --find as a regular expression')
        replace_parser.add_argument('--first', action='store_true',
                                    help='Only replace the first match in the file')
        replace_parser.add_argument('-o', '--output', type=Path, help='Output file path (default: overwrite input)')
        replace_parser.add_argument('-b', '--backup', action='store_true',
                                    help='Create backup of the file being overwritten')

    def _add_profiles_parser(self, subparsers):
        """Add profiles command parser."""
        subparsers.add_parser(
            'profiles',
            help='List QC threshold profiles',
            description='Show the available QC threshold profiles'
        )

    def handle_command(self, args) -> int:
        """
        Handle the parsed command-line arguments.

        Args:
            args: Parsed arguments from argparse

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        setup_cli_logging(args.verbose, args.debug, not args.no_colors,
                          level_from_name(self.config.log_level))

        if not args.command:
            logger.error("No command specified. Use --help for usage information.")
            return 1

        try:
            if args.command == 'convert':
                return self._handle_convert(args)
            elif args.command == 'check':
                return self._handle_check(args)
            elif args.command == 'fix':
                return self._handle_fix(args)
            elif args.command == 'shift':
                return self._handle_shift(args)
            elif args.command == 'replace':
                return self._handle_replace(args)
            elif args.command == 'profiles':
                return self._handle_profiles(args)
            else:
                logger.error(f"Unknown command: {args.command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}")
            if args.debug:
                import traceback
                traceback.print_exc()
            return 1

    def _fix_options(self, args) -> FixOptions:
        """Environment settings with any explicit threshold flags applied."""
        return FixOptions(
            max_chars_per_line=args.max_chars if args.max_chars is not None else self.config.max_chars_per_line,
            min_duration_ms=args.min_duration if args.min_duration is not None else self.config.min_duration_ms,
            max_duration_ms=args.max_duration if args.max_duration is not None else self.config.max_duration_ms,
            min_gap_ms=args.min_gap if args.min_gap is not None else self.config.min_gap_ms,
        )

    def _qc_thresholds(self, args) -> QCThresholds:
        """Profile thresholds with any explicit threshold flags applied."""
        profile = get_style_profile(args.profile or self.config.profile or '')
        logger.info(f"Using QC profile: {profile.label}")

        overrides = {}
        if args.max_chars is not None:
            overrides['max_cpl'] = args.max_chars
        if args.min_duration is not None:
            overrides['min_duration_ms'] = args.min_duration
        if args.max_duration is not None:
            overrides['max_duration_ms'] = args.max_duration
        if args.min_gap is not None:
            overrides['min_gap_ms'] = args.min_gap
        return replace(profile.thresholds, **overrides)

    @staticmethod
    def _write_document(document: SubtitleDocument, output_path: Path,
                        target_format: Optional[SubtitleFormat], backup: bool) -> None:
        if target_format is None:
            try:
                target_format = SubtitleFormat.from_extension(output_path.suffix)
            except ValueError:
                target_format = document.format
        FormatConverter(create_backup=backup).save_document(document, output_path, target_format)

    def _handle_convert(self, args) -> int:
        """Handle convert command."""
        if not args.input.exists():
            logger.error(f"Input file not found: {args.input}")
            return 1

        converter = FormatConverter(create_backup=args.backup)
        success = converter.convert_file(
            input_path=args.input,
            output_path=args.output,
            target_format=_format_arg(args.to),
            source_format=_format_arg(args.source_format)
        )

        if success:
            logger.info(f"Successfully converted: {args.input} -> {args.output}")
        return 0 if success else 1

    def _check_file(self, input_path: Path, args) -> bool:
        """Print the report for one file. Returns True if it has no issues."""
        document = FormatConverter.load_document(input_path)
        entries = list(document.entries)

        errors = detect_all_errors(entries, self._fix_options(args))
        summary = summarize(evaluate_entries(entries, self._qc_thresholds(args)))

        running_time = max((e.end_time for e in entries), default=0)
        print(f"{input_path.name}: {len(entries)} entries ({document.format.value.upper()}, "
              f"{TimeConverter.format_duration(running_time)})")

        for error_type, type_errors in group_errors(errors).items():
            print(f"\n{error_type.value} ({len(type_errors)}):")
            for error in type_errors:
                print(f"  {error.description}")

        if summary:
            print("\nQC summary:")
            for issue, count in summary.items():
                print(f"  {issue}: {count}")

        if not errors and not summary:
            print("No issues found")
            return True
        return False

    def _handle_check(self, args) -> int:
        """Handle check command."""
        if not args.input.exists():
            logger.error(f"Input file not found: {args.input}")
            return 1

        if args.input.is_dir():
            input_files = FileHandler.find_subtitle_files(args.input, recursive=args.recursive)
            if not input_files:
                logger.error(f"No subtitle files found in {args.input}")
                return 1
        else:
            input_files = [args.input]

        failed = 0
        for i, input_path in enumerate(input_files):
            if i:
                print()
            if not self._check_file(input_path, args):
                failed += 1

        if len(input_files) > 1:
            print(f"\nChecked {len(input_files)} files, {failed} with issues")
        return 1 if failed else 0

    def _handle_fix(self, args) -> int:
        """Handle fix command."""
        if not args.input.exists():
            logger.error(f"Input file not found: {args.input}")
            return 1

        document = FormatConverter.load_document(args.input)
        options = self._fix_options(args)

        before = detect_all_errors(document.entries, options)
        fixed = document.with_entries(fix_all_errors(document.entries, options))
        remaining = detect_all_errors(fixed.entries, options)

        output_path = args.output or args.input
        self._write_document(fixed, output_path, _format_arg(args.to), args.backup)

        print(f"Fixed {args.input.name}: {len(before)} error(s) before, {len(remaining)} after "
              f"({len(document)} -> {len(fixed)} entries)")
        return 0

    def _handle_shift(self, args) -> int:
        """Handle shift command."""
        if not args.input.exists():
            logger.error(f"Input file not found: {args.input}")
            return 1

        offset_ms = TimeConverter.parse_offset(args.offset)
        document = FormatConverter.load_document(args.input)
        shifted = document.with_entries(TimingAdjuster.shift(document.entries, offset_ms))

        output_path = args.output or args.input
        self._write_document(shifted, output_path, None, args.backup)

        print(f"Shifted {len(shifted)} entries by {offset_ms}ms")
        return 0

    def _handle_replace(self, args) -> int:
        """Handle replace command."""
        if not args.input.exists():
            logger.error(f"Input file not found: {args.input}")
            return 1

        options = SearchOptions(match_case=args.match_case, whole_word=args.whole_word,
                                use_regex=args.regex)
        document = FormatConverter.load_document(args.input)

        try:
            matches = find_matches(document.entries, args.find, options)
            if not matches:
                print(f"No matches for {args.find!r}")
                return 0

            edit = replace_first if args.first else replace_all
            edited = edit(document.entries, args.find, args.replacement, options)
        except ValueError as e:
            logger.error(str(e))
            return 1

        changed = sum(1 for old, new in zip(document.entries, edited) if old is not new)
        output_path = args.output or args.input
        self._write_document(document.with_entries(edited), output_path, None, args.backup)

        print(f"Replaced text in {changed} of {len(matches)} matching entries")
        return 0

    def _handle_profiles(self, args) -> int:
        """Handle profiles command."""
        for profile in SUBTITLE_STYLE_PROFILES:
            t = profile.thresholds
            print(f"{profile.id:<10} {profile.label}: {profile.description}")
            print(f"{'':<10} CPS {t.max_cps}, WPM {t.max_wpm}, CPL {t.max_cpl}, "
                  f"duration {t.min_duration_ms}-{t.max_duration_ms}ms, gap {t.min_gap_ms}ms")
        return 0


def main():
    """Main entry point for CLI."""
    cli = CLIHandler()
    parser = cli.create_parser()
    args = parser.parse_args()

    exit_code = cli.handle_command(args)
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
