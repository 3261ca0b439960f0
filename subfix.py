#!/usr/bin/env python3
"""
Subtitle Fix Suite - Main Application Entry Point
=================================================

Keep the root directory clean: functionality lives in the core/, processors/,
ui/ and utils/ packages.

A tool for parsing, checking and repairing subtitle files with support for:
- Conversion between SRT, WebVTT and ASS/SSA
- Error detection (overlaps, duplicates, hearing-impaired text, long lines...)
- Readability QC (CPS, WPM, CPL) against named threshold profiles
- Automatic repair and timing shifts

Usage:
    python subfix.py convert movie.srt -o movie.vtt
    python subfix.py check movie.srt --profile netflix
    python subfix.py fix movie.srt --backup
    python subfix.py shift movie.srt --offset="-2.5s"
    python subfix.py profiles

    # Help
    python subfix.py --help
    python subfix.py <command> --help
"""

import sys
from pathlib import Path

# Add the current directory to Python path for imports
sys.path.insert(0, str(Path(__file__).parent))

from ui.cli import CLIHandler


def main():
    """
    Main application entry point.

    Parses arguments and dispatches to the command-line handler.
    """
    debug_mode = '--debug' in sys.argv or '-d' in sys.argv

    cli_handler = CLIHandler()
    cli_parser = cli_handler.create_parser()

    try:
        args = cli_parser.parse_args()
        exit_code = cli_handler.handle_command(args)
        sys.exit(exit_code)
    except SystemExit:
        # argparse calls sys.exit() for --help, --version, etc.
        raise
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        if debug_mode:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
