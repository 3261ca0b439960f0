"""
Encoding detection utilities for subtitle files.

This module reads subtitle files into text, honouring a UTF-8 BOM and using
charset-normalizer to guess legacy encodings.
"""

from pathlib import Path
from typing import Optional, Tuple

from charset_normalizer import from_bytes

from utils.constants import UTF8_BOM
from utils.logging_config import get_logger

logger = get_logger(__name__)


class EncodingDetector:
    """Handles encoding detection for subtitle files."""

    @staticmethod
    def detect_encoding(raw_data: bytes) -> Optional[str]:
        """
        Detect the encoding of raw subtitle bytes.

        Args:
            raw_data: File content

        Returns:
            Detected encoding name or None if detection failed

        Example:
            >>> encoding = EncodingDetector.detect_encoding(Path("subtitle.srt").read_bytes())
            >>> print(f"Detected encoding: {encoding}")
        """
        if raw_data.startswith(UTF8_BOM):
            return 'utf-8-sig'

        try:
            raw_data.decode('utf-8', 'strict')
            return 'utf-8'
        except UnicodeDecodeError:
            pass

        result = from_bytes(raw_data).best()
        if result is not None:
            logger.debug(f"charset-normalizer detected encoding: {result.encoding}")
            return result.encoding.lower()

        return None

    @staticmethod
    def read_file_with_encoding(file_path: Path) -> Tuple[str, str]:
        """
        Read a file with automatic encoding detection and proper BOM handling.

        Args:
            file_path: Path to the file to read

        Returns:
            Tuple of (file_content, encoding_used)

        Raises:
            IOError: If the file cannot be read

        Example:
            >>> content, encoding = EncodingDetector.read_file_with_encoding(Path("subtitle.srt"))
            >>> print(f"Read file with {encoding} encoding")
        """
        try:
            raw_data = file_path.read_bytes()
        except OSError as e:
            raise IOError(f"Cannot read file {file_path}: {e}")

        encoding = EncodingDetector.detect_encoding(raw_data)

        if not encoding:
            logger.warning(f"Failed to detect encoding for {file_path}, using UTF-8 with error replacement")
            return raw_data.decode('utf-8', 'replace'), 'utf-8'

        try:
            return raw_data.decode(encoding, 'strict'), encoding
        except (UnicodeDecodeError, LookupError) as e:
            logger.warning(f"Decoding {file_path.name} as {encoding} failed ({e}), using UTF-8 with error replacement")
            return raw_data.decode('utf-8', 'replace'), 'utf-8'
