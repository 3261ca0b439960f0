"""
Format conversion processor for subtitle files.

Conversion is parse-then-reserialize through the canonical entry model, so
any of SRT, WebVTT and ASS can be turned into any other.
"""

from pathlib import Path
from typing import Optional
from core.encoding_detection import EncodingDetector
from core.subtitle_formats import SubtitleDocument, SubtitleFormatFactory
from utils.constants import SubtitleFormat
from utils.file_operations import FileHandler
from utils.logging_config import get_logger

logger = get_logger(__name__)


class FormatConverter:
    """Converts subtitle text and files between formats."""

    def __init__(self, create_backup: bool = False):
        """
        Initialize the format converter.

        Args:
            create_backup: Whether to back up an output file before overwriting it
        """
        self.create_backup = create_backup

    @staticmethod
    def load_document(file_path: Path,
                      format_type: Optional[SubtitleFormat] = None) -> SubtitleDocument:
        """
        Read and parse a subtitle file.

        Raises:
            IOError: If the file cannot be read
        """
        content, encoding = EncodingDetector.read_file_with_encoding(file_path)
        logger.debug(f"Read {file_path.name} with encoding: {encoding}")
        document = SubtitleFormatFactory.parse_subtitles(content, format_type, file_path.name)
        if document.skipped_blocks:
            logger.warning(f"{file_path.name}: skipped {document.skipped_blocks} block(s) "
                           f"without timing or text")
        return document

    def save_document(self, document: SubtitleDocument, output_path: Path,
                      format_type: Optional[SubtitleFormat] = None) -> None:
        """
        Serialize a document and write it as UTF-8.

        Raises:
            IOError: If the file cannot be written
        """
        content = SubtitleFormatFactory.serialize_document(document, format_type)
        FileHandler.safe_write(output_path, content, create_backup=self.create_backup)
        logger.info(f"Created {(format_type or document.format).value.upper()} file: {output_path}")

    @staticmethod
    def convert_text(content: str, target_format: SubtitleFormat,
                     source_format: Optional[SubtitleFormat] = None,
                     filename: Optional[str] = None) -> str:
        """
        Convert subtitle text to another format.

        Args:
            content: Raw subtitle text
            target_format: Output format
            source_format: Input format (detected if None)
            filename: Optional source file name used for detection

        Returns:
            Serialized text in the target format

        Example:
            >>> vtt = FormatConverter.convert_text(srt_text, SubtitleFormat.VTT)
        """
        document = SubtitleFormatFactory.parse_subtitles(content, source_format, filename)
        logger.debug(f"Converting {len(document)} entries from {document.format.value} "
                     f"to {target_format.value}")
        return SubtitleFormatFactory.serialize_document(document, target_format)

    def convert_file(self, input_path: Path, output_path: Path,
                     target_format: Optional[SubtitleFormat] = None,
                     source_format: Optional[SubtitleFormat] = None) -> bool:
        """
        Convert a subtitle file to another format.

        Args:
            input_path: Source subtitle file
            output_path: Destination file
            target_format: Output format (from output_path's extension if None)
            source_format: Input format (detected if None)

        Returns:
            True if conversion was successful
        """
        try:
            if target_format is None:
                target_format = SubtitleFormat.from_extension(output_path.suffix)

            document = self.load_document(input_path, source_format)
            if not document.entries:
                logger.warning(f"No subtitle entries found in {input_path.name}")

            self.save_document(document, output_path, target_format)
            return True

        except (IOError, ValueError) as e:
            logger.error(f"Failed to convert {input_path}: {e}")
            return False
