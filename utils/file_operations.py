"""
File operations and backup utilities for subtitle processing.

This module provides safe file operations including:
- Backup creation with timestamps
- Safe file writing with newline normalization
- Subtitle file discovery
"""

import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from .constants import BACKUP_DIR_NAME, SUBTITLE_EXTENSIONS
from .logging_config import get_logger

logger = get_logger(__name__)


class FileHandler:
    """Handles file operations with proper error handling and logging."""

    @staticmethod
    def create_backup(file_path: Path, backup_dir: Optional[Path] = None) -> Path:
        """
        Create a backup of the file with timestamp.

        Args:
            file_path: Path to the file to backup
            backup_dir: Optional custom backup directory

        Returns:
            Path to the created backup file

        Raises:
            FileNotFoundError: If the file does not exist
            IOError: If backup creation fails

        Example:
            >>> backup_path = FileHandler.create_backup(Path("subtitle.srt"))
            >>> print(f"Backup created at: {backup_path}")
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        if backup_dir is None:
            backup_dir = file_path.parent / BACKUP_DIR_NAME

        backup_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        backup_path = backup_dir / f"{file_path.stem}_{timestamp}{file_path.suffix}"

        try:
            shutil.copy2(file_path, backup_path)
            logger.debug(f"Created backup: {backup_path}")
            return backup_path
        except Exception as e:
            logger.error(f"Failed to create backup for {file_path}: {e}")
            raise IOError(f"Backup creation failed: {e}")

    @staticmethod
    def safe_write(file_path: Path, content: str, encoding: str = 'utf-8',
                   create_backup: bool = False) -> None:
        """
        Safely write content to a file with optional backup.

        Args:
            file_path: Path to write to
            content: Content to write
            encoding: File encoding to use
            create_backup: Whether to create backup if file exists

        Raises:
            IOError: If write operation fails

        Example:
            >>> FileHandler.safe_write(Path("output.srt"), subtitle_content)
        """
        try:
            if create_backup and file_path.exists():
                FileHandler.create_backup(file_path)

            file_path.parent.mkdir(parents=True, exist_ok=True)

            with open(file_path, 'w', encoding=encoding, newline='\n') as f:
                f.write(content)

            logger.debug(f"Successfully wrote file: {file_path}")

        except Exception as e:
            logger.error(f"Failed to write file {file_path}: {e}")
            raise IOError(f"Write operation failed: {e}")

    @staticmethod
    def find_subtitle_files(directory: Path, recursive: bool = True) -> List[Path]:
        """
        Find all subtitle files in a directory.

        Args:
            directory: Directory to search
            recursive: Whether to search recursively

        Returns:
            Sorted list of subtitle file paths
        """
        if not directory.exists() or not directory.is_dir():
            logger.warning(f"Directory not found or not a directory: {directory}")
            return []

        pattern_func = directory.rglob if recursive else directory.glob

        subtitle_files = []
        for ext in SUBTITLE_EXTENSIONS:
            subtitle_files.extend(pattern_func(f"*{ext}"))

        subtitle_files.sort()

        logger.debug(f"Found {len(subtitle_files)} subtitle files in {directory}")
        return subtitle_files
