"""
Module for listing the files of a build output directory.
"""
import logging
from pathlib import Path
from typing import Union

from .models import FileSet

logger = logging.getLogger(__name__)


class FileScanner:
    """Lists the files produced by a build."""

    def scan_folder(self, folder: Union[str, Path], pattern: str = "**/*") -> FileSet:
        """Recursively list the files under a folder.

        Args:
            folder: Distribution directory, as configured
            pattern: Glob pattern to match files against

        Returns:
            Sorted tuple of file paths rooted at ``folder``
        """
        folder = Path(folder)
        if not folder.is_dir():
            logger.error(f"Folder does not exist: {folder}")
            return ()

        files = tuple(sorted(p for p in folder.glob(pattern) if p.is_file()))
        logger.debug(f"Found {len(files)} files under {folder}")
        return files
