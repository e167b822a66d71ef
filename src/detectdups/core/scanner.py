"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements path enumeration for the detection engine.
Features:
- Lists the files of a root directory, optionally recursing into subdirectories
- Yields paths lazily so files are checked while the scan is running
- Reports unreadable directories and continues with the rest of the tree
"""

import os
import logging
from pathlib import Path
from typing import Optional, Callable, Iterator

from detectdups.core.interfaces import FileScanner
from detectdups.core.normalizer import normalize_path

logger = logging.getLogger(__name__)


class FileScannerImpl(FileScanner):
    """
    Enumerates files below a root directory.

    Attributes:
        root_dir: Root directory to scan (normalized to an absolute path)
        recursive: Descend into subdirectories
    """

    def __init__(self, root_dir: str, recursive: bool = False):
        self.root_dir = normalize_path(root_dir)
        self.recursive = recursive

    def validate_root(self) -> None:
        """
        Raises:
            RuntimeError: If the root directory does not exist or is not a directory
        """
        root_path = Path(self.root_dir)
        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

    def scan(self,
             stopped_flag: Optional[Callable[[], bool]] = None,
             error_callback: Optional[Callable[[str, Exception], None]] = None) -> Iterator[str]:
        """
        Yields the absolute path of every file in the root (and below, when recursive).
        Files of a directory are yielded before its subdirectories are entered.

        Raises:
            RuntimeError: If the root directory does not exist or is not a directory
        """
        self.validate_root()
        logger.debug(f"Scanning directory: {self.root_dir} (recursive={self.recursive})")

        def on_error(error: OSError) -> None:
            directory = error.filename or self.root_dir
            logger.warning(f"Unable to read directory '{directory}': {error.strerror or error}")
            if error_callback:
                error_callback(directory, error)

        # os.walk in top-down order yields a directory's files before visiting its children
        for root, dirs, files in os.walk(self.root_dir, onerror=on_error):
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                return

            dirs[:] = sorted(dirs) if self.recursive else []

            for filename in sorted(files):
                path = os.path.join(root, filename)
                if os.path.islink(path):
                    logger.debug(f"Skipping symbolic link: {path}")
                    continue
                yield path
