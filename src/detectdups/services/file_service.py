"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
File removal for reported duplicates: clear the read-only attribute,
then delete permanently or move to the system trash.
"""
import os
import stat
import logging
from pathlib import Path

from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    Cross-platform file operations applied to duplicate files.
    All failures are reported as RuntimeError with the original cause chained.
    """

    @staticmethod
    def is_read_only(file_path: str) -> bool:
        """True if the owner write bit is not set."""
        return not os.stat(file_path).st_mode & stat.S_IWRITE

    @staticmethod
    def clear_read_only(file_path: str) -> None:
        """Makes the file writable (clears FILE_ATTRIBUTE_READONLY on Windows)."""
        path = Path(file_path)
        try:
            mode = path.stat().st_mode
            if not mode & stat.S_IWRITE:
                path.chmod(stat.S_IMODE(mode) | stat.S_IWRITE)
                logger.debug(f"Cleared read-only attribute of {path}")
        except OSError as e:
            raise RuntimeError(f"Failed to clear read-only attribute: {e}") from e

    @classmethod
    def delete_file(cls, file_path: str) -> None:
        """Permanently deletes a file, clearing its read-only attribute first."""
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        cls.clear_read_only(file_path)
        try:
            path.unlink()
        except OSError as e:
            raise RuntimeError(f"Failed to delete file: {e}") from e

    @classmethod
    def move_to_trash(cls, file_path: str) -> None:
        """Moves a file to the system trash, clearing its read-only attribute first."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        cls.clear_read_only(str(path))
        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

    @classmethod
    def remove(cls, file_path: str, use_trash: bool = False) -> None:
        """Deletes or trashes a file depending on use_trash."""
        if use_trash:
            cls.move_to_trash(file_path)
        else:
            cls.delete_file(file_path)
