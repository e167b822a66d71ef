"""
Command orchestrator for duplicate detection.
Wires scanner output into the Candidate Index and owns the Hash Cache lifecycle.
Used by the CLI and by library callers alike.
"""
import logging
import time
from typing import Optional, Callable

from detectdups.core.models import ScanStatistics, DetectionParams
from detectdups.core.cache import HashCache
from detectdups.core.index import CandidateIndex
from detectdups.core.scanner import FileScannerImpl
from detectdups.core.normalizer import distinct_roots
from detectdups.core.interfaces import Hasher
from detectdups.services.file_service import FileService

logger = logging.getLogger(__name__)

PROGRESS_INTERVAL = 1000


class DetectionCommand:
    """
    Orchestrates the entire detection workflow:
    1. Open the hash cache (persistent when a cache file is configured)
    2. Scan every root and feed each path to the candidate index
    3. Flush and close the cache, return the statistics

    Usage:
        params = DetectionParams(roots=["~/Downloads"], recursive=True, cache_file="hashes.db")
        command = DetectionCommand()
        stats = command.execute(
            params,
            duplicate_callback=lambda path, existing, size: print(path, existing),
            error_callback=lambda path, error: print(path, error)
        )
    """

    def __init__(self, hasher: Optional[Hasher] = None, file_service: Optional[FileService] = None):
        self.hasher = hasher
        self.file_service = file_service or FileService()
        self.cache: Optional[HashCache] = None
        self.index: Optional[CandidateIndex] = None

    def execute(
            self,
            params: DetectionParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            duplicate_callback: Optional[Callable[[str, str, int], None]] = None,
            error_callback: Optional[Callable[[str, Exception], None]] = None
    ) -> ScanStatistics:
        """
        Execute detection with given parameters.

        Args:
            params: Validated detection parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)
            duplicate_callback: (duplicate_path, existing_path, size) -> None
            error_callback: (path, exception) -> None for skipped roots and directories

        Returns:
            Statistics of this run

        Raises:
            CacheWriteError: If computed hashes cannot be persisted
        """
        start_time = time.time()
        stats = ScanStatistics()
        if duplicate_callback:
            stats.add_listener(duplicate_callback)

        self.cache = HashCache(hasher=self.hasher, flush_size=params.flush_size)
        self.cache.initialize(params.cache_file)
        self.index = CandidateIndex(
            self.cache,
            stats=stats,
            file_service=self.file_service,
            delete_files=params.delete_files,
            use_trash=params.use_trash
        )

        roots = distinct_roots(params.roots, recursive=params.recursive)
        if len(roots) < len(params.roots):
            logger.info(f"Scanning {len(roots)} of {len(params.roots)} roots, the others are repeated or nested")

        try:
            for root in roots:
                if stopped_flag and stopped_flag():
                    break
                self._check_root(root, params.recursive, progress_callback, stopped_flag, error_callback)
        finally:
            self.cache.close()
            stats.total_time = time.time() - start_time

        if progress_callback:
            progress_callback("checking", stats.files_checked, stats.files_checked)
        return stats

    def _check_root(
            self,
            root: str,
            recursive: bool,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]],
            stopped_flag: Optional[Callable[[], bool]],
            error_callback: Optional[Callable[[str, Exception], None]]
    ) -> None:
        scanner = FileScannerImpl(root, recursive=recursive)
        try:
            scanner.validate_root()
        except RuntimeError as e:
            logger.warning(f"Skipping {scanner.root_dir}: {e}")
            if error_callback:
                error_callback(scanner.root_dir, e)
            return

        for path in scanner.scan(stopped_flag=stopped_flag, error_callback=error_callback):
            self.index.check(path)
            checked = self.index.stats.files_checked
            if progress_callback and checked and checked % PROGRESS_INTERVAL == 0:
                progress_callback("checking", checked, None)
