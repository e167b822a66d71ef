"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/index.py
Candidate Index: the duplicate-detection engine.

Files are partitioned by exact size. The overwhelming majority of files are
unique by size, so the first file of a size is parked as an Unhashed
placeholder and never read. Only when a second file of the same size arrives
is the placeholder promoted to a real digest, and from then on every file of
that size is hashed and compared against the bucket.

    size -> SizeBucket { Unhashed(path) }                      one file seen
    size -> SizeBucket { digest -> canonical path, ... }       two or more

The first path recorded for a digest is canonical and is never deleted;
later arrivals with the same digest are the ones reported (and removed).
"""

import logging
import os
import stat
import time
from typing import Dict, Optional, Mapping

from detectdups.core.cache import HashCache
from detectdups.core.models import SizeBucket, Unhashed, Hashed, HashResult, ScanStatistics
from detectdups.core.normalizer import same_file_path
from detectdups.services.file_service import FileService

logger = logging.getLogger(__name__)


class CandidateIndex:
    """
    Groups files by size, lazily promotes entries to real hashes, reports matches.

    Attributes:
        cache: Hash Cache consulted for every digest; the index never touches the store
        stats: Counters updated by check()
        delete_files: Remove reported duplicates from disk
        use_trash: Move removed duplicates to the trash instead of deleting them
    """

    def __init__(
        self,
        cache: HashCache,
        stats: Optional[ScanStatistics] = None,
        file_service: FileService = None,
        delete_files: bool = False,
        use_trash: bool = False
    ):
        self.cache = cache
        self.stats = stats or ScanStatistics()
        self.file_service = file_service or FileService()
        self.delete_files = delete_files
        self.use_trash = use_trash
        self._buckets: Dict[int, SizeBucket] = {}

    @property
    def buckets(self) -> Mapping[int, SizeBucket]:
        return self._buckets

    def check(self, path: str) -> None:
        """
        Registers one discovered file and reports it if it duplicates a known one.
        """
        try:
            st = os.stat(path)
        except OSError as e:
            logger.debug(f"Skipping {path}: {e}")
            return
        if not stat.S_ISREG(st.st_mode):
            logger.debug(f"Skipping {path}: not a regular file")
            return

        size = st.st_size
        self.stats.record_checked(size)

        bucket = self._buckets.get(size)
        if bucket is None:
            # because the size is new, no other file can match yet: don't read it
            self._buckets[size] = SizeBucket(size, placeholder=Unhashed(path))
            return

        if bucket.placeholder is not None:
            self._promote(bucket)

        result = self._hash(path)
        if not result.ok:
            logger.debug(f"Abandoning {path}: {result.error}")
            if len(bucket) == 0:
                del self._buckets[size]
            return

        canonical = bucket.find(result.digest)
        if canonical is None:
            bucket.add(Hashed(digest=result.digest, path=path))
        elif not same_file_path(path, canonical):
            self._found(path, canonical, size)

    def _promote(self, bucket: SizeBucket) -> None:
        """Hashes the placeholder of a bucket that just received its second file."""
        placeholder = bucket.placeholder
        result = self._hash(placeholder.path)
        if result.ok:
            bucket.promote(result.digest)
            return

        # The placeholder's file stays untracked for the rest of the run.
        bucket.drop_placeholder()
        logger.warning(f"Dropping {placeholder.path} from duplicate detection: {result.error}")

    def _hash(self, path: str) -> HashResult:
        start_time = time.time()
        result = self.cache.try_compute(path)
        self.stats.record_hash(result, time.time() - start_time)
        return result

    def _found(self, path: str, canonical: str, size: int) -> None:
        """Reports a duplicate and removes it if deletion is enabled. The canonical file is never touched."""
        logger.debug(f"{path} already exists as {canonical} [{size} bytes]")
        self.stats.record_duplicate(path, canonical, size)

        if not self.delete_files:
            return
        try:
            self.file_service.remove(path, use_trash=self.use_trash)
            self.stats.files_deleted += 1
        except (OSError, RuntimeError) as e:
            logger.warning(f"Failed to delete {path}: {e}")
