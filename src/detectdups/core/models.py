"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for duplicate detection: bucket entries, size buckets,
hash results, scan statistics and run parameters.
"""

from dataclasses import dataclass
from typing import List, Dict, Optional, Union, Callable, Iterator
import logging

from detectdups.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


# ======================
#  Bucket entries
# ======================

@dataclass(frozen=True)
class Unhashed:
    """A file whose hash computation is deferred until a second file of the same size shows up."""
    path: str


@dataclass(frozen=True)
class Hashed:
    """A file with a known content digest."""
    digest: str
    path: str


BucketEntry = Union[Unhashed, Hashed]


class SizeBucket:
    """
    All known files sharing one exact size.

    Holds either a single Unhashed placeholder or a mapping
    digest -> canonical path. The first path recorded for a digest
    stays canonical for the rest of the run.
    """

    def __init__(self, size: int, placeholder: Optional[Unhashed] = None):
        if size < 0:
            raise ValueError("Bucket size cannot be negative")
        self.size = size
        self._placeholder: Optional[Unhashed] = placeholder
        self._entries: Dict[str, str] = {}

    @property
    def placeholder(self) -> Optional[Unhashed]:
        return self._placeholder

    def promote(self, digest: str) -> Hashed:
        """Replace the placeholder by its hashed form."""
        if self._placeholder is None:
            raise ValueError("Bucket has no placeholder to promote")
        entry = Hashed(digest=digest, path=self._placeholder.path)
        self._placeholder = None
        self._entries[digest] = entry.path
        return entry

    def drop_placeholder(self) -> Optional[Unhashed]:
        dropped, self._placeholder = self._placeholder, None
        return dropped

    def find(self, digest: str) -> Optional[str]:
        """Canonical path recorded for this digest, if any."""
        return self._entries.get(digest)

    def add(self, entry: Hashed) -> None:
        if self._placeholder is not None:
            raise ValueError("Cannot add hashed entry while a placeholder is pending")
        if entry.digest in self._entries:
            raise ValueError(f"Digest {entry.digest} already has a canonical entry")
        self._entries[entry.digest] = entry.path

    def entries(self) -> Iterator[BucketEntry]:
        if self._placeholder is not None:
            yield self._placeholder
        for digest, path in self._entries.items():
            yield Hashed(digest=digest, path=path)

    def __len__(self) -> int:
        return len(self._entries) + (1 if self._placeholder is not None else 0)

    def __repr__(self):
        return f"<SizeBucket size={self.size}, entries={len(self)}>"


@dataclass(frozen=True)
class HashResult:
    """
    Outcome of a hash computation.
    Exactly one of digest / error is set.
    """
    path: str
    digest: Optional[str] = None
    error: Optional[Exception] = None
    cached: bool = False

    @property
    def ok(self) -> bool:
        return self.digest is not None

    @classmethod
    def success(cls, path: str, digest: str, cached: bool = False) -> "HashResult":
        return cls(path=path, digest=digest, cached=cached)

    @classmethod
    def failure(cls, path: str, error: Exception) -> "HashResult":
        return cls(path=path, error=error)


# ======================
#  Statistics
# ======================

class ScanStatistics:
    """
    Counters collected during one detection run. Never persisted.
    """
    def __init__(self):
        self.files_checked: int = 0
        self.bytes_checked: int = 0
        self.files_detected: int = 0
        self.bytes_detected: int = 0
        self.hashes_computed: int = 0
        self.cache_hits: int = 0
        self.hash_failures: int = 0
        self.files_deleted: int = 0
        self.hash_time: float = 0.0
        self.total_time: float = 0.0
        self._listeners: List[Callable[[str, str, int], None]] = []

    def add_listener(self, listener: Callable[[str, str, int], None]):
        """Adds a listener called as (duplicate_path, canonical_path, size) for every duplicate."""
        self._listeners.append(listener)

    def record_checked(self, size: int) -> None:
        self.files_checked += 1
        self.bytes_checked += size

    def record_duplicate(self, path: str, canonical: str, size: int) -> None:
        self.files_detected += 1
        self.bytes_detected += size

        for listener in self._listeners:
            try:
                listener(path, canonical, size)
            except Exception:
                logger.exception("Error in duplicate listener")

    def record_hash(self, result: HashResult, duration: float = 0.0) -> None:
        if not result.ok:
            self.hash_failures += 1
        elif result.cached:
            self.cache_hits += 1
        else:
            self.hashes_computed += 1
            self.hash_time += duration

    @property
    def duplicate_file_ratio(self) -> float:
        return self.files_detected / self.files_checked if self.files_checked else 0.0

    @property
    def duplicate_byte_ratio(self) -> float:
        return self.bytes_detected / self.bytes_checked if self.bytes_checked else 0.0

    def print_summary(self) -> str:
        lines = [
            "_" * 84,
            f"Finished after {ConvertUtils.seconds_to_human(self.total_time)}",
            f"Checked a total of {self.files_checked} files using "
            f"{ConvertUtils.bytes_to_human(self.bytes_checked)}, "
            f"calculating {self.hashes_computed} hashes "
            f"({self.cache_hits} served from cache).",
            f"Of these, {self.files_detected} files "
            f"[{ConvertUtils.ratio_to_percent(self.duplicate_file_ratio)}] using "
            f"{ConvertUtils.bytes_to_human(self.bytes_detected)} "
            f"[{ConvertUtils.ratio_to_percent(self.duplicate_byte_ratio)}] were duplicates.",
        ]
        if self.files_deleted:
            lines.append(f"Deleted {self.files_deleted} duplicate files.")
        if self.hash_failures:
            lines.append(f"Skipped {self.hash_failures} files that could not be hashed.")
        return "\n".join(lines)

    def __repr__(self):
        return (f"<ScanStatistics checked={self.files_checked}, "
                f"detected={self.files_detected}, hashes={self.hashes_computed}>")


# ======================
#  Run parameters
# ======================

DEFAULT_FLUSH_SIZE = 1000


@dataclass
class DetectionParams:
    """Parameters for a detection run with built-in validation."""
    roots: List[str]
    recursive: bool = False
    cache_file: Optional[str] = None
    delete_files: bool = False
    use_trash: bool = False
    flush_size: int = DEFAULT_FLUSH_SIZE

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        self.roots = [root for root in self.roots if root and root.strip()]
        if not self.roots:
            raise ValueError("At least one root directory is required")

        if self.use_trash and not self.delete_files:
            raise ValueError("Moving to trash requires deletion to be enabled")

        if self.flush_size <= 0:
            raise ValueError("Flush size must be positive")

        if not self.cache_file:
            self.cache_file = None
