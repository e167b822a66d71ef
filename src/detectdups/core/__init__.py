"""
Core detection engine — candidate index, hash cache, hash store, hasher and scanner.

This package contains the performance-critical foundation of detectdups:
- CandidateIndex: size buckets with lazy hashing, reports duplicates
- HashCache: in-memory digest lookups with batched writes to the store
- SqliteHashStore: append-only (hash, filename) table
- HasherImpl + XXHashAlgorithmImpl: streamed xxHash128 whole-file digests
- FileScannerImpl: directory enumeration, optionally recursive
- Models: bucket entries, SizeBucket, HashResult, ScanStatistics, DetectionParams

All components are plain synchronous Python, suitable for CLI and library usage.
"""

from .scanner import FileScannerImpl
from .hasher import HasherImpl, XXHashAlgorithmImpl
from .store import SqliteHashStore
from .cache import HashCache
from .index import CandidateIndex
from .normalizer import normalize_path, path_key, same_file_path, distinct_roots
from .exceptions import DetectDupsError, HashComputationError, StoreError, CacheWriteError
from .models import (
    Unhashed, Hashed, SizeBucket, HashResult, ScanStatistics, DetectionParams)

__all__ = [
    "FileScannerImpl",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "SqliteHashStore",
    "HashCache",
    "CandidateIndex",
    "normalize_path",
    "path_key",
    "same_file_path",
    "distinct_roots",
    "DetectDupsError",
    "HashComputationError",
    "StoreError",
    "CacheWriteError",
    "Unhashed",
    "Hashed",
    "SizeBucket",
    "HashResult",
    "ScanStatistics",
    "DetectionParams",
]
