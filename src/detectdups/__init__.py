"""
detectdups — finds files with identical content and optionally removes the copies.

Core features:
- Size buckets with lazy hashing: a file is only read once another file of the same size shows up
- Persistent SQLite hash cache: unchanged paths are never rehashed on later runs
- Streamed xxHash128 content digests
- Optional deletion (permanent or to the system trash via send2trash)
- CLI interface for headless/server usage
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("detectdups")
except Exception:
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        import tomli as tomllib  # Python < 3.11: pip install tomli

    from pathlib import Path as _Path
    with open(_Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from detectdups.commands import DetectionCommand
from detectdups.core import (
    CandidateIndex, HashCache, SqliteHashStore, DetectionParams, ScanStatistics,
    HashResult, CacheWriteError, HashComputationError)
from detectdups.utils.convert_utils import ConvertUtils
from detectdups.services import FileService

__all__ = [
    "DetectionCommand",
    "CandidateIndex",
    "HashCache",
    "SqliteHashStore",
    "DetectionParams",
    "ScanStatistics",
    "HashResult",
    "CacheWriteError",
    "HashComputationError",
    "ConvertUtils",
    "FileService",
    "__version__",
]
