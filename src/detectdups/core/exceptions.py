"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/exceptions.py
Error taxonomy for the detection engine.
"""


class DetectDupsError(Exception):
    """Base class for all errors raised by detectdups."""


class HashComputationError(DetectDupsError, OSError):
    """A file could not be opened or read to completion while hashing."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Unable to calculate hash for '{path}': {reason}")
        self.path = path
        self.reason = reason


class StoreError(DetectDupsError):
    """The persistent hash store failed."""


class CacheWriteError(StoreError):
    """
    Buffered cache writes could not be stored or committed.
    Fatal: the run must stop instead of silently losing hashes.
    """
