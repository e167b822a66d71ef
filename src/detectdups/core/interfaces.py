"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the detection engine.
These protocols keep the Candidate Index and the Hash Cache independent of
concrete collaborators, so tests can swap in counting hashers or fake stores.

Key Components:
---------------
- HashAlgorithm: Streams a binary file object into a fixed-length hex digest.
- Hasher: Computes the digest of a whole file given its path.
- HashStore: Durable append-only table of (hash, filename) rows.
- FileScanner: Enumerates file paths below a root directory.
"""

from typing import Protocol, BinaryIO, Iterator, Tuple, Optional, Callable


class HashAlgorithm(Protocol):
    """
    Interface for content digests.

    Allows plugging in different hash functions without affecting the
    rest of the detection logic.
    """
    name: str

    @staticmethod
    def hash_stream(stream: BinaryIO) -> str:
        """Reads the stream to the end and returns its hex digest."""
        ...


class Hasher(Protocol):
    """Interface for hashing the full content of a file."""
    def compute_full_hash(self, path: str) -> str: ...


class HashStore(Protocol):
    """
    Interface for the persistent hash table.

    Rows are (hash, filename) pairs; there is no uniqueness constraint.
    """
    @property
    def in_transaction(self) -> bool: ...

    def create_schema(self) -> None: ...

    def load_all(self) -> Iterator[Tuple[str, str]]: ...

    def begin(self) -> None: ...

    def insert(self, digest: str, filename: str) -> None: ...

    def commit(self) -> None: ...

    def close(self) -> None: ...


class FileScanner(Protocol):
    """
    Interface for enumerating candidate files.
    """
    def validate_root(self) -> None:
        """Raise RuntimeError if the configured root is not a readable directory."""
        ...

    def scan(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        error_callback: Optional[Callable[[str, Exception], None]] = None
    ) -> Iterator[str]:
        """
        Yield the path of every file below the configured root.

        Args:
            stopped_flag: Function that returns True if the scan should stop.
            error_callback: Called with (directory, exception) for directories that cannot be read.
        """
        ...
