"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements whole-file hashing with pluggable hash algorithms.

Files are streamed in fixed-size chunks, so memory use does not depend on
file size. Each file handle is opened, fully consumed and closed inside a
single call.
"""

import logging
from typing import BinaryIO

import xxhash

from detectdups.core.interfaces import Hasher, HashAlgorithm
from detectdups.core.exceptions import HashComputationError

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    """xxHash128: 128-bit digest rendered as 32 hex characters."""
    name = "xxh128"

    @staticmethod
    def hash_stream(stream: BinaryIO) -> str:
        digest = xxhash.xxh128()
        for chunk in iter(lambda: stream.read(READ_CHUNK_SIZE), b""):
            digest.update(chunk)
        return digest.hexdigest()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    """

    def __init__(self, algorithm: HashAlgorithm = None):
        self.algorithm = algorithm or XXHashAlgorithmImpl()

    def compute_full_hash(self, path: str) -> str:
        """
        Computes the digest of the entire file.

        Raises:
            HashComputationError: If the file cannot be opened or read to completion
        """
        try:
            with open(path, 'rb') as f:
                return self.algorithm.hash_stream(f)
        except OSError as e:
            logger.debug(f"Unable to calculate {self.algorithm.name} hash for '{path}': {e}")
            raise HashComputationError(path, str(e)) from e
