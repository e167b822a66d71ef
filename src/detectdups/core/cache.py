"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/cache.py
Hash Cache: in-memory digest lookups backed by a persistent hash store.

Hashing a file is by far the most expensive operation of a run, so digests
computed in previous runs are loaded once at startup and reused by path.
New digests are appended to the store inside one open transaction that is
committed every FLUSH_SIZE writes and at the end of the run.

TRANSACTION STATES
------------------
Closed -> Open   : first write after start or after the previous flush
Open   -> Closed : FLUSH_SIZE-th buffered write (automatic flush) or flush()
flush() while Closed is a no-op.

FAILURE SEMANTICS
-----------------
• Store errors while initializing: logged, the cache stays in-memory only
• Store errors while writing/committing: raised as CacheWriteError
"""

import logging
import time
from typing import Dict, Optional

from detectdups.core.exceptions import CacheWriteError, StoreError, HashComputationError
from detectdups.core.hasher import HasherImpl
from detectdups.core.interfaces import Hasher, HashStore
from detectdups.core.models import HashResult, DEFAULT_FLUSH_SIZE
from detectdups.core.store import SqliteHashStore
from detectdups.core.normalizer import path_key

logger = logging.getLogger(__name__)


class HashCache:
    """
    Owns the in-memory path -> digest map and the connection/transaction
    to the persistent store.

    Attributes:
        hasher: Hash primitive used when a path is not cached
        flush_size: Number of buffered writes that triggers an automatic commit
    """

    FLUSH_SIZE = DEFAULT_FLUSH_SIZE

    def __init__(self, hasher: Optional[Hasher] = None, flush_size: int = FLUSH_SIZE):
        if flush_size <= 0:
            raise ValueError("Flush size must be positive")
        self.hasher = hasher or HasherImpl()
        self.flush_size = flush_size
        self._values: Dict[str, str] = {}
        self._store: Optional[HashStore] = None
        self._pending = 0

    # =============================
    # Lifecycle
    # =============================
    def initialize(self, store_location: Optional[str]) -> bool:
        """
        Opens (creating if absent) the store at store_location and loads every known hash.

        Returns:
            True if persistence is enabled, False if the cache runs in-memory only
        """
        if not store_location:
            return False

        logger.info(f'About to read cache from "{store_location}"')
        try:
            store = SqliteHashStore(store_location)
        except StoreError as e:
            logger.warning(f"Hash cache disabled: {e}")
            return False
        return self.initialize_with(store)

    def initialize_with(self, store: HashStore) -> bool:
        """Loads every row of an already opened store and keeps it for writing."""
        start_time = time.time()
        loaded = 0
        try:
            store.create_schema()
            for digest, filename in store.load_all():
                self._values[path_key(filename)] = digest
                loaded += 1
        except StoreError as e:
            logger.warning(f"Hash cache disabled, unable to read {store!r}: {e}")
            try:
                store.close()
            except StoreError:
                logger.debug("Ignoring close failure of unusable store", exc_info=True)
            return False

        self._store = store
        if loaded == 0:
            logger.info("Cache is empty as of yet...")
        else:
            logger.info(f"Read {loaded} hashes from the cache in {time.time() - start_time:.3f}s...")
        return True

    def close(self) -> None:
        """Commits pending writes and releases the store."""
        try:
            self.flush()
        finally:
            if self._store is not None:
                store, self._store = self._store, None
                try:
                    store.close()
                except StoreError as e:
                    raise CacheWriteError(str(e)) from e

    def __enter__(self) -> "HashCache":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =============================
    # Lookups
    # =============================
    def lookup(self, path: str) -> Optional[str]:
        """Exact-path lookup (case-insensitive on Windows). Pure read, no I/O."""
        return self._values.get(path_key(path))

    def compute_or_lookup(self, path: str) -> str:
        """
        Returns the cached digest, or hashes the file and records the result.

        Raises:
            HashComputationError: If the file cannot be opened or read to completion
            CacheWriteError: If the new digest cannot be stored
        """
        digest = self.lookup(path)
        if digest is not None:
            return digest

        digest = self.hasher.compute_full_hash(path)
        self.write(digest, path)
        return digest

    def try_compute(self, path: str) -> HashResult:
        """
        Same as compute_or_lookup, but hashing failures are returned instead of raised.
        CacheWriteError still propagates.
        """
        digest = self.lookup(path)
        if digest is not None:
            return HashResult.success(path, digest, cached=True)
        try:
            digest = self.hasher.compute_full_hash(path)
        except HashComputationError as e:
            return HashResult.failure(path, e)
        self.write(digest, path)
        return HashResult.success(path, digest)

    # =============================
    # Writes
    # =============================
    def write(self, digest: str, path: str) -> None:
        """Records a digest in memory and queues a durable insert."""
        self._values[path_key(path)] = digest
        if self._store is None:
            return

        try:
            if not self._store.in_transaction:
                self._store.begin()
            self._store.insert(digest, path)
        except StoreError as e:
            raise CacheWriteError(f"Unable to write hash for '{path}': {e}") from e

        self._pending += 1
        if self._pending >= self.flush_size:
            self.flush()

    def flush(self) -> None:
        """Commits the open transaction, if any."""
        if self._store is None or not self._store.in_transaction:
            return
        try:
            self._store.commit()
        except StoreError as e:
            raise CacheWriteError(f"Unable to commit {self._pending} cached hashes: {e}") from e
        logger.debug(f"Committed {self._pending} hashes to the cache")
        self._pending = 0

    # =============================
    # State
    # =============================
    @property
    def persistent(self) -> bool:
        return self._store is not None

    @property
    def in_transaction(self) -> bool:
        return self._store is not None and self._store.in_transaction

    @property
    def pending_writes(self) -> int:
        return self._pending

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, path: str) -> bool:
        return path_key(path) in self._values
