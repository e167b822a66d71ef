"""
Shared fixtures for detection engine tests.
Creates isolated temporary directories with controlled test files,
plus instrumented collaborators (counting hasher, recording store).
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict, List, Tuple, Iterable, Optional
import sys

# Add src/ to sys.path so 'detectdups' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from detectdups.core.hasher import HasherImpl
from detectdups.core.exceptions import HashComputationError, StoreError


class CountingHasher(HasherImpl):
    """Real xxHash128 hasher that records every path it reads."""

    def __init__(self, failing_paths: Iterable[str] = ()):
        super().__init__()
        self.calls: List[str] = []
        self.failing_paths = set(failing_paths)

    def compute_full_hash(self, path: str) -> str:
        self.calls.append(path)
        if path in self.failing_paths:
            raise HashComputationError(path, "simulated read failure")
        return super().compute_full_hash(path)


class RecordingStore:
    """
    In-memory HashStore substitute recording begin/insert/commit calls.
    Operations listed in fail_on raise StoreError.
    """

    def __init__(self, rows: Optional[List[Tuple[str, str]]] = None, fail_on: Iterable[str] = ()):
        self.rows: List[Tuple[str, str]] = list(rows or [])
        self.buffer: List[Tuple[str, str]] = []
        self.fail_on = set(fail_on)
        self.begins = 0
        self.commits = 0
        self.closed = False
        self._open = False

    @property
    def in_transaction(self) -> bool:
        return self._open

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise StoreError(f"simulated {operation} failure")

    def create_schema(self) -> None:
        self._maybe_fail("create_schema")

    def load_all(self):
        self._maybe_fail("load_all")
        return iter(list(self.rows))

    def begin(self) -> None:
        self._maybe_fail("begin")
        self._open = True
        self.begins += 1

    def insert(self, digest: str, filename: str) -> None:
        self._maybe_fail("insert")
        self.buffer.append((digest, filename))

    def commit(self) -> None:
        self._maybe_fail("commit")
        self.rows.extend(self.buffer)
        self.buffer = []
        self._open = False
        self.commits += 1

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def counting_hasher() -> CountingHasher:
    return CountingHasher()


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for detection scenarios (names sort in creation order):
    - a.txt / b.txt: same size (10B) and content 'X' → b is a duplicate of a
    - c.txt: same size (10B), content 'Y' → new canonical entry
    - unique.txt: the only 33B file → never hashed
    - sub/d.txt: 10B of 'X' → duplicate of a, only found when recursive
    - sub/e.txt: the only 44B file
    """
    files = {}

    files["a"] = temp_dir / "a.txt"
    files["b"] = temp_dir / "b.txt"
    files["c"] = temp_dir / "c.txt"
    files["a"].write_bytes(b"X" * 10)
    files["b"].write_bytes(b"X" * 10)
    files["c"].write_bytes(b"Y" * 10)

    files["unique"] = temp_dir / "unique.txt"
    files["unique"].write_bytes(b"Z" * 33)

    subdir = temp_dir / "sub"
    subdir.mkdir()
    files["d"] = subdir / "d.txt"
    files["d"].write_bytes(b"X" * 10)
    files["e"] = subdir / "e.txt"
    files["e"].write_bytes(b"Q" * 44)

    return files
