"""
Tests for DetectionCommand: the end-to-end detection workflow
(scanner → candidate index → hash cache) without the CLI layer.
"""
from unittest import mock

import pytest

from detectdups.commands import DetectionCommand
from detectdups.core.cache import HashCache
from detectdups.core.index import CandidateIndex
from detectdups.core.exceptions import CacheWriteError
from detectdups.core.models import DetectionParams


def run(params, hasher=None, **callbacks):
    duplicates = []
    errors = []
    command = DetectionCommand(hasher=hasher)
    stats = command.execute(
        params,
        duplicate_callback=lambda path, existing, size: duplicates.append((path, existing, size)),
        error_callback=lambda path, error: errors.append((path, error)),
        **callbacks
    )
    return stats, duplicates, errors


class TestDetectionWorkflow:

    def test_top_level_scan(self, test_files, temp_dir, counting_hasher):
        stats, duplicates, errors = run(DetectionParams(roots=[str(temp_dir)]), hasher=counting_hasher)

        assert duplicates == [(str(test_files["b"]), str(test_files["a"]), 10)]
        assert errors == []
        assert stats.files_checked == 4
        assert stats.bytes_checked == 63
        assert stats.files_detected == 1
        assert stats.hashes_computed == 3
        # the only 33-byte file is never read
        assert str(test_files["unique"]) not in counting_hasher.calls

    def test_recursive_scan(self, test_files, temp_dir):
        stats, duplicates, _ = run(DetectionParams(roots=[str(temp_dir)], recursive=True))

        assert duplicates == [
            (str(test_files["b"]), str(test_files["a"]), 10),
            (str(test_files["d"]), str(test_files["a"]), 10),
        ]
        assert stats.files_checked == 6
        assert stats.files_detected == 2

    def test_first_root_wins_canonical(self, test_files, temp_dir):
        params = DetectionParams(roots=[str(temp_dir / "sub"), str(temp_dir)])
        _, duplicates, _ = run(params)

        assert duplicates == [
            (str(test_files["a"]), str(test_files["d"]), 10),
            (str(test_files["b"]), str(test_files["d"]), 10),
        ]

    def test_missing_root_reported_and_skipped(self, test_files, temp_dir):
        missing = temp_dir / "missing"
        params = DetectionParams(roots=[str(missing), str(temp_dir)])

        stats, duplicates, errors = run(params)

        assert len(errors) == 1
        assert errors[0][0] == str(missing)
        assert isinstance(errors[0][1], RuntimeError)
        assert stats.files_checked == 4
        assert len(duplicates) == 1

    def test_same_root_twice_reports_each_duplicate_once(self, test_files, temp_dir):
        params = DetectionParams(roots=[str(temp_dir), str(temp_dir / "sub" / "..")])

        stats, duplicates, _ = run(params)

        assert duplicates == [(str(test_files["b"]), str(test_files["a"]), 10)]
        assert stats.files_checked == 4
        assert stats.bytes_checked == 63
        assert stats.files_detected == 1

    def test_nested_root_of_recursive_run_is_scanned_once(self, test_files, temp_dir):
        params = DetectionParams(roots=[str(temp_dir / "sub"), str(temp_dir)], recursive=True)

        stats, duplicates, _ = run(params)

        assert [dup for dup, _, _ in duplicates] == [str(test_files["b"]), str(test_files["d"])]
        assert stats.files_checked == 6
        assert stats.files_detected == 2

    def test_error_while_checking_a_file_is_not_reported_as_skipped_root(self, test_files, temp_dir):
        errors = []
        with mock.patch.object(CandidateIndex, "check", side_effect=RuntimeError("unexpected")):
            with pytest.raises(RuntimeError, match="unexpected"):
                DetectionCommand().execute(
                    DetectionParams(roots=[str(temp_dir)]),
                    error_callback=lambda path, error: errors.append((path, error))
                )

        assert errors == []

    def test_stopped_flag_prevents_scanning(self, test_files, temp_dir):
        stats, duplicates, _ = run(DetectionParams(roots=[str(temp_dir)]), stopped_flag=lambda: True)

        assert stats.files_checked == 0
        assert duplicates == []

    def test_progress_callback_reports_final_count(self, test_files, temp_dir):
        progress = []
        run(
            DetectionParams(roots=[str(temp_dir)]),
            progress_callback=lambda stage, current, total: progress.append((stage, current, total))
        )

        assert progress[-1] == ("checking", 4, 4)

    def test_total_time_recorded(self, test_files, temp_dir):
        stats, _, _ = run(DetectionParams(roots=[str(temp_dir)]))
        assert stats.total_time >= 0.0


class TestDeletion:

    def test_delete_mode_removes_duplicates_only(self, test_files, temp_dir):
        params = DetectionParams(roots=[str(temp_dir)], recursive=True, delete_files=True)

        stats, _, _ = run(params)

        assert not test_files["b"].exists()
        assert not test_files["d"].exists()
        assert test_files["a"].exists()
        assert test_files["c"].exists()
        assert stats.files_deleted == 2

    def test_list_mode_keeps_everything(self, test_files, temp_dir):
        run(DetectionParams(roots=[str(temp_dir)], recursive=True))

        assert all(path.exists() for path in test_files.values())


class TestPersistentCache:

    def test_second_run_reuses_cached_hashes(self, test_files, temp_dir, counting_hasher):
        cache_file = str(temp_dir / "cache" / "hashes.db")
        params = DetectionParams(roots=[str(temp_dir)], cache_file=cache_file)

        first, _, _ = run(params, hasher=counting_hasher)
        counting_hasher.calls.clear()
        second, duplicates, _ = run(params, hasher=counting_hasher)

        assert first.hashes_computed == 3
        assert second.hashes_computed == 0
        assert second.cache_hits == 3
        assert counting_hasher.calls == []
        assert duplicates == [(str(test_files["b"]), str(test_files["a"]), 10)]

    def test_unusable_cache_location_runs_in_memory(self, test_files, temp_dir):
        blocker = temp_dir / "unique.txt"
        params = DetectionParams(roots=[str(temp_dir)], cache_file=str(blocker / "hashes.db"))

        stats, duplicates, _ = run(params)

        assert stats.hashes_computed == 3
        assert len(duplicates) == 1

    def test_cache_write_failure_stops_run(self, test_files, temp_dir):
        params = DetectionParams(roots=[str(temp_dir)])

        with mock.patch.object(HashCache, "write", side_effect=CacheWriteError("disk full")):
            with pytest.raises(CacheWriteError):
                run(params)
