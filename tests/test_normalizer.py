"""
Unit tests for path normalization and comparison keys.
"""
import os
import sys

import pytest

from detectdups.core.normalizer import normalize_path, path_key, same_file_path, distinct_roots


class TestNormalizePath:

    def test_relative_path_becomes_absolute(self):
        assert normalize_path("photos") == os.path.join(os.getcwd(), "photos")

    def test_dot_components_are_collapsed(self):
        assert normalize_path("photos/../music/.") == os.path.join(os.getcwd(), "music")

    def test_parent_of_cwd(self):
        assert normalize_path("..") == os.path.dirname(os.getcwd())

    def test_home_is_expanded(self):
        assert normalize_path("~") == os.path.normpath(os.path.expanduser("~"))

    def test_empty_path_rejected(self):
        with pytest.raises(ValueError):
            normalize_path("")


class TestPathKey:

    @pytest.mark.skipif(sys.platform != "win32", reason="Windows paths are case-insensitive")
    def test_key_ignores_case_on_windows(self):
        assert path_key("C:\\Data\\IMG.JPG") == path_key("c:\\data\\img.jpg")
        assert same_file_path("C:\\Data\\A.TXT", "c:\\data\\a.txt")

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX paths are case-sensitive")
    def test_key_keeps_case_on_posix(self):
        assert path_key("/Data/Photos/IMG.JPG") != path_key("/data/photos/img.jpg")
        assert not same_file_path("/data/A.txt", "/data/a.txt")

    def test_key_of_relative_path_matches_absolute_spelling(self):
        absolute = os.path.join(os.getcwd(), "Some", "File.txt")

        assert path_key("Some/File.txt") == path_key(absolute)
        assert path_key("./Some/../Some/File.txt") == path_key(absolute)

    def test_different_paths_have_different_keys(self):
        assert path_key("/data/a.txt") != path_key("/data/a.txt.bak")

    def test_same_file_path(self):
        assert same_file_path("/data/./a.txt", "/data/a.txt")
        assert not same_file_path("/data/a.txt", "/data/b.txt")


class TestDistinctRoots:

    def test_roots_are_normalized(self):
        assert distinct_roots(["photos"]) == [os.path.join(os.getcwd(), "photos")]

    def test_exact_repeats_are_dropped(self):
        photos = os.path.join(os.getcwd(), "photos")
        music = os.path.join(os.getcwd(), "music")

        assert distinct_roots(["photos", "music", "./photos", photos]) == [photos, music]

    def test_nested_roots_kept_when_not_recursive(self):
        photos = os.path.join(os.getcwd(), "photos")
        year = os.path.join(photos, "2024")

        assert distinct_roots(["photos", "photos/2024"]) == [photos, year]

    def test_root_inside_earlier_root_dropped_when_recursive(self):
        photos = os.path.join(os.getcwd(), "photos")

        assert distinct_roots(["photos", "photos/2024"], recursive=True) == [photos]

    def test_parent_root_replaces_earlier_nested_roots_when_recursive(self):
        photos = os.path.join(os.getcwd(), "photos")
        music = os.path.join(os.getcwd(), "music")

        roots = ["photos/2024", "music", "photos/2023", "photos"]
        assert distinct_roots(roots, recursive=True) == [photos, music]

    def test_sibling_with_common_prefix_is_not_nested(self):
        photos = os.path.join(os.getcwd(), "photos")
        photos_old = os.path.join(os.getcwd(), "photos_old")

        assert distinct_roots(["photos", "photos_old"], recursive=True) == [photos, photos_old]
