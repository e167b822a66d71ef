"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/normalizer.py
Path canonicalization for root directories and path comparison keys.
"""

import os
from functools import lru_cache
from typing import List


def normalize_path(path: str) -> str:
    """
    Canonicalize a user supplied path.

    Normalization rules:
    - Expand a leading "~"
    - Make the path absolute against the current working directory
    - Collapse "." and ".." components and duplicate separators
    - UNC prefixes ("\\\\server\\share") are kept intact by the platform's os.path

    Args:
        path: Relative or absolute path

    Returns:
        str: Absolute, normalized path

    Examples:
        "./photos"            → "<cwd>/photos"
        "photos/../music/."   → "<cwd>/music"
        ".."                  → parent of <cwd>
    """
    if not path:
        raise ValueError("Path cannot be empty")
    return os.path.normpath(os.path.abspath(os.path.expanduser(path)))


@lru_cache(maxsize=8192)
def _key_of_absolute(path: str) -> str:
    return os.path.normcase(os.path.normpath(path))


def path_key(path: str) -> str:
    """
    Comparison key for a path, following the platform's case rules:
    case-insensitive on Windows (normcase lowers it), exact on POSIX.
    Two paths denote the same file for the engine iff their keys are equal.
    """
    if not os.path.isabs(path):
        path = os.path.abspath(path)
    return _key_of_absolute(path)


def same_file_path(first: str, second: str) -> bool:
    """True if both paths have the same comparison key (see path_key)."""
    return path_key(first) == path_key(second)


def distinct_roots(roots: List[str], recursive: bool = False) -> List[str]:
    """
    Normalizes root directories and drops the ones that would be scanned twice.

    Exact repeats are always dropped. When recursive, a root inside an earlier
    root is dropped too; a root containing earlier roots takes the place of
    the first of them.

    Examples:
        ["photos", "./photos"]            → ["<cwd>/photos"]
        ["photos", "photos/2024"], True   → ["<cwd>/photos"]
        ["photos/2024", "photos"], True   → ["<cwd>/photos"]
    """
    kept: List[str] = []
    for root in roots:
        root = normalize_path(root)
        key = path_key(root)
        if any(path_key(other) == key for other in kept):
            continue
        if recursive:
            if any(_is_within(key, path_key(other)) for other in kept):
                continue
            nested = [i for i, other in enumerate(kept) if _is_within(path_key(other), key)]
            if nested:
                kept[nested[0]] = root
                kept = [other for i, other in enumerate(kept) if i not in nested[1:]]
                continue
        kept.append(root)
    return kept


def _is_within(key: str, directory_key: str) -> bool:
    return key.startswith(os.path.join(directory_key, ""))
