"""Depth-limited directory walking and file hashing."""

import hashlib
import os
from collections.abc import Callable, Iterator
from pathlib import Path


def walk_files(
    root: Path,
    max_depth: int,
    skip_dir: Callable[[Path], bool] | None = None,
) -> Iterator[Path]:
    """Yield files under root in lexical order, at most max_depth levels down.

    Files directly in root are depth 0. Directories are visited in sorted
    order so repeated walks over the same tree yield the same sequence.
    """
    root_depth = len(root.parts)
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        depth = len(current.parts) - root_depth
        dirnames.sort()
        if depth >= max_depth:
            dirnames.clear()
        elif skip_dir is not None:
            dirnames[:] = [d for d in dirnames if not skip_dir(current / d)]
        for name in sorted(filenames):
            yield current / name


def find_by_suffix(root: Path, suffix: str, max_depth: int) -> list[Path]:
    """All files under root whose name ends in suffix (case-insensitive)."""
    suffix = suffix.lower()
    return [p for p in walk_files(root, max_depth) if p.name.lower().endswith(suffix)]


def file_hash(file_path: Path) -> str:
    """Compute SHA-256 hash of a file."""
    sha256 = hashlib.sha256()
    with open(file_path, "rb") as f:
        for chunk in iter(lambda: f.read(8192), b""):
            sha256.update(chunk)
    return sha256.hexdigest()
