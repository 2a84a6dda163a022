"""Filesystem abstraction for testability.

RealFileSystem wraps pathlib and shutil. Tests can substitute any object
that satisfies the FileSystem protocol.
"""

from __future__ import annotations

import fnmatch
import shutil
import stat
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path

IgnoreFunc = Callable[[str, list[str]], set[str]]


def exclusion_filter(patterns: Sequence[str], keep: Iterable[str] = ()) -> IgnoreFunc:
    """Build a copytree ignore callback from glob patterns.

    Args:
        patterns: Glob patterns matched against each entry name.
        keep: Names that are never ignored, even if a pattern matches.

    Returns:
        Callable suitable for shutil.copytree(ignore=...).
    """
    protected = set(keep)

    def _ignore(_directory: str, names: list[str]) -> set[str]:
        ignored: set[str] = set()
        for name in names:
            if name in protected:
                continue
            if any(fnmatch.fnmatch(name, pattern) for pattern in patterns):
                ignored.add(name)
        return ignored

    return _ignore


class RealFileSystem:
    """Production filesystem implementation.

    Satisfies the FileSystem protocol structurally.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file."""
        return path.read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        """Write text content to a file."""
        path.write_text(content, encoding="utf-8")

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        return path.is_dir()

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        path.mkdir(parents=parents, exist_ok=exist_ok)

    def rmtree(self, path: Path) -> None:
        """Remove a directory tree."""
        shutil.rmtree(path)

    def copytree(self, src: Path, dst: Path, ignore: IgnoreFunc | None = None) -> None:
        """Copy a directory tree, skipping entries selected by ignore."""
        shutil.copytree(src, dst, ignore=ignore)

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a single file with its metadata."""
        shutil.copy2(src, dst)

    def make_executable(self, path: Path) -> None:
        """Add execute permission for user, group and others."""
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
