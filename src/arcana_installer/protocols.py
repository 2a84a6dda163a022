"""Protocol definitions for core abstractions.

Pipeline components depend on these interfaces rather than on concrete
classes, so tests can pass scripted input, fake filesystems and mocked
subprocess runners without patching module globals.

All concrete implementations satisfy these protocols structurally (duck typing).
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from arcana_installer.filesystem import IgnoreFunc


@runtime_checkable
class InputProvider(Protocol):
    """Protocol for reading user responses.

    The production implementation reads from the terminal; tests supply
    scripted answers.
    """

    @property
    def interactive(self) -> bool:
        """True when a human can answer prompts."""
        ...

    def ask(self, prompt: str) -> str:
        """Read one line of input.

        Args:
            prompt: Text shown before the input.

        Returns:
            The entered line (may be empty).
        """
        ...

    def confirm(self, prompt: str, default: bool = False) -> bool:
        """Ask a yes/no question.

        Args:
            prompt: Question text.
            default: Answer used on empty input.

        Returns:
            True for yes.
        """
        ...


@runtime_checkable
class SourceRepository(Protocol):
    """Protocol for git repository operations."""

    def clone(self, url: str, dest: Path, ref: str = "main") -> Path:
        """Clone a repository into dest.

        Args:
            url: Git repository URL.
            dest: Destination directory.
            ref: Branch/tag to checkout.

        Returns:
            Path to the clone.
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Protocol for filesystem operations.

    Abstracts the file I/O performed by the installer and uninstaller.
    """

    def read_text(self, path: Path) -> str:
        """Read text content from a file."""
        ...

    def write_text(self, path: Path, content: str) -> None:
        """Write text content to a file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if a path exists."""
        ...

    def is_dir(self, path: Path) -> bool:
        """Check if a path is a directory."""
        ...

    def mkdir(self, path: Path, parents: bool = False, exist_ok: bool = False) -> None:
        """Create a directory."""
        ...

    def rmtree(self, path: Path) -> None:
        """Remove a directory tree."""
        ...

    def copytree(self, src: Path, dst: Path, ignore: IgnoreFunc | None = None) -> None:
        """Copy a directory tree."""
        ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy a single file."""
        ...

    def make_executable(self, path: Path) -> None:
        """Mark a file executable."""
        ...
