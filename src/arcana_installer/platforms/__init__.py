"""Operating-system capability providers."""

from __future__ import annotations

import sys
from pathlib import Path
from subprocess import CompletedProcess
from typing import Protocol, Sequence, runtime_checkable

from .base import BasePlatform
from .posix import PosixPlatform
from .windows import WindowsPlatform


@runtime_checkable
class Platform(Protocol):
    """Protocol defining the per-OS capabilities the installer relies on.

    New operating systems can be supported by adding an implementation
    without modifying the pipeline.
    """

    name: str

    @property
    def home_dir(self) -> Path:
        """Get the current user's home directory."""
        raise NotImplementedError

    @property
    def host_dir(self) -> Path:
        """Get the host assistant's configuration directory."""
        raise NotImplementedError

    @property
    def skills_dir(self) -> Path:
        """Get the default installation root for bundles."""
        raise NotImplementedError

    def executable(self, tool: str) -> str:
        """Get the executable name for a tool."""
        raise NotImplementedError

    def which(self, tool: str) -> str | None:
        """Locate a tool on PATH."""
        raise NotImplementedError

    def run(
        self, args: Sequence[str], cwd: Path | None = None, capture: bool = False
    ) -> CompletedProcess[str]:
        """Run a subprocess to completion without raising on failure."""
        raise NotImplementedError

    def install_commands(self, tool: str) -> list[list[str]] | None:
        """Get the commands that provision a missing tool."""
        raise NotImplementedError

    def install_hint(self, tool: str) -> str:
        """Get a manual installation hint."""
        raise NotImplementedError


__all__ = [
    "BasePlatform",
    "Platform",
    "PosixPlatform",
    "WindowsPlatform",
    "get_platform",
]


def get_platform(system: str | None = None) -> Platform:
    """Get the capability provider for an operating system.

    Args:
        system: A sys.platform value. Defaults to the running interpreter's.

    Returns:
        Platform instance.

    Raises:
        ValueError: If the operating system is not supported.
    """
    system = system or sys.platform
    if system == "win32":
        return WindowsPlatform()
    if system == "darwin":
        return PosixPlatform("darwin")
    if system.startswith("linux"):
        return PosixPlatform("linux")
    raise ValueError(f"Unsupported platform: {system}. Supported: darwin, linux, win32")
