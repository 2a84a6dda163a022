"""Base platform implementation with shared behavior.

Each operating system varies only in a handful of capabilities: executable
names, the package manager used to provision missing tools, and installation
hints. Everything else (home directory layout, subprocess invocation) is
shared here.

Pattern: Template Method - base class defines the shared operations,
subclasses provide the OS-specific steps.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

CLAUDE_CLI_PACKAGE = "@anthropic-ai/claude-code"


class BasePlatform(ABC):
    """Base class for operating-system capability providers."""

    name: str

    def __init__(self) -> None:
        """Initialize platform."""
        self._home_dir: Path | None = None

    @property
    def home_dir(self) -> Path:
        """Get the current user's home directory."""
        if self._home_dir is None:
            self._home_dir = Path.home()
        return self._home_dir

    @property
    def host_dir(self) -> Path:
        """Get the host assistant's configuration directory.

        Returns:
            Path to ~/.claude/
        """
        return self.home_dir / ".claude"

    @property
    def skills_dir(self) -> Path:
        """Get the default installation root for bundles.

        Returns:
            Path to ~/.claude/skills/
        """
        return self.host_dir / "skills"

    def executable(self, tool: str) -> str:
        """Get the executable name for a tool on this platform."""
        return tool

    def which(self, tool: str) -> str | None:
        """Locate a tool on PATH.

        Args:
            tool: Logical tool name (git, node, npm, claude).

        Returns:
            Full path to the executable, or None if not found.
        """
        return shutil.which(self.executable(tool))

    def run(
        self,
        args: Sequence[str],
        cwd: Path | None = None,
        capture: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        """Run a subprocess to completion.

        Args:
            args: Command line; args[0] is resolved through executable().
            cwd: Working directory.
            capture: Capture stdout/stderr instead of inheriting the terminal.

        Returns:
            Completed process. Non-zero exit codes are not raised.

        Raises:
            FileNotFoundError: If the executable does not exist.
        """
        command = [self.executable(args[0]), *args[1:]]
        logger.debug("Running %s (cwd=%s)", command, cwd)
        return subprocess.run(
            command,
            cwd=cwd,
            check=False,
            capture_output=capture,
            text=True,
        )

    def install_commands(self, tool: str) -> list[list[str]] | None:
        """Get the commands that provision a missing tool.

        Args:
            tool: Logical tool name.

        Returns:
            Commands to run in order, or None if no automatic install exists.
        """
        if tool == "claude":
            return [["npm", "install", "-g", CLAUDE_CLI_PACKAGE]]
        return self.system_install_commands(tool)

    @abstractmethod
    def system_install_commands(self, tool: str) -> list[list[str]] | None:
        """Get OS package-manager commands for a tool."""
        ...

    @abstractmethod
    def install_hint(self, tool: str) -> str:
        """Get a human-readable manual installation hint for a tool."""
        ...
