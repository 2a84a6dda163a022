"""macOS and Linux platform implementation."""

from __future__ import annotations

import shutil

from arcana_installer.platforms.base import CLAUDE_CLI_PACKAGE, BasePlatform

# Package managers probed in order on Linux
LINUX_PACKAGE_MANAGERS = ["apt-get", "yum", "pacman"]

_LINUX_PACKAGES = {
    "apt-get": {"node": ["nodejs", "npm"], "git": ["git"]},
    "yum": {"node": ["nodejs"], "git": ["git"]},
    "pacman": {"node": ["nodejs", "npm"], "git": ["git"]},
}

_LINUX_INSTALL = {
    "apt-get": ["sudo", "apt-get", "install", "-y"],
    "yum": ["sudo", "yum", "install", "-y"],
    "pacman": ["sudo", "pacman", "-S", "--noconfirm"],
}


class PosixPlatform(BasePlatform):
    """Capability provider for macOS (darwin) and Linux."""

    def __init__(self, system: str = "linux") -> None:
        """Initialize POSIX platform.

        Args:
            system: Either "darwin" or "linux".
        """
        super().__init__()
        self.name = system

    @property
    def is_macos(self) -> bool:
        """True when running on macOS."""
        return self.name == "darwin"

    def package_manager(self) -> str | None:
        """Detect the system package manager.

        Returns:
            Package manager command name, or None if none is available.
        """
        if self.is_macos:
            return "brew" if shutil.which("brew") else None
        for manager in LINUX_PACKAGE_MANAGERS:
            if shutil.which(manager):
                return manager
        return None

    def system_install_commands(self, tool: str) -> list[list[str]] | None:
        """Get package-manager commands for node or git."""
        manager = self.package_manager()
        if manager is None:
            return None
        if manager == "brew":
            formula = {"node": "node", "git": "git"}.get(tool)
            return [["brew", "install", formula]] if formula else None
        packages = _LINUX_PACKAGES[manager].get(tool)
        if not packages:
            return None
        return [[*_LINUX_INSTALL[manager], *packages]]

    def install_hint(self, tool: str) -> str:
        """Get a manual installation hint."""
        if tool == "git":
            if self.is_macos:
                return "Install via: brew install git (or xcode-select --install)"
            return "Install via: sudo apt install git (Debian/Ubuntu) or sudo yum install git (RHEL/CentOS)"
        if tool == "node":
            return "Install from: https://nodejs.org/"
        if tool == "claude":
            return f"Install: npm install -g {CLAUDE_CLI_PACKAGE}"
        return f"Install {tool} with your system package manager"
