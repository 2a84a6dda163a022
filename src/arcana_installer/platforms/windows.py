"""Windows platform implementation."""

from __future__ import annotations

import shutil

from arcana_installer.platforms.base import CLAUDE_CLI_PACKAGE, BasePlatform

# npm-installed tools are .cmd shims on Windows
_CMD_SHIMS = {"npm", "npx", "claude"}

_WINGET_IDS = {
    "node": "OpenJS.NodeJS.LTS",
    "git": "Git.Git",
}


class WindowsPlatform(BasePlatform):
    """Capability provider for native Windows."""

    name = "win32"

    def executable(self, tool: str) -> str:
        """Map npm-installed tools to their .cmd shims."""
        if tool in _CMD_SHIMS:
            return f"{tool}.cmd"
        return tool

    def system_install_commands(self, tool: str) -> list[list[str]] | None:
        """Get winget commands for node or git."""
        package_id = _WINGET_IDS.get(tool)
        if package_id is None or not shutil.which("winget"):
            return None
        return [
            [
                "winget",
                "install",
                "--id",
                package_id,
                "-e",
                "--accept-source-agreements",
                "--accept-package-agreements",
            ]
        ]

    def install_hint(self, tool: str) -> str:
        """Get a manual installation hint."""
        if tool == "git":
            return "Install via: winget install Git.Git (or https://git-scm.com/download/win)"
        if tool == "node":
            return "Install via: winget install OpenJS.NodeJS.LTS (or https://nodejs.org/)"
        if tool == "claude":
            return f"Install: npm install -g {CLAUDE_CLI_PACKAGE}"
        return f"Install {tool} with winget"
