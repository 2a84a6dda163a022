"""Delegation of an entire run into the Windows Subsystem for Linux."""

from __future__ import annotations

import logging

from arcana_installer.errors import BridgeError
from arcana_installer.platforms import Platform

logger = logging.getLogger(__name__)

WSL_TOOL = "wsl"

ACTION_SCRIPTS = {
    "install": "install.sh",
    "uninstall": "uninstall.sh",
}

_PROVISION_HINT = (
    "Install WSL and a Linux distribution from an elevated PowerShell:\n"
    "    wsl --install -d Ubuntu\n"
    "then restart Windows and run the installer again."
)


class EnvironmentBridge:
    """Runs the native-shell installation flow inside WSL.

    The decision to bridge is one-shot: once delegated, the exit status of the
    WSL run is the exit status of this process and nothing runs natively.
    """

    def __init__(self, platform: Platform, command_template: str, script_base_url: str) -> None:
        """Initialize the bridge.

        Args:
            platform: OS capability provider used to run wsl.
            command_template: Shell command run inside WSL. Receives
                {script_url} and {args} placeholders.
            script_base_url: Raw URL of the directory holding the shell entry points.
        """
        self.platform = platform
        self.command_template = command_template
        self.script_base_url = script_base_url.rstrip("/")

    def list_distributions(self) -> list[str]:
        """List registered WSL distributions.

        Returns:
            Distribution names; empty if WSL is missing or reports none.
        """
        if self.platform.which(WSL_TOOL) is None:
            return []
        try:
            result = self.platform.run([WSL_TOOL, "--list", "--quiet"], capture=True)
        except FileNotFoundError:
            return []
        if result.returncode != 0:
            logger.debug("wsl --list failed: %s", result.stderr)
            return []
        # wsl.exe writes UTF-16LE, which shows up as interleaved NULs
        output = (result.stdout or "").replace("\x00", "")
        return [line.strip() for line in output.splitlines() if line.strip()]

    def ensure_available(self) -> list[str]:
        """Verify WSL is usable.

        Returns:
            Registered distributions.

        Raises:
            BridgeError: If WSL is missing or has no distribution.
        """
        if self.platform.which(WSL_TOOL) is None:
            raise BridgeError("WSL is not installed on this system.", remediation=_PROVISION_HINT)
        distributions = self.list_distributions()
        if not distributions:
            raise BridgeError(
                "WSL has no Linux distribution registered.", remediation=_PROVISION_HINT
            )
        logger.debug("WSL distributions: %s", distributions)
        return distributions

    def build_command(self, action: str, select_all: bool) -> str:
        """Build the shell command executed inside WSL.

        Args:
            action: "install" or "uninstall".
            select_all: Forward the --all flag.

        Returns:
            Shell command string.
        """
        script_url = f"{self.script_base_url}/{ACTION_SCRIPTS[action]}"
        args = " --all" if select_all else ""
        return self.command_template.format(script_url=script_url, args=args)

    def delegate(self, action: str, select_all: bool) -> int:
        """Run the operation inside WSL.

        Args:
            action: "install" or "uninstall".
            select_all: Forward the --all flag.

        Returns:
            Exit code of the WSL run.

        Raises:
            BridgeError: If WSL is unavailable.
        """
        self.ensure_available()
        command = self.build_command(action, select_all)
        try:
            result = self.platform.run([WSL_TOOL, "-e", "bash", "-lc", command])
        except FileNotFoundError as e:
            raise BridgeError(
                "WSL could not be started.", remediation=_PROVISION_HINT
            ) from e
        return result.returncode
