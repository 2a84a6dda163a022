"""Prerequisite checks for the tools the pipeline and the bundles rely on."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from arcana_installer.errors import PrerequisiteError
from arcana_installer.platforms import Platform
from arcana_installer.protocols import InputProvider
from arcana_installer.tui import TUI

logger = logging.getLogger(__name__)

# Tools the installer itself needs
REQUIRED_TOOLS = ["git"]

# Tools consumed by installed bundles; offered for automatic installation
OFFERABLE_TOOLS = {
    "node": "Node.js",
    "claude": "Claude Code CLI",
}


@dataclass
class PrerequisiteReport:
    """Result of a prerequisite check.

    Attributes:
        installed: Tools that were installed automatically during the check.
        warnings: Non-fatal problems to surface in the final summary.
    """

    installed: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class PrerequisiteChecker:
    """Verifies required tools and offers to install recommended ones.

    With auto_install disabled, missing recommended tools only produce a
    warning and no prompt is shown.
    """

    def __init__(
        self,
        platform: Platform,
        input_provider: InputProvider,
        tui: TUI,
        auto_install: bool = True,
    ) -> None:
        """Initialize the checker.

        Args:
            platform: OS capability provider (tool lookup, subprocesses).
            input_provider: Source of yes/no answers.
            tui: Output for progress messages.
            auto_install: Offer to install missing recommended tools.
        """
        self.platform = platform
        self.input = input_provider
        self.tui = tui
        self.auto_install = auto_install

    def check_required(self) -> None:
        """Fail fast when a required tool is missing.

        Raises:
            PrerequisiteError: If any required tool is not on PATH.
        """
        for tool in REQUIRED_TOOLS:
            if self.platform.which(tool) is None:
                raise PrerequisiteError(
                    f"{tool} is not installed. Please install {tool} first.",
                    remediation=self.platform.install_hint(tool),
                )

    def check(self, require_vcs: bool = True) -> PrerequisiteReport:
        """Run all checks.

        Args:
            require_vcs: Enforce the required tools. Only a run that has to
                fetch the catalog needs git.

        Returns:
            Report of automatic installs and warnings.

        Raises:
            PrerequisiteError: If a required tool is missing.
        """
        self.tui.show_info("Checking prerequisites...")
        if require_vcs:
            self.check_required()

        report = PrerequisiteReport()
        for tool, label in OFFERABLE_TOOLS.items():
            if self.platform.which(tool) is not None:
                continue
            if self._offer_install(tool, label):
                report.installed.append(tool)
            else:
                report.warnings.append(
                    f"{label} is not available; some skills may not work. "
                    f"{self.platform.install_hint(tool)}"
                )

        if not report.warnings:
            self.tui.show_success("Prerequisites check passed")
        return report

    def _offer_install(self, tool: str, label: str) -> bool:
        """Offer and perform an automatic install.

        Returns:
            True if the tool is available afterwards.
        """
        self.tui.show_warning(f"{label} is not installed.")
        if not self.auto_install:
            return False

        if self.input.interactive:
            accepted = self.input.confirm(f"  Install {label} automatically?", default=True)
        else:
            self.tui.show_info(f"  Auto-installing {label} (pipe mode)...")
            accepted = True
        if not accepted:
            return False

        commands = self.platform.install_commands(tool)
        if not commands:
            self.tui.show_warning(f"No supported package manager found for {label}.")
            return False

        self.tui.show_info(f"Installing {label}...")
        for command in commands:
            try:
                result = self.platform.run(command)
            except FileNotFoundError:
                logger.debug("Installer command not found: %s", command)
                return False
            if result.returncode != 0:
                logger.debug("%s exited with %s", command, result.returncode)
                return False

        if self.platform.which(tool) is None:
            return False
        self.tui.show_success(f"{label} installed successfully")
        return True
